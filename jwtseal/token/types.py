"""Token datatypes."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from ..claims.decode import decode_claims
from ..claims.types import StandardClaims
from ..errors import TokenError

RESERVED_HEADER_FIELDS = frozenset({"alg", "typ"})


@dataclass(frozen=True)
class Header:
    """JOSE header; ``alg`` selects the algorithm registry entry."""

    alg: Any
    typ: Optional[str] = "JWT"
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        clash = RESERVED_HEADER_FIELDS.intersection(self.extra)
        if clash:
            raise ValueError(f"extra header fields may not redefine {sorted(clash)}")
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def kid(self) -> Optional[str]:
        return self.extra.get("kid")

    def to_json_object(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"alg": self.alg}
        if self.typ is not None:
            data["typ"] = self.typ
        data.update(self.extra)
        return data

    @classmethod
    def from_json_object(cls, data: Mapping[str, Any]) -> "Header":
        extra = {k: v for k, v in data.items() if k not in RESERVED_HEADER_FIELDS}
        return cls(alg=data.get("alg"), typ=data.get("typ"), extra=extra)


@dataclass(frozen=True)
class CompactToken:
    """The three still-encoded segments of a compact serialization."""

    header_segment: bytes
    payload_segment: bytes
    signature_segment: bytes

    @property
    def signing_input(self) -> bytes:
        return self.header_segment + b"." + self.payload_segment

    def encode(self) -> bytes:
        return self.signing_input + b"." + self.signature_segment

    def __str__(self) -> str:
        return self.encode().decode("ascii")


@dataclass(frozen=True)
class DecodedToken:
    """A parsed token whose signature has not been checked."""

    compact: CompactToken
    header: Header
    header_bytes: bytes
    payload: bytes
    signature: bytes

    @property
    def text(self) -> str:
        return str(self.compact)


@dataclass(frozen=True)
class VerifiedToken:
    """Result of a successful verification pass."""

    token: str
    header: Header
    header_bytes: bytes
    payload: bytes
    signature: bytes
    standard_claims: StandardClaims
    claims: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    def decode(self, destination: Any = dict, *, strict: bool = False, required: Iterable[str] = ()) -> Any:
        """Decode the payload into a mapping or record, see :func:`decode_claims`."""
        return decode_claims(self.payload, destination, strict=strict, required=required)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    token_id: str
    header: Header
    claims: Mapping[str, Any] = field(hash=False, compare=False)
    standard_claims: StandardClaims

    def __post_init__(self) -> None:
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: str
    token: Optional[VerifiedToken] = None
    error: Optional[TokenError] = None
