"""Registered (standard) JWT claims."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..errors import ClaimsDecodeError

NOT_BEFORE = "nbf"
ISSUED_AT = "iat"
EXPIRY = "exp"
ID = "jti"
ISSUER = "iss"
SUBJECT = "sub"
AUDIENCE = "aud"

TIME_CLAIMS = (NOT_BEFORE, ISSUED_AT, EXPIRY)
STRING_CLAIMS = (ID, ISSUER, SUBJECT)
STANDARD_CLAIM_NAMES = frozenset(TIME_CLAIMS + STRING_CLAIMS + (AUDIENCE,))


def timestamp_claim(name: str, value: Any) -> Optional[int]:
    """Normalize a time claim to integer epoch seconds."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ClaimsDecodeError(f"claim {name!r} must be a numeric timestamp")
    if not math.isfinite(value):
        raise ClaimsDecodeError(f"claim {name!r} must be a finite timestamp")
    return int(value)


def _string(name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ClaimsDecodeError(f"claim {name!r} must be a string")
    return value


def _audience(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return tuple(value) or None
    raise ClaimsDecodeError("claim 'aud' must be a string or an array of strings")


@dataclass(frozen=True)
class StandardClaims:
    """Time and identity claims; ``None`` means the claim is not asserted."""

    not_before: Optional[int] = None
    issued_at: Optional[int] = None
    expiry: Optional[int] = None
    id: Optional[str] = None
    issuer: Optional[str] = None
    subject: Optional[str] = None
    audience: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "not_before", timestamp_claim(NOT_BEFORE, self.not_before))
        object.__setattr__(self, "issued_at", timestamp_claim(ISSUED_AT, self.issued_at))
        object.__setattr__(self, "expiry", timestamp_claim(EXPIRY, self.expiry))
        object.__setattr__(self, "id", _string(ID, self.id))
        object.__setattr__(self, "issuer", _string(ISSUER, self.issuer))
        object.__setattr__(self, "subject", _string(SUBJECT, self.subject))
        object.__setattr__(self, "audience", _audience(self.audience))

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "StandardClaims":
        """Extract the registered claims from a decoded payload object."""
        return cls(
            not_before=claims.get(NOT_BEFORE),
            issued_at=claims.get(ISSUED_AT),
            expiry=claims.get(EXPIRY),
            id=claims.get(ID),
            issuer=claims.get(ISSUER),
            subject=claims.get(SUBJECT),
            audience=claims.get(AUDIENCE),
        )

    def to_claims(self) -> Dict[str, Any]:
        """Serialize asserted claims using their JSON names."""
        claims: Dict[str, Any] = {}
        for name, value in (
            (NOT_BEFORE, self.not_before),
            (ISSUED_AT, self.issued_at),
            (EXPIRY, self.expiry),
            (ID, self.id),
            (ISSUER, self.issuer),
            (SUBJECT, self.subject),
        ):
            if value is not None:
                claims[name] = value
        if self.audience:
            claims[AUDIENCE] = self.audience[0] if len(self.audience) == 1 else list(self.audience)
        return claims
