"""Token verification: signature, revocation, time and expected claims."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Dict, Optional, Protocol, Tuple, Union

from ..algorithms.registry import DEFAULT_REGISTRY, AlgorithmRegistry
from ..claims.decode import load_payload
from ..claims.types import StandardClaims
from ..errors import (
    InvalidClaimError,
    TokenBlockedError,
    TokenError,
    TokenExpiredError,
    TokenIssuedInFutureError,
    TokenNotYetValidError,
    UnknownAlgorithmError,
)
from . import codec
from .config import VerifierConfig
from .types import DecodedToken, VerificationResult, VerifiedToken

logger = logging.getLogger(__name__)


class RevocationChecker(Protocol):
    """What the verifier needs from a blocklist."""

    def identify(self, token: Any) -> str: ...

    def is_blocked(self, token_id: str) -> Union[bool, Awaitable[bool]]: ...


class TokenVerifier:
    """Verify compact tokens against one key.

    A pass runs parse -> algorithm selection -> signature -> claims
    extraction -> revocation -> time claims -> expected claims, and stops at
    the first failure. Revocation is checked only when a ``blocklist`` is
    supplied.
    """

    def __init__(
        self,
        key: Any,
        *,
        config: Optional[VerifierConfig] = None,
        registry: Optional[AlgorithmRegistry] = None,
        blocklist: Optional[RevocationChecker] = None,
    ) -> None:
        self._key = key
        self.config = config or VerifierConfig()
        self.registry = registry or DEFAULT_REGISTRY
        self.blocklist = blocklist

    def verify(self, token: codec.TokenInput) -> VerifiedToken:
        try:
            decoded, claims, standard = self._authenticate(token)
            if self.blocklist is not None:
                blocked = self.blocklist.is_blocked(self.blocklist.identify(decoded))
                if inspect.isawaitable(blocked):
                    if inspect.iscoroutine(blocked):
                        blocked.close()
                    raise TypeError("blocklist is asynchronous; use verify_async()")
                if blocked:
                    raise TokenBlockedError()
            self._validate(standard)
        except TokenError as exc:
            logger.debug("token rejected: %s", exc.reason)
            raise
        return self._verified(decoded, claims, standard)

    async def verify_async(self, token: codec.TokenInput) -> VerifiedToken:
        """Same pass as :meth:`verify`, awaiting an asynchronous blocklist."""
        try:
            decoded, claims, standard = self._authenticate(token)
            if self.blocklist is not None:
                blocked = self.blocklist.is_blocked(self.blocklist.identify(decoded))
                if inspect.isawaitable(blocked):
                    blocked = await blocked
                if blocked:
                    raise TokenBlockedError()
            self._validate(standard)
        except TokenError as exc:
            logger.debug("token rejected: %s", exc.reason)
            raise
        return self._verified(decoded, claims, standard)

    def check(self, token: codec.TokenInput) -> VerificationResult:
        """Non-raising variant of :meth:`verify`."""
        try:
            verified = self.verify(token)
        except TokenError as exc:
            return VerificationResult(False, exc.reason, error=exc)
        return VerificationResult(True, "ok", token=verified)

    def _authenticate(self, token: codec.TokenInput) -> Tuple[DecodedToken, Dict[str, Any], StandardClaims]:
        decoded = codec.decode(token)
        algorithm = self.registry.get(decoded.header.alg)
        allowed = self.config.allowed_algorithms
        if allowed is not None and algorithm.name not in allowed:
            raise UnknownAlgorithmError(f"algorithm {algorithm.name!r} is not allowed")
        algorithm.verify(self._key, decoded.compact.signing_input, decoded.signature)
        claims = load_payload(decoded.payload)
        return decoded, claims, StandardClaims.from_claims(claims)

    def _validate(self, standard: StandardClaims) -> None:
        now = self.config.clock()
        leeway = self.config.leeway
        if standard.not_before is not None and standard.not_before - leeway > now:
            raise TokenNotYetValidError()
        if standard.expiry is not None and standard.expiry + leeway < now:
            raise TokenExpiredError()
        if self.config.reject_future_issued_at and standard.issued_at is not None and standard.issued_at - leeway > now:
            raise TokenIssuedInFutureError()

        expected = self.config.expected
        if expected is None:
            return
        if expected.issuer is not None and standard.issuer != expected.issuer:
            raise InvalidClaimError("unexpected issuer")
        if expected.subject is not None and standard.subject != expected.subject:
            raise InvalidClaimError("unexpected subject")
        if expected.id is not None and standard.id != expected.id:
            raise InvalidClaimError("unexpected token id")
        if expected.audience and not set(expected.audience).intersection(standard.audience or ()):
            raise InvalidClaimError("audience mismatch")

    @staticmethod
    def _verified(decoded: DecodedToken, claims: Dict[str, Any], standard: StandardClaims) -> VerifiedToken:
        return VerifiedToken(
            token=decoded.text,
            header=decoded.header,
            header_bytes=decoded.header_bytes,
            payload=decoded.payload,
            signature=decoded.signature,
            standard_claims=standard,
            claims=claims,
        )


def verify(
    token: codec.TokenInput,
    key: Any,
    *,
    config: Optional[VerifierConfig] = None,
    blocklist: Optional[RevocationChecker] = None,
    registry: Optional[AlgorithmRegistry] = None,
) -> VerifiedToken:
    """Verify ``token`` with ``key`` and return the verified token."""
    return TokenVerifier(key, config=config, registry=registry, blocklist=blocklist).verify(token)


def check(
    token: codec.TokenInput,
    key: Any,
    *,
    config: Optional[VerifierConfig] = None,
    blocklist: Optional[RevocationChecker] = None,
    registry: Optional[AlgorithmRegistry] = None,
) -> VerificationResult:
    return TokenVerifier(key, config=config, registry=registry, blocklist=blocklist).check(token)
