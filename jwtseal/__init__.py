"""jwtseal package.

Compact signed authorization tokens: an algorithm registry spanning HMAC,
RSA, ECDSA and EdDSA, a verifier with time and revocation checks, and a
TTL-bounded blocklist for revoking tokens before they expire.
"""

from .algorithms import DEFAULT_REGISTRY, Algorithm, AlgorithmRegistry, SigningAlgorithm
from .claims import ClaimField, RecordSchema, StandardClaims, decode_claims, merge_claims
from .errors import (
    ClaimsDecodeError,
    InvalidClaimError,
    InvalidSignatureError,
    KeyMismatchError,
    MalformedTokenError,
    MissingRequiredFieldError,
    TokenBlockedError,
    TokenEncodingError,
    TokenError,
    TokenExpiredError,
    TokenIssuedInFutureError,
    TokenNotYetValidError,
    UnknownAlgorithmError,
)
from .revocation import Blocklist, IdentifierStrategy, Sweeper, schedule_sweep
from .token import (
    ExpectedClaims,
    Header,
    TokenIssuer,
    TokenVerifier,
    VerificationResult,
    VerifiedToken,
    VerifierConfig,
    check,
    decode_unverified,
    sign,
    verify,
)
from .utils.time import FixedClock

__all__ = [
    "Algorithm",
    "AlgorithmRegistry",
    "SigningAlgorithm",
    "DEFAULT_REGISTRY",
    "StandardClaims",
    "ClaimField",
    "RecordSchema",
    "merge_claims",
    "decode_claims",
    "Header",
    "TokenIssuer",
    "TokenVerifier",
    "VerifierConfig",
    "ExpectedClaims",
    "VerifiedToken",
    "VerificationResult",
    "decode_unverified",
    "sign",
    "verify",
    "check",
    "Blocklist",
    "IdentifierStrategy",
    "Sweeper",
    "schedule_sweep",
    "FixedClock",
    "TokenError",
    "MalformedTokenError",
    "TokenEncodingError",
    "UnknownAlgorithmError",
    "KeyMismatchError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "TokenIssuedInFutureError",
    "TokenBlockedError",
    "InvalidClaimError",
    "MissingRequiredFieldError",
    "ClaimsDecodeError",
]
