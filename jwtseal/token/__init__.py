"""Token issuance, compact codec and verification."""

from .codec import decode_unverified
from .config import ExpectedClaims, VerifierConfig
from .issuer import TokenIssuer, sign
from .types import CompactToken, DecodedToken, Header, IssuedToken, VerificationResult, VerifiedToken
from .verifier import RevocationChecker, TokenVerifier, check, verify

__all__ = [
    "TokenIssuer",
    "TokenVerifier",
    "RevocationChecker",
    "VerifierConfig",
    "ExpectedClaims",
    "Header",
    "CompactToken",
    "DecodedToken",
    "VerifiedToken",
    "IssuedToken",
    "VerificationResult",
    "decode_unverified",
    "sign",
    "check",
    "verify",
]
