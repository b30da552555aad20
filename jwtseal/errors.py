"""Typed errors raised while signing, verifying and decoding tokens."""

from __future__ import annotations

from typing import Optional


class TokenError(Exception):
    """Base class for every error raised by jwtseal.

    ``reason`` is a stable machine-readable code, the same one reported by
    :class:`~jwtseal.token.types.VerificationResult`.
    """

    reason = "token_error"
    default_message = "token error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class MalformedTokenError(TokenError):
    reason = "malformed_token"
    default_message = "token is not a three-segment compact serialization"


class TokenEncodingError(TokenError):
    reason = "encoding_error"
    default_message = "segment is not canonical unpadded base64url"


class UnknownAlgorithmError(TokenError):
    reason = "unknown_algorithm"
    default_message = "unknown signing algorithm"


class KeyMismatchError(TokenError):
    reason = "key_mismatch"
    default_message = "key does not match the signing algorithm"


class InvalidSignatureError(TokenError):
    reason = "invalid_signature"
    default_message = "signature verification failed"


class TokenExpiredError(TokenError):
    reason = "token_expired"
    default_message = "token has expired"


class TokenNotYetValidError(TokenError):
    reason = "token_not_yet_valid"
    default_message = "token is not valid yet"


class TokenIssuedInFutureError(TokenError):
    reason = "token_issued_in_future"
    default_message = "token was issued in the future"


class TokenBlockedError(TokenError):
    reason = "token_blocked"
    default_message = "token has been revoked"


class InvalidClaimError(TokenError):
    reason = "invalid_claim"
    default_message = "claim does not match the expected value"


class ClaimsDecodeError(TokenError):
    reason = "claims_decode_error"
    default_message = "claims could not be decoded"


class MissingRequiredFieldError(TokenError):
    reason = "missing_required_field"
    default_message = "required claim is missing"

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"required claim {field!r} is missing or empty")
