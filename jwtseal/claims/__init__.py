"""Claims model, merge policy and post-verification decoding."""

from .decode import decode_claims, load_payload
from .merge import claims_of, merge_claims
from .schema import BoundRecord, ClaimField, RecordSchema, is_zero
from .types import STANDARD_CLAIM_NAMES, StandardClaims

__all__ = [
    "StandardClaims",
    "STANDARD_CLAIM_NAMES",
    "ClaimField",
    "RecordSchema",
    "BoundRecord",
    "is_zero",
    "claims_of",
    "merge_claims",
    "decode_claims",
    "load_payload",
]
