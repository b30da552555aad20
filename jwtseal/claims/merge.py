"""Merging claim sources into the single payload object."""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Mapping, Optional

from ..utils.time import Duration, system_clock, to_seconds
from .schema import BoundRecord, RecordSchema
from .types import EXPIRY, ISSUED_AT, STANDARD_CLAIM_NAMES, TIME_CLAIMS, StandardClaims, timestamp_claim


def claims_of(source: Any) -> Dict[str, Any]:
    """Turn one claim source into a plain claims mapping."""
    if isinstance(source, StandardClaims):
        return source.to_claims()
    if isinstance(source, BoundRecord):
        return source.to_claims()
    if isinstance(source, Mapping):
        return dict(source)
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return RecordSchema.from_dataclass(type(source)).dump(source)
    raise TypeError(f"unsupported claims source: {type(source).__name__}")


def merge_claims(*sources: Any, max_age: Optional[Duration] = None, now: Optional[int] = None) -> Dict[str, Any]:
    """Merge claim sources in call order.

    Standard claims set explicitly by a later source override earlier ones;
    a ``None`` standard claim never unsets a previous value. Custom claims
    merge key-wise and the last writer wins. Time claims are normalized to
    epoch seconds whichever kind of source set them. ``max_age`` fills ``iat``
    and ``exp`` only when no source set them.
    """
    merged: Dict[str, Any] = {}
    for source in sources:
        for key, value in claims_of(source).items():
            if key in STANDARD_CLAIM_NAMES and value is None:
                continue
            merged[key] = timestamp_claim(key, value) if key in TIME_CLAIMS else value

    if max_age is not None:
        current = system_clock() if now is None else int(now)
        if ISSUED_AT not in merged:
            merged[ISSUED_AT] = current
        if EXPIRY not in merged:
            merged[EXPIRY] = current + to_seconds(max_age)
    return merged
