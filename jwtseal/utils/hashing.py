"""Hashing and canonical JSON helpers."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Union


def sha256_hex(value: Union[str, bytes]) -> str:
    """Return SHA-256 hex digest for the provided text or bytes."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return hashlib.sha256(value).hexdigest()


def compact_json(value: Any) -> bytes:
    """Serialize ``value`` as compact UTF-8 JSON, preserving key order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")
