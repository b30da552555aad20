"""Utility helpers for hashing and time operations."""

from .hashing import compact_json, sha256_hex
from .time import Clock, FixedClock, system_clock, to_seconds, utc_now

__all__ = ["sha256_hex", "compact_json", "Clock", "FixedClock", "system_clock", "to_seconds", "utc_now"]
