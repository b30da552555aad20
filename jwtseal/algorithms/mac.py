"""HMAC shared-secret signatures (HS256/HS384/HS512)."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Callable

from ..errors import InvalidSignatureError, KeyMismatchError
from .base import SigningAlgorithm


class HMACAlgorithm(SigningAlgorithm):
    """Message authentication code over a raw byte secret."""

    def __init__(self, name: str, digest: Callable[..., Any]) -> None:
        self.name = name
        self._digest = digest

    def _mac(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, self._digest).digest()

    def sign(self, key: Any, message: bytes) -> bytes:
        if not isinstance(key, (bytes, bytearray)) or not key:
            raise KeyMismatchError(f"{self.name} requires a non-empty bytes secret")
        return self._mac(bytes(key), message)

    def verify(self, key: Any, message: bytes, signature: bytes) -> None:
        if not isinstance(key, (bytes, bytearray)) or not key:
            raise InvalidSignatureError()
        expected = self._mac(bytes(key), message)
        if not hmac.compare_digest(expected, signature):
            raise InvalidSignatureError()


HS256 = HMACAlgorithm("HS256", hashlib.sha256)
HS384 = HMACAlgorithm("HS384", hashlib.sha384)
HS512 = HMACAlgorithm("HS512", hashlib.sha512)
