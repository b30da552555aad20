"""Edwards-curve signatures (EdDSA over Ed25519)."""

from __future__ import annotations

from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519

from ..errors import InvalidSignatureError, KeyMismatchError
from .base import SigningAlgorithm

SIGNATURE_SIZE = 64


class Ed25519Algorithm(SigningAlgorithm):
    name = "EdDSA"

    def sign(self, key: Any, message: bytes) -> bytes:
        if not isinstance(key, ed25519.Ed25519PrivateKey):
            raise KeyMismatchError("EdDSA requires an Ed25519 private key")
        return key.sign(message)

    def verify(self, key: Any, message: bytes, signature: bytes) -> None:
        if isinstance(key, ed25519.Ed25519PrivateKey):
            key = key.public_key()
        if not isinstance(key, ed25519.Ed25519PublicKey) or len(signature) != SIGNATURE_SIZE:
            raise InvalidSignatureError()
        try:
            key.verify(signature, message)
        except InvalidSignature as exc:
            raise InvalidSignatureError() from exc


EDDSA = Ed25519Algorithm()
