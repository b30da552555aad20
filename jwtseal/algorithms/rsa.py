"""RSA signatures: PKCS#1 v1.5 (RS*) and PSS (PS*)."""

from __future__ import annotations

from typing import Any, Type

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.padding import AsymmetricPadding

from ..errors import InvalidSignatureError, KeyMismatchError
from .base import SigningAlgorithm

MIN_MODULUS_BITS = 2048


class RSAAlgorithm(SigningAlgorithm):
    """RSASSA-PKCS1-v1_5 with a SHA-2 digest."""

    def __init__(self, name: str, hash_type: Type[hashes.HashAlgorithm]) -> None:
        self.name = name
        self._hash_type = hash_type

    def _padding(self) -> AsymmetricPadding:
        return padding.PKCS1v15()

    def sign(self, key: Any, message: bytes) -> bytes:
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyMismatchError(f"{self.name} requires an RSA private key")
        if key.key_size < MIN_MODULUS_BITS:
            raise KeyMismatchError(f"{self.name} requires a modulus of at least {MIN_MODULUS_BITS} bits")
        return key.sign(message, self._padding(), self._hash_type())

    def verify(self, key: Any, message: bytes, signature: bytes) -> None:
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidSignatureError()
        try:
            key.verify(signature, message, self._padding(), self._hash_type())
        except InvalidSignature as exc:
            raise InvalidSignatureError() from exc


class RSAPSSAlgorithm(RSAAlgorithm):
    """RSASSA-PSS with MGF1 and a salt as long as the digest."""

    def _padding(self) -> AsymmetricPadding:
        return padding.PSS(mgf=padding.MGF1(self._hash_type()), salt_length=self._hash_type.digest_size)


RS256 = RSAAlgorithm("RS256", hashes.SHA256)
RS384 = RSAAlgorithm("RS384", hashes.SHA384)
RS512 = RSAAlgorithm("RS512", hashes.SHA512)
PS256 = RSAPSSAlgorithm("PS256", hashes.SHA256)
PS384 = RSAPSSAlgorithm("PS384", hashes.SHA384)
PS512 = RSAPSSAlgorithm("PS512", hashes.SHA512)
