"""Elliptic-curve signatures (ES256/ES384/ES512) with raw ``r || s`` encoding."""

from __future__ import annotations

from typing import Any, Type

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature

from ..errors import InvalidSignatureError, KeyMismatchError
from .base import SigningAlgorithm


class ECDSAAlgorithm(SigningAlgorithm):
    """ECDSA bound to one curve/digest pairing."""

    def __init__(self, name: str, curve_type: Type[ec.EllipticCurve], hash_type: Type[hashes.HashAlgorithm]) -> None:
        self.name = name
        self._curve_type = curve_type
        self._hash_type = hash_type

    def _coordinate_size(self, key: Any) -> int:
        return (key.curve.key_size + 7) // 8

    def sign(self, key: Any, message: bytes) -> bytes:
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise KeyMismatchError(f"{self.name} requires an elliptic-curve private key")
        if not isinstance(key.curve, self._curve_type):
            raise KeyMismatchError(f"{self.name} requires curve {self._curve_type.name}, got {key.curve.name}")
        der = key.sign(message, ec.ECDSA(self._hash_type()))
        r, s = decode_dss_signature(der)
        size = self._coordinate_size(key)
        return r.to_bytes(size, "big") + s.to_bytes(size, "big")

    def verify(self, key: Any, message: bytes, signature: bytes) -> None:
        if isinstance(key, ec.EllipticCurvePrivateKey):
            key = key.public_key()
        if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(key.curve, self._curve_type):
            raise InvalidSignatureError()
        size = self._coordinate_size(key)
        if len(signature) != 2 * size:
            raise InvalidSignatureError()
        r = int.from_bytes(signature[:size], "big")
        s = int.from_bytes(signature[size:], "big")
        try:
            key.verify(encode_dss_signature(r, s), message, ec.ECDSA(self._hash_type()))
        except InvalidSignature as exc:
            raise InvalidSignatureError() from exc


ES256 = ECDSAAlgorithm("ES256", ec.SECP256R1, hashes.SHA256)
ES384 = ECDSAAlgorithm("ES384", ec.SECP384R1, hashes.SHA384)
ES512 = ECDSAAlgorithm("ES512", ec.SECP521R1, hashes.SHA512)
