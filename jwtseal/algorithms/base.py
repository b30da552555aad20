"""Algorithm identifiers and the signing algorithm interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class Algorithm(str, Enum):
    """JWS ``alg`` identifiers supported out of the box."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    EDDSA = "EdDSA"


class SigningAlgorithm(ABC):
    """One signature scheme, addressed by its ``alg`` identifier."""

    name: str

    @abstractmethod
    def sign(self, key: Any, message: bytes) -> bytes:
        """Sign ``message``; raise ``KeyMismatchError`` for an unusable key."""

    @abstractmethod
    def verify(self, key: Any, message: bytes, signature: bytes) -> None:
        """Return silently when valid; raise ``InvalidSignatureError`` otherwise."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
