"""Registry mapping ``alg`` identifiers to signing algorithms."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Union

from ..errors import UnknownAlgorithmError
from . import ecdsa, eddsa, mac, rsa
from .base import Algorithm, SigningAlgorithm

AlgorithmName = Union[str, Algorithm]

BUILTIN_ALGORITHMS = (
    mac.HS256,
    mac.HS384,
    mac.HS512,
    rsa.RS256,
    rsa.RS384,
    rsa.RS512,
    rsa.PS256,
    rsa.PS384,
    rsa.PS512,
    ecdsa.ES256,
    ecdsa.ES384,
    ecdsa.ES512,
    eddsa.EDDSA,
)


def algorithm_name(value: AlgorithmName) -> str:
    return value.value if isinstance(value, Algorithm) else value


class AlgorithmRegistry:
    """In-memory registry of signing algorithms keyed by identifier.

    Lookups never fall back to a default: an identifier that was not
    registered is rejected with ``UnknownAlgorithmError``.
    """

    def __init__(self, algorithms: Optional[Iterable[SigningAlgorithm]] = None) -> None:
        self._algorithms: Dict[str, SigningAlgorithm] = {}
        for algorithm in algorithms if algorithms is not None else BUILTIN_ALGORITHMS:
            self.register(algorithm)

    def register(self, algorithm: SigningAlgorithm) -> None:
        self._algorithms[algorithm.name] = algorithm

    def unregister(self, name: AlgorithmName) -> None:
        self._algorithms.pop(algorithm_name(name), None)

    def get(self, name: object) -> SigningAlgorithm:
        if not isinstance(name, (str, Algorithm)):
            raise UnknownAlgorithmError("header 'alg' is missing or not a string")
        try:
            return self._algorithms[algorithm_name(name)]
        except KeyError:
            raise UnknownAlgorithmError(f"unknown algorithm {algorithm_name(name)!r}") from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, (str, Algorithm)) and algorithm_name(name) in self._algorithms

    def names(self) -> list[str]:
        return sorted(self._algorithms)

    def all(self) -> Dict[str, SigningAlgorithm]:
        return dict(self._algorithms)


DEFAULT_REGISTRY = AlgorithmRegistry()
