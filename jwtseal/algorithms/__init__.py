"""Signature algorithms and their registry."""

from .base import Algorithm, SigningAlgorithm
from .ecdsa import ECDSAAlgorithm
from .eddsa import Ed25519Algorithm
from .mac import HMACAlgorithm
from .registry import DEFAULT_REGISTRY, AlgorithmRegistry
from .rsa import RSAAlgorithm, RSAPSSAlgorithm

__all__ = [
    "Algorithm",
    "SigningAlgorithm",
    "AlgorithmRegistry",
    "DEFAULT_REGISTRY",
    "HMACAlgorithm",
    "RSAAlgorithm",
    "RSAPSSAlgorithm",
    "ECDSAAlgorithm",
    "Ed25519Algorithm",
]
