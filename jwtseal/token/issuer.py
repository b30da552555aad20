"""Token issuance: merge claims, encode, sign."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import uuid4

from ..algorithms.registry import DEFAULT_REGISTRY, AlgorithmName, AlgorithmRegistry
from ..claims.merge import merge_claims
from ..claims.types import ID, StandardClaims
from ..utils.hashing import sha256_hex
from ..utils.time import Clock, Duration, system_clock
from . import codec
from .types import Header, IssuedToken

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Issue compact signed tokens with one algorithm and one signing key."""

    def __init__(
        self,
        algorithm: AlgorithmName,
        key: Any,
        *,
        registry: Optional[AlgorithmRegistry] = None,
        clock: Clock = system_clock,
        headers: Optional[Mapping[str, Any]] = None,
        generate_id: bool = False,
    ) -> None:
        self.algorithm = (registry or DEFAULT_REGISTRY).get(algorithm)
        self._key = key
        self.clock = clock
        self.headers = dict(headers or {})
        self.generate_id = generate_id

    def issue(
        self,
        *sources: Any,
        max_age: Optional[Duration] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> IssuedToken:
        claims = merge_claims(*sources, max_age=max_age, now=self.clock())
        if self.generate_id and ID not in claims:
            claims[ID] = uuid4().hex
        standard = StandardClaims.from_claims(claims)

        header = Header(alg=self.algorithm.name, extra={**self.headers, **(headers or {})})
        prefix = codec.signing_input(header, claims)
        signature = self.algorithm.sign(self._key, prefix)
        token = codec.join(prefix, signature)
        token_id = sha256_hex(signature)
        logger.debug("issued %s token %s", self.algorithm.name, token_id)
        return IssuedToken(token=token, token_id=token_id, header=header, claims=claims, standard_claims=standard)

    def sign(self, *sources: Any, max_age: Optional[Duration] = None, headers: Optional[Mapping[str, Any]] = None) -> str:
        return self.issue(*sources, max_age=max_age, headers=headers).token


def sign(
    algorithm: AlgorithmName,
    key: Any,
    *sources: Any,
    max_age: Optional[Duration] = None,
    headers: Optional[Mapping[str, Any]] = None,
    clock: Clock = system_clock,
    registry: Optional[AlgorithmRegistry] = None,
) -> str:
    """Sign claim sources and return the compact token text."""
    issuer = TokenIssuer(algorithm, key, registry=registry, clock=clock)
    return issuer.sign(*sources, max_age=max_age, headers=headers)
