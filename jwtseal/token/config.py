"""Verification settings passed explicitly into each verifier."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Tuple, Union

from ..algorithms.registry import AlgorithmName, algorithm_name
from ..utils.time import Clock, Duration, system_clock, to_seconds

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _audience_tuple(value: Union[None, str, Iterable[str]]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value) or None


@dataclass(frozen=True)
class ExpectedClaims:
    """Claim values a token must carry; ``None`` skips the check."""

    issuer: Optional[str] = None
    subject: Optional[str] = None
    audience: Optional[Tuple[str, ...]] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "audience", _audience_tuple(self.audience))


@dataclass(frozen=True)
class VerifierConfig:
    """Clock, leeway and policy switches for a verification pass."""

    leeway: Duration = 0
    clock: Clock = system_clock
    allowed_algorithms: Optional[FrozenSet[str]] = field(default=None)
    reject_future_issued_at: bool = False
    expected: Optional[ExpectedClaims] = None

    def __post_init__(self) -> None:
        leeway = to_seconds(self.leeway)
        if leeway < 0:
            raise ValueError("leeway must not be negative")
        object.__setattr__(self, "leeway", leeway)
        if self.allowed_algorithms is not None:
            names: Iterable[AlgorithmName] = self.allowed_algorithms
            object.__setattr__(self, "allowed_algorithms", frozenset(algorithm_name(n) for n in names))

    @classmethod
    def from_env(cls, **overrides: Any) -> "VerifierConfig":
        """Build a config from ``JWTSEAL_*`` environment variables.

        Keyword arguments take precedence over the environment.
        """
        values: dict[str, Any] = {}
        leeway = os.getenv("JWTSEAL_LEEWAY_SECONDS")
        if leeway:
            values["leeway"] = int(leeway)
        allowed = os.getenv("JWTSEAL_ALLOWED_ALGORITHMS")
        if allowed:
            values["allowed_algorithms"] = frozenset(a.strip() for a in allowed.split(",") if a.strip())
        future_iat = os.getenv("JWTSEAL_REJECT_FUTURE_IAT")
        if future_iat:
            values["reject_future_issued_at"] = future_iat.strip().lower() in _TRUE_VALUES
        values.update(overrides)
        return cls(**values)
