"""Deriving revocation identifiers and expiries from tokens."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from ..claims.decode import load_payload
from ..claims.types import EXPIRY, ID
from ..errors import ClaimsDecodeError
from ..token import codec
from ..token.types import DecodedToken, VerifiedToken
from ..utils.hashing import sha256_hex
from ..utils.time import Duration, to_seconds


class IdentifierStrategy(str, Enum):
    """Which part of a token keys its revocation entry."""

    SIGNATURE = "signature"
    TOKEN = "token"
    JTI = "jti"


def _decoded(token: Any) -> DecodedToken:
    if isinstance(token, DecodedToken):
        return token
    return codec.decode(token)


def _claim(token: Any, name: str) -> Any:
    if isinstance(token, VerifiedToken):
        return token.claims.get(name)
    try:
        return load_payload(_decoded(token).payload).get(name)
    except ClaimsDecodeError:
        return None


def token_identifier(token: Any, strategy: IdentifierStrategy = IdentifierStrategy.SIGNATURE) -> str:
    """Return the revocation key for ``token``.

    ``token`` may be token text, a :class:`CompactToken`, a
    :class:`DecodedToken` or a :class:`VerifiedToken`. The ``jti`` strategy
    falls back to the signature when the claim is absent.
    """
    if strategy is IdentifierStrategy.TOKEN:
        text = token.token if isinstance(token, VerifiedToken) else _decoded(token).text
        return sha256_hex(text)
    if strategy is IdentifierStrategy.JTI:
        jti = _claim(token, ID)
        if isinstance(jti, str) and jti:
            return f"jti:{jti}"
    signature = token.signature if isinstance(token, VerifiedToken) else _decoded(token).signature
    return sha256_hex(signature)


def token_expiry(token: Any) -> Optional[int]:
    """Return the token's ``exp`` claim, or None when it has none."""
    if isinstance(token, VerifiedToken):
        return token.standard_claims.expiry
    value = _claim(token, EXPIRY)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return int(value)


def entry_expiry(token: Any, expiry: Optional[int] = None, grace: Duration = 0) -> int:
    """Return the revocation entry expiry for ``token``.

    Without an explicit ``expiry`` the entry outlives the token's ``exp`` by
    ``grace`` plus one second: a verifier accepts ``exp + leeway == now`` while
    an entry only blocks while ``expiry > now``. Set ``grace`` to the largest
    verifier leeway in use. An explicit ``expiry`` is stored as given.
    """
    if expiry is not None:
        return int(expiry)
    exp = token_expiry(token)
    if exp is None:
        raise ValueError("token has no 'exp' claim; pass an explicit expiry")
    return exp + to_seconds(grace) + 1
