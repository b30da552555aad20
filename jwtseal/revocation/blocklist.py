"""In-memory revocation cache with per-shard locking."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from ..utils.time import Clock, Duration, system_clock, to_seconds
from .identifiers import IdentifierStrategy, entry_expiry, token_identifier
from .sweeper import Sweeper

logger = logging.getLogger(__name__)

DEFAULT_SHARDS = 16


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: Dict[str, int] = {}


class Blocklist:
    """Revoked token identifiers mapped to the time their entry lapses.

    Entries live in independently locked shards, so readers and writers only
    contend within one shard and a sweep never pauses the whole map. An entry
    blocks while ``expiry > now``; expired entries are dropped by
    :meth:`sweep` or when a lookup finds them.
    """

    def __init__(
        self,
        *,
        strategy: IdentifierStrategy = IdentifierStrategy.SIGNATURE,
        clock: Clock = system_clock,
        shards: int = DEFAULT_SHARDS,
        grace: Duration = 0,
    ) -> None:
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self.grace = to_seconds(grace)
        if self.grace < 0:
            raise ValueError("grace must not be negative")
        self.strategy = IdentifierStrategy(strategy)
        self.clock = clock
        self._shards: List[_Shard] = [_Shard() for _ in range(shards)]
        self._sweeper: Optional[Sweeper] = None

    def _shard(self, token_id: str) -> _Shard:
        return self._shards[hash(token_id) % len(self._shards)]

    def identify(self, token: Any) -> str:
        return token_identifier(token, self.strategy)

    def invalidate(self, token_id: str, expiry: int) -> None:
        """Insert or replace the entry for ``token_id``."""
        shard = self._shard(token_id)
        with shard.lock:
            shard.entries[token_id] = int(expiry)
        logger.debug("invalidated %s until %s", token_id, expiry)

    def invalidate_token(self, token: Any, expiry: Optional[int] = None) -> str:
        """Revoke ``token`` until ``expiry`` (default: past its ``exp`` plus ``grace``)."""
        token_id = self.identify(token)
        self.invalidate(token_id, entry_expiry(token, expiry, self.grace))
        return token_id

    def is_blocked(self, token_id: str) -> bool:
        shard = self._shard(token_id)
        now = self.clock()
        with shard.lock:
            expiry = shard.entries.get(token_id)
            if expiry is None:
                return False
            if expiry <= now:
                del shard.entries[token_id]
                return False
            return True

    def is_token_blocked(self, token: Any) -> bool:
        return self.is_blocked(self.identify(token))

    def remove(self, token_id: str) -> bool:
        shard = self._shard(token_id)
        with shard.lock:
            return shard.entries.pop(token_id, None) is not None

    def sweep(self, now: Optional[int] = None) -> int:
        """Remove every entry whose expiry is at or before ``now``."""
        current = self.clock() if now is None else now
        removed = 0
        for shard in self._shards:
            with shard.lock:
                expired = [token_id for token_id, expiry in shard.entries.items() if expiry <= current]
                for token_id in expired:
                    del shard.entries[token_id]
            removed += len(expired)
        return removed

    def count(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total

    __len__ = count

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.entries.clear()

    def start(self, interval: float) -> Sweeper:
        """Start the background sweeper; a running one is returned unchanged."""
        if self._sweeper is None:
            self._sweeper = Sweeper(self, interval, name="jwtseal-blocklist-sweeper")
        return self._sweeper.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        if self._sweeper is not None:
            self._sweeper.stop(timeout)
            self._sweeper = None

    def __enter__(self) -> "Blocklist":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
