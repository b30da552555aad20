"""Periodic removal of expired revocation entries."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class Sweepable(Protocol):
    def sweep(self) -> Any: ...


class Sweeper:
    """Background thread calling ``target.sweep()`` every ``interval`` seconds.

    The thread waits on an event rather than sleeping, so :meth:`stop`
    returns as soon as the current sweep (if any) completes.
    """

    def __init__(self, target: Sweepable, interval: float, *, name: str = "jwtseal-sweeper") -> None:
        if interval <= 0:
            raise ValueError("sweep interval must be positive")
        self.target = target
        self.interval = interval
        self.name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "Sweeper":
        with self._lock:
            if self.running:
                return self
            self._stop = threading.Event()
            self._thread = threading.Thread(target=self._run, args=(self._stop,), name=self.name, daemon=True)
            self._thread.start()
        logger.info("sweeper %s started (interval=%ss)", self.name, self.interval)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
            self._stop.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout)
            logger.info("sweeper %s stopped", self.name)

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                removed = self.target.sweep()
            except Exception:
                logger.warning("sweeper %s: sweep failed", self.name, exc_info=True)
                continue
            if removed:
                logger.info("sweeper %s removed %d expired entries", self.name, removed)

    def __enter__(self) -> "Sweeper":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


async def run_sweeps(target: Sweepable, interval: float) -> None:
    """Sweep ``target`` forever on the running event loop; cancel to stop."""
    while True:
        await asyncio.sleep(interval)
        try:
            removed = target.sweep()
            if inspect.isawaitable(removed):
                removed = await removed
        except Exception:
            logger.warning("async sweep failed", exc_info=True)
            continue
        if removed:
            logger.info("removed %d expired revocation entries", removed)


def schedule_sweep(target: Sweepable, interval: float) -> asyncio.Task:
    """Schedule and return a cancellable sweep task."""
    if interval <= 0:
        raise ValueError("sweep interval must be positive")
    return asyncio.create_task(run_sweeps(target, interval))
