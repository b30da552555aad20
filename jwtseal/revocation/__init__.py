"""Token revocation: in-memory blocklist, sweeper and persistent store."""

from .blocklist import Blocklist
from .identifiers import IdentifierStrategy, entry_expiry, token_expiry, token_identifier
from .sweeper import Sweeper, run_sweeps, schedule_sweep

__all__ = [
    "Blocklist",
    "IdentifierStrategy",
    "token_identifier",
    "token_expiry",
    "entry_expiry",
    "Sweeper",
    "run_sweeps",
    "schedule_sweep",
    "PostgresBlocklist",
    "create_blocklist_from_env",
]


def __getattr__(name: str):
    if name in ("PostgresBlocklist", "create_blocklist_from_env"):
        from . import storage

        return getattr(storage, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
