"""Backoff — fixed-table retry delays with a steady-state tail.

Each retry condition gets its own table; the last entry is repeated once
the table is exhausted. No jitter.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rootsync.core.models import BackoffConfig

logger = logging.getLogger(__name__)


class Backoff:
    """Stateful cursor over a non-decreasing table of wait times (ms)."""

    def __init__(self, table: Sequence[int], condition: str) -> None:
        if not table:
            msg = "backoff table must not be empty"
            raise ValueError(msg)
        if any(t < 0 for t in table):
            msg = f"backoff table entries must be >= 0: {list(table)}"
            raise ValueError(msg)
        if any(b < a for a, b in zip(table, table[1:])):
            msg = f"backoff table must be non-decreasing: {list(table)}"
            raise ValueError(msg)
        self._table = tuple(table)
        self._condition = condition
        self._attempts = 0

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def table(self) -> tuple[int, ...]:
        return self._table

    def next_ms(self) -> int:
        """Wait time before the next retry. Consumes one attempt."""
        if self._attempts >= len(self._table):
            wait = self._table[-1]
        else:
            wait = self._table[self._attempts]
            self._attempts += 1
        logger.debug("%s - waiting: %sms for one to appear.", self._condition, wait)
        return wait

    # -- Named policies ------------------------------------------------------

    @classmethod
    def no_active_roots(cls, config: BackoffConfig | None = None) -> Backoff:
        config = config or BackoffConfig()
        return cls(config.no_active_roots, "No active roots available")

    @classmethod
    def no_matching_root(cls, config: BackoffConfig | None = None) -> Backoff:
        config = config or BackoffConfig()
        return cls(config.no_matching_root, "No matching root available")

    @classmethod
    def root_not_ready(cls, config: BackoffConfig | None = None) -> Backoff:
        config = config or BackoffConfig()
        return cls(config.root_not_ready, "Root not ready")
