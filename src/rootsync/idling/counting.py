"""Counting idling resource: idle while its counter is zero."""

from __future__ import annotations

import logging

from rootsync.core.exceptions import IdlingError

logger = logging.getLogger(__name__)


class CountingIdlingResource:
    """Counter-backed idling token.

    increment() marks one unit of work in flight, decrement() completes it.
    The resource is idle when no work is in flight.
    """

    def __init__(self, name: str) -> None:
        if not name:
            msg = "idling resource name must not be empty"
            raise IdlingError(msg)
        self._name = name
        self._counter = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def count(self) -> int:
        return self._counter

    def increment(self) -> None:
        self._counter += 1

    def decrement(self) -> None:
        """Complete one unit of work.

        Raises:
            IdlingError: If the counter would drop below zero.
        """
        if self._counter == 0:
            msg = f"Counter has been corrupted: {self._name} decremented below zero"
            raise IdlingError(msg)
        self._counter -= 1
        if self._counter == 0:
            logger.debug("Resource %s transitioned to idle", self._name)

    def is_idle_now(self) -> bool:
        return self._counter == 0

    def __repr__(self) -> str:
        return f"CountingIdlingResource(name={self._name!r}, count={self._counter})"
