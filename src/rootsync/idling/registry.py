"""Shared set of idling resources consulted before idle.

One registry is shared by every synchronization point in the process, so
each register() must be paired with exactly one unregister().
"""

from __future__ import annotations

import logging

from rootsync.core.exceptions import IdlingError
from rootsync.idling.counting import CountingIdlingResource  # noqa: TC001

logger = logging.getLogger(__name__)


class IdlingRegistry:
    """Name-keyed registry of idling resources."""

    def __init__(self) -> None:
        self._resources: dict[str, CountingIdlingResource] = {}

    def register(self, resource: CountingIdlingResource) -> None:
        """Register *resource*.

        Raises:
            IdlingError: If a resource with the same name is already registered.
        """
        if resource.name in self._resources:
            msg = f"Attempted to register resource with same name: {resource.name}"
            raise IdlingError(msg)
        self._resources[resource.name] = resource
        logger.debug("Registered idling resource %s", resource.name)

    def unregister(self, resource: CountingIdlingResource) -> bool:
        """Unregister *resource*. Returns False if it was not registered."""
        if self._resources.get(resource.name) is not resource:
            logger.debug("Idling resource %s was not registered", resource.name)
            return False
        del self._resources[resource.name]
        logger.debug("Unregistered idling resource %s", resource.name)
        return True

    def resources(self) -> list[CountingIdlingResource]:
        return list(self._resources.values())

    def busy_resources(self) -> list[str]:
        return [name for name, res in self._resources.items() if not res.is_idle_now()]

    def is_idle_now(self) -> bool:
        return all(res.is_idle_now() for res in self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)
