"""In-memory lifecycle stage tracking with change callbacks."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

from rootsync.core.models import Stage
from rootsync.picker.base import (
    ForegroundComponent,
    LifecycleCallback,
    LifecycleMonitor,
    ListenerHandle,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class InMemoryLifecycleMonitor(LifecycleMonitor):
    """Tracks the current stage of every live component.

    The owner of the components reports transitions through
    signal_lifecycle_change(); registered callbacks are notified
    synchronously, in registration order.
    """

    def __init__(self) -> None:
        self._stages: dict[int, tuple[ForegroundComponent, Stage]] = {}
        self._callbacks: dict[ListenerHandle, LifecycleCallback] = {}
        self._handles = itertools.count(1)

    def signal_lifecycle_change(self, component: ForegroundComponent, stage: Stage) -> None:
        logger.debug("Lifecycle change: %s -> %s", component.name, stage.value)
        if stage == Stage.DESTROYED:
            self._stages.pop(id(component), None)
        else:
            # Re-insert so iteration follows most recent transition order.
            self._stages.pop(id(component), None)
            self._stages[id(component)] = (component, stage)

        # Snapshot: callbacks may detach themselves while being notified.
        for handle, callback in list(self._callbacks.items()):
            if handle in self._callbacks:
                callback(component, stage)

    def stage_of(self, component: ForegroundComponent) -> Stage | None:
        """Current stage, or None if unknown or destroyed."""
        entry = self._stages.get(id(component))
        return entry[1] if entry else None

    def components_in_stage(self, stage: Stage) -> list[ForegroundComponent]:
        return [c for c, s in self._stages.values() if s == stage]

    def components_in_stages(self, stages: Iterable[Stage]) -> list[ForegroundComponent]:
        wanted = set(stages)
        return [c for c, s in self._stages.values() if s in wanted]

    def add_lifecycle_callback(self, callback: LifecycleCallback) -> ListenerHandle:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def remove_lifecycle_callback(self, handle: ListenerHandle) -> None:
        self._callbacks.pop(handle, None)

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)
