"""ConfigurationSettlementWaiter — wait out an in-flight orientation change.

When the resumed component's orientation differs from the application's, a
configuration change (rotation) is still being applied. An idling token is
held busy until either a layout pass shows the orientations converged or the
component is resumed again, and the control thread is looped to idle.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rootsync.core.models import Stage
from rootsync.idling.counting import CountingIdlingResource

if TYPE_CHECKING:
    from rootsync.core.models import Orientation
    from rootsync.idling.registry import IdlingRegistry
    from rootsync.picker.base import (
        Application,
        ExecutionContext,
        ForegroundComponent,
        LifecycleMonitor,
        ListenerHandle,
        Surface,
    )

logger = logging.getLogger(__name__)

IDLING_RESOURCE_NAME = "ConfigurationChangesIdlingResource"


class _Settlement:
    """One outstanding settlement: the token plus both observer handles."""

    def __init__(
        self,
        component: ForegroundComponent,
        target: Orientation,
        registry: IdlingRegistry,
        monitor: LifecycleMonitor,
    ) -> None:
        self._component = component
        self._target = target
        self._registry = registry
        self._monitor = monitor
        self._surface: Surface = component.surface
        self._resource = CountingIdlingResource(IDLING_RESOURCE_NAME)
        self._layout_handle: ListenerHandle | None = None
        self._lifecycle_handle: ListenerHandle | None = None
        self.resolved = False

    def start(self) -> None:
        self._registry.register(self._resource)
        self._resource.increment()
        self._layout_handle = self._surface.add_layout_listener(self._on_layout_change)
        self._lifecycle_handle = self._monitor.add_lifecycle_callback(self._on_lifecycle_change)

    def _on_layout_change(self, _surface: Surface) -> None:
        if not self.resolved and self._component.orientation() == self._target:
            logger.debug("Component's orientation was set to the application's orientation.")
            self.release()

    def _on_lifecycle_change(self, component: ForegroundComponent, stage: Stage) -> None:
        if not self.resolved and component.name == self._component.name and stage == Stage.RESUMED:
            logger.debug("Component was resumed after a configuration change.")
            self.release()

    def release(self) -> None:
        """Release the token and detach both observers, exactly once."""
        if self.resolved:
            return
        self.resolved = True
        try:
            if not self._resource.is_idle_now():
                self._resource.decrement()
            self._registry.unregister(self._resource)
        finally:
            if self._layout_handle is not None:
                self._surface.remove_layout_listener(self._layout_handle)
            if self._lifecycle_handle is not None:
                self._monitor.remove_lifecycle_callback(self._lifecycle_handle)


class ConfigurationSettlementWaiter:
    """Blocks while the resumed component lags the application's configuration."""

    def __init__(
        self,
        context: ExecutionContext,
        monitor: LifecycleMonitor,
        application: Application,
        registry: IdlingRegistry,
    ) -> None:
        self._context = context
        self._monitor = monitor
        self._application = application
        self._registry = registry

    def wait(self) -> bool:
        """Wait for a pending configuration change to settle.

        Returns:
            True if a mismatch was found and waited on, False otherwise.
        """
        app_orientation = self._application.orientation()
        resumed = self._monitor.components_in_stage(Stage.RESUMED)
        if not resumed:
            logger.debug(
                "Could not check if configuration changes were in progress because "
                "the current component could not be found."
            )
            return False
        if len(resumed) > 1:
            logger.warning(
                "Expected one resumed component, found %d: %s. Using %s.",
                len(resumed),
                [c.name for c in resumed],
                resumed[0].name,
            )

        component = resumed[0]
        if component.orientation() == app_orientation:
            return False

        logger.debug(
            "Configuration change in progress: application=%s, %s=%s",
            app_orientation.value,
            component.name,
            component.orientation().value,
        )
        settlement = _Settlement(component, app_orientation, self._registry, self._monitor)
        try:
            settlement.start()
            self._context.loop_until_idle()
        finally:
            settlement.release()
        return True
