"""ScreenOrientationAction — rotate the device and hold an idling token
until the application reports the requested orientation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rootsync.idling.counting import CountingIdlingResource

if TYPE_CHECKING:
    from rootsync.core.models import Orientation
    from rootsync.idling.registry import IdlingRegistry
    from rootsync.picker.base import Application, DeviceController, ListenerHandle

logger = logging.getLogger(__name__)

IDLING_RESOURCE_NAME = "ScreenOrientationIdlingResource"


class ScreenOrientationAction:
    """Sets the device to *orientation*.

    The idling token keeps the next synchronization (e.g. RootViewPicker's
    loop to idle) waiting until the rotation has been applied.
    """

    def __init__(self, orientation: Orientation) -> None:
        self.orientation = orientation
        self._resource = CountingIdlingResource(IDLING_RESOURCE_NAME)
        self._registry: IdlingRegistry | None = None
        self._application: Application | None = None
        self._handle: ListenerHandle | None = None
        self._released = True

    @property
    def pending(self) -> bool:
        """Whether the rotation has been requested but not yet observed."""
        return not self._released

    def perform(
        self,
        application: Application,
        controller: DeviceController,
        registry: IdlingRegistry,
    ) -> None:
        self._registry = registry
        self._application = application
        registry.register(self._resource)
        self._resource.increment()
        self._released = False

        if application.orientation() == self.orientation:
            logger.debug("Device is already in the requested orientation, no need to rotate.")
            self._release()
            return

        self._handle = application.add_configuration_listener(self._on_configuration_changed)
        try:
            controller.set_screen_orientation(self.orientation)
        except Exception:
            self._release()
            raise

    def _on_configuration_changed(self, orientation: Orientation) -> None:
        if not self._released and orientation == self.orientation:
            logger.debug("Application's orientation was set to the requested orientation.")
            self._release()

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        if not self._resource.is_idle_now():
            self._resource.decrement()
        if self._registry is not None:
            self._registry.unregister(self._resource)
        if self._handle is not None and self._application is not None:
            self._application.remove_configuration_listener(self._handle)
            self._handle = None
