"""Collaborator ABCs consumed by the root picker.

The UI toolkit, the lifecycle notification source and the control-thread
scheduler are external. RootViewPicker only talks to them through these
interfaces; rootsync.simulation provides an in-process implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rootsync.core.models import Orientation, Stage

ListenerHandle = int
"""Opaque handle returned by every subscribe call, used to unsubscribe."""

LayoutListener = Callable[["Surface"], None]
LifecycleCallback = Callable[["ForegroundComponent", "Stage"], None]
ConfigurationListener = Callable[["Orientation"], None]


class Surface(ABC):
    """Low-level drawable behind a root or a component (the decor view)."""

    @abstractmethod
    def add_layout_listener(self, listener: LayoutListener) -> ListenerHandle:
        """Call *listener* after every layout pass of this surface."""
        ...

    @abstractmethod
    def remove_layout_listener(self, handle: ListenerHandle) -> None:
        """Detach a listener. Unknown handles are ignored."""
        ...


class Root(ABC):
    """One active top-level UI surface (a window)."""

    @property
    @abstractmethod
    def surface(self) -> Any:
        """Drawable handle handed back to the test driver."""
        ...

    @abstractmethod
    def stacking_order(self) -> int:
        """Window stacking priority. Higher is more topmost."""
        ...

    @abstractmethod
    def is_dialog(self) -> bool:
        """Whether this is a modal/dialog-like surface."""
        ...

    @abstractmethod
    def is_layout_requested(self) -> bool:
        """Whether the surface is currently re-laying-out."""
        ...

    @abstractmethod
    def has_focus(self) -> bool:
        ...

    @abstractmethod
    def is_focusable(self) -> bool:
        ...

    @abstractmethod
    def request_focus(self) -> None:
        """Ask the surface to take window focus."""
        ...

    def is_ready(self) -> bool:
        """Not mid-layout, and focused or inherently focusable."""
        return not self.is_layout_requested() and (self.has_focus() or self.is_focusable())


class ActiveRootLister(ABC):
    """Enumerates the roots that are currently active."""

    @abstractmethod
    def list_active_roots(self) -> list[Root]:
        """Live snapshot, in the toolkit's candidate order."""
        ...


class ForegroundComponent(ABC):
    """Application unit with an observable lifecycle (an activity)."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def surface(self) -> Surface:
        ...

    @abstractmethod
    def orientation(self) -> Orientation:
        """Orientation of the component's own configuration."""
        ...


class Application(ABC):
    """Application-wide configuration source."""

    @abstractmethod
    def orientation(self) -> Orientation:
        ...

    @abstractmethod
    def add_configuration_listener(self, listener: ConfigurationListener) -> ListenerHandle:
        """Call *listener* with the new orientation on every configuration change."""
        ...

    @abstractmethod
    def remove_configuration_listener(self, handle: ListenerHandle) -> None:
        ...


class LifecycleMonitor(ABC):
    """Reports component lifecycle stages and stage changes."""

    @abstractmethod
    def components_in_stage(self, stage: Stage) -> list[ForegroundComponent]:
        ...

    def components_in_stages(self, stages: Iterable[Stage]) -> list[ForegroundComponent]:
        """Components in any of *stages*, grouped by stage in the given order."""
        found: list[ForegroundComponent] = []
        for stage in stages:
            found.extend(self.components_in_stage(stage))
        return found

    @abstractmethod
    def add_lifecycle_callback(self, callback: LifecycleCallback) -> ListenerHandle:
        ...

    @abstractmethod
    def remove_lifecycle_callback(self, handle: ListenerHandle) -> None:
        """Detach a callback. Unknown handles are ignored."""
        ...


class ExecutionContext(ABC):
    """Cooperative scheduler bound to the designated control thread.

    The loop_* methods are the only suspension points: they run due
    callbacks (layout, lifecycle, scheduled work) synchronously on the
    control thread while time advances.
    """

    @abstractmethod
    def now_ms(self) -> int:
        """Monotonic time in milliseconds."""
        ...

    @abstractmethod
    def loop_for_at_least(self, duration_ms: int) -> None:
        """Run pending work until at least *duration_ms* has elapsed."""
        ...

    @abstractmethod
    def loop_until_idle(self) -> None:
        """Run pending work until nothing is due and all idling resources are idle."""
        ...

    @abstractmethod
    def is_control_thread(self) -> bool:
        """Whether the calling thread is the designated control thread."""
        ...


class DeviceController(ABC):
    """Device-level control used by device actions."""

    @abstractmethod
    def set_screen_orientation(self, orientation: Orientation) -> None:
        ...
