"""Simulated UI world — roots, components and application on a virtual clock.

Every collaborator interface of the picker has a scripted implementation
here. SimulatedWorld.from_scenario() wires them from a Scenario model.
"""

from __future__ import annotations

import functools
import itertools
import logging
from typing import TYPE_CHECKING

from rootsync.core.exceptions import RootSyncError
from rootsync.core.models import Config, Orientation, SimulationResult, Stage
from rootsync.idling.registry import IdlingRegistry
from rootsync.lifecycle.monitor import InMemoryLifecycleMonitor
from rootsync.picker.base import (
    ActiveRootLister,
    Application,
    ConfigurationListener,
    DeviceController,
    ForegroundComponent,
    LayoutListener,
    ListenerHandle,
    Root,
    Surface,
)
from rootsync.picker.picker import RootViewPicker
from rootsync.picker.predicates import parse_predicate
from rootsync.simulation.context import SimulatedExecutionContext

if TYPE_CHECKING:
    from rootsync.core.models import RootSpec, Scenario
    from rootsync.picker.results import RootPredicate

logger = logging.getLogger(__name__)

_handles = itertools.count(1)


class SimulatedSurface(Surface):
    """Decor view stand-in; layout passes happen on notify_layout()."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: dict[ListenerHandle, LayoutListener] = {}

    def add_layout_listener(self, listener: LayoutListener) -> ListenerHandle:
        handle = next(_handles)
        self._listeners[handle] = listener
        return handle

    def remove_layout_listener(self, handle: ListenerHandle) -> None:
        self._listeners.pop(handle, None)

    def notify_layout(self) -> None:
        for handle, listener in list(self._listeners.items()):
            if handle in self._listeners:
                listener(self)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"SimulatedSurface({self.name!r})"


class SimulatedRoot(Root):
    """Scripted window. Tracks focus requests for assertions."""

    def __init__(
        self,
        name: str,
        stacking_order: int = 2,
        dialog: bool = False,
        focusable: bool = True,
        has_focus: bool = False,
        layout_requested: bool = False,
    ) -> None:
        self.name = name
        self._stacking_order = stacking_order
        self._dialog = dialog
        self._focusable = focusable
        self._has_focus = has_focus
        self.layout_requested = layout_requested
        self.focus_requests = 0
        self._surface = SimulatedSurface(name)

    @property
    def surface(self) -> SimulatedSurface:
        return self._surface

    def stacking_order(self) -> int:
        return self._stacking_order

    def is_dialog(self) -> bool:
        return self._dialog

    def is_layout_requested(self) -> bool:
        return self.layout_requested

    def has_focus(self) -> bool:
        return self._has_focus

    def is_focusable(self) -> bool:
        return self._focusable

    def request_focus(self) -> None:
        self.focus_requests += 1
        if self._focusable:
            self._has_focus = True

    def settle_layout(self) -> None:
        self.layout_requested = False
        self._surface.notify_layout()

    def __repr__(self) -> str:
        return (
            f"SimulatedRoot(name={self.name!r}, stacking_order={self._stacking_order}, "
            f"dialog={self._dialog}, focusable={self._focusable}, "
            f"has_focus={self._has_focus}, layout_requested={self.layout_requested})"
        )


class SimulatedRootLister(ActiveRootLister):
    def __init__(self, roots: list[Root] | None = None) -> None:
        self.roots: list[Root] = list(roots or [])

    def add(self, root: Root) -> None:
        self.roots.append(root)

    def remove(self, root: Root) -> None:
        if root in self.roots:
            self.roots.remove(root)

    def list_active_roots(self) -> list[Root]:
        return list(self.roots)


class SimulatedComponent(ForegroundComponent):
    """Activity stand-in; an orientation change triggers a layout pass."""

    def __init__(self, name: str, orientation: Orientation = Orientation.PORTRAIT) -> None:
        self._name = name
        self._orientation = orientation
        self._surface = SimulatedSurface(f"{name}.decor")

    @property
    def name(self) -> str:
        return self._name

    @property
    def surface(self) -> SimulatedSurface:
        return self._surface

    def orientation(self) -> Orientation:
        return self._orientation

    def set_orientation(self, orientation: Orientation) -> None:
        self._orientation = orientation
        self._surface.notify_layout()

    def __repr__(self) -> str:
        return f"SimulatedComponent({self._name!r}, {self._orientation.value})"


class SimulatedApplication(Application):
    def __init__(self, orientation: Orientation = Orientation.PORTRAIT) -> None:
        self._orientation = orientation
        self._listeners: dict[ListenerHandle, ConfigurationListener] = {}

    def orientation(self) -> Orientation:
        return self._orientation

    def set_orientation(self, orientation: Orientation) -> None:
        self._orientation = orientation
        for handle, listener in list(self._listeners.items()):
            if handle in self._listeners:
                listener(orientation)

    def add_configuration_listener(self, listener: ConfigurationListener) -> ListenerHandle:
        handle = next(_handles)
        self._listeners[handle] = listener
        return handle

    def remove_configuration_listener(self, handle: ListenerHandle) -> None:
        self._listeners.pop(handle, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class SimulatedDeviceController(DeviceController):
    """Applies orientation requests to the application after *delay_ms*."""

    def __init__(
        self,
        context: SimulatedExecutionContext,
        application: SimulatedApplication,
        delay_ms: int = 100,
    ) -> None:
        self._context = context
        self._application = application
        self._delay_ms = delay_ms
        self.requests: list[Orientation] = []

    def set_screen_orientation(self, orientation: Orientation) -> None:
        self.requests.append(orientation)
        self._context.schedule(
            self._delay_ms, functools.partial(self._application.set_orientation, orientation)
        )


class SimulatedWorld:
    """All simulated collaborators for one RootViewPicker."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.registry = IdlingRegistry()
        self.context = SimulatedExecutionContext(
            self.registry, idle_timeout_ms=self.config.timeouts.idle_timeout_ms
        )
        self.monitor = InMemoryLifecycleMonitor()
        self.application = SimulatedApplication()
        self.lister = SimulatedRootLister()
        self.components: dict[str, SimulatedComponent] = {}
        self.roots: dict[str, SimulatedRoot] = {}
        self.predicate_expression = "default"

    @classmethod
    def from_scenario(cls, scenario: Scenario, config: Config | None = None) -> SimulatedWorld:
        """Build a world and schedule every scripted event of *scenario*."""
        world = cls(config)
        if scenario.needs_foreground_component is not None:
            world.config = world.config.model_copy(
                update={"needs_foreground_component": scenario.needs_foreground_component}
            )
        app = world.application = SimulatedApplication(scenario.application.orientation)
        for change in scenario.application.orientation_changes:
            world.context.schedule_at(
                change.at_ms, functools.partial(app.set_orientation, change.orientation)
            )

        for component_spec in scenario.components:
            component = SimulatedComponent(component_spec.name, component_spec.orientation)
            world.components[component_spec.name] = component
            for transition in component_spec.transitions:
                world.context.schedule_at(
                    transition.at_ms,
                    functools.partial(
                        world.monitor.signal_lifecycle_change, component, transition.stage
                    ),
                )
            for change in component_spec.orientation_changes:
                world.context.schedule_at(
                    change.at_ms, functools.partial(component.set_orientation, change.orientation)
                )

        for root_spec in scenario.roots:
            world._schedule_root(root_spec)

        world.predicate_expression = scenario.predicate
        world.context.run_pending()
        return world

    def _schedule_root(self, root_spec: RootSpec) -> None:
        root = SimulatedRoot(
            root_spec.name,
            stacking_order=root_spec.stacking_order,
            dialog=root_spec.dialog,
            focusable=root_spec.focusable,
            has_focus=root_spec.has_focus,
            layout_requested=root_spec.ready_at_ms is None or root_spec.ready_at_ms > 0,
        )
        self.roots[root_spec.name] = root
        self.context.schedule_at(root_spec.appear_at_ms, functools.partial(self.lister.add, root))
        if root_spec.ready_at_ms:
            self.context.schedule_at(root_spec.ready_at_ms, root.settle_layout)
        if root_spec.remove_at_ms is not None:
            self.context.schedule_at(
                root_spec.remove_at_ms, functools.partial(self.lister.remove, root)
            )

    def resume(self, component: SimulatedComponent) -> None:
        """Register *component* and move it straight to RESUMED."""
        self.components[component.name] = component
        for stage in (Stage.CREATED, Stage.STARTED, Stage.RESUMED):
            self.monitor.signal_lifecycle_change(component, stage)

    def picker(self, predicate: RootPredicate | None = None) -> RootViewPicker:
        return RootViewPicker(
            self.context,
            self.lister,
            predicate or parse_predicate(self.predicate_expression),
            self.monitor,
            self.application,
            self.registry,
            config=self.config,
        )

    def run(self, scenario_name: str, predicate: RootPredicate | None = None) -> SimulationResult:
        """Run RootViewPicker.get() once and summarise the outcome."""
        picker = self.picker(predicate)
        try:
            surface = picker.get()
        except RootSyncError as e:
            logger.debug("Simulation %s failed: %s", scenario_name, e)
            return SimulationResult(
                scenario_name=scenario_name,
                success=False,
                error_type=type(e).__name__,
                error_message=str(e),
                elapsed_ms=self.context.elapsed_ms,
                yield_count=len(self.context.yields),
                busy_resources=self.registry.busy_resources(),
            )
        return SimulationResult(
            scenario_name=scenario_name,
            success=True,
            root_name=getattr(surface, "name", None),
            elapsed_ms=self.context.elapsed_ms,
            yield_count=len(self.context.yields),
            busy_resources=self.registry.busy_resources(),
        )
