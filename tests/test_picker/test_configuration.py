"""Tests for orientation change settlement."""

from __future__ import annotations

import functools
import logging

import pytest

from rootsync.core.exceptions import IdlingError, IdlingTimeoutError
from rootsync.core.models import Orientation, Stage
from rootsync.idling.counting import CountingIdlingResource
from rootsync.picker.configuration import IDLING_RESOURCE_NAME, ConfigurationSettlementWaiter
from rootsync.simulation.world import SimulatedComponent, SimulatedWorld


def _waiter(world: SimulatedWorld) -> ConfigurationSettlementWaiter:
    return ConfigurationSettlementWaiter(
        world.context, world.monitor, world.application, world.registry
    )


def _rotated_world(world: SimulatedWorld) -> SimulatedComponent:
    """Application already landscape, component still portrait."""
    world.application.set_orientation(Orientation.LANDSCAPE)
    component = SimulatedComponent("Main", Orientation.PORTRAIT)
    world.resume(component)
    return component


def _assert_clean(world: SimulatedWorld, component: SimulatedComponent) -> None:
    assert len(world.registry) == 0
    assert component.surface.listener_count == 0
    assert world.monitor.callback_count == 0


class TestNoWaitNeeded:
    def test_no_resumed_component(
        self, world: SimulatedWorld, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="rootsync.picker.configuration")
        assert _waiter(world).wait() is False
        assert "could not be found" in caplog.text
        assert world.context.yields == []
        assert len(world.registry) == 0

    def test_orientations_match(self, world: SimulatedWorld) -> None:
        world.resume(SimulatedComponent("Main", Orientation.PORTRAIT))
        assert _waiter(world).wait() is False
        assert world.context.yields == []


class TestSettlement:
    def test_layout_pass_converges(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        world.context.schedule_at(
            50, functools.partial(component.set_orientation, Orientation.LANDSCAPE)
        )
        assert _waiter(world).wait() is True
        assert world.context.now_ms() == 50
        _assert_clean(world, component)

    def test_layout_pass_without_convergence_keeps_waiting(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        world.context.schedule_at(20, component.surface.notify_layout)
        world.context.schedule_at(
            80, functools.partial(component.set_orientation, Orientation.LANDSCAPE)
        )
        _waiter(world).wait()
        assert world.context.now_ms() == 80
        _assert_clean(world, component)

    def test_resumed_again_converges(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        recreated = SimulatedComponent("Main", Orientation.LANDSCAPE)
        world.context.schedule_at(
            30,
            functools.partial(world.monitor.signal_lifecycle_change, recreated, Stage.RESUMED),
        )
        _waiter(world).wait()
        assert world.context.now_ms() == 30
        _assert_clean(world, component)

    def test_other_component_resumed_is_ignored(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        other = SimulatedComponent("Settings", Orientation.LANDSCAPE)
        world.context.schedule_at(
            10, functools.partial(world.monitor.signal_lifecycle_change, other, Stage.RESUMED)
        )
        world.context.schedule_at(
            60, functools.partial(component.set_orientation, Orientation.LANDSCAPE)
        )
        _waiter(world).wait()
        assert world.context.now_ms() == 60

    def test_both_observers_in_same_yield_release_once(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)

        def converge_and_resume() -> None:
            component.set_orientation(Orientation.LANDSCAPE)
            world.monitor.signal_lifecycle_change(component, Stage.RESUMED)

        world.context.schedule_at(25, converge_and_resume)
        _waiter(world).wait()
        _assert_clean(world, component)

    def test_token_busy_while_waiting(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        seen: list[list[str]] = []
        world.context.schedule_at(10, lambda: seen.append(world.registry.busy_resources()))
        world.context.schedule_at(
            20, functools.partial(component.set_orientation, Orientation.LANDSCAPE)
        )
        _waiter(world).wait()
        assert seen == [[IDLING_RESOURCE_NAME]]

    def test_multiple_resumed_uses_first(
        self, world: SimulatedWorld, caplog: pytest.LogCaptureFixture
    ) -> None:
        component = _rotated_world(world)
        world.resume(SimulatedComponent("Other", Orientation.LANDSCAPE))
        world.context.schedule_at(
            15, functools.partial(component.set_orientation, Orientation.LANDSCAPE)
        )
        assert _waiter(world).wait() is True
        assert "Expected one resumed component, found 2" in caplog.text
        _assert_clean(world, component)


class TestFailurePaths:
    def test_idle_timeout_releases_everything(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        with pytest.raises(IdlingTimeoutError) as exc_info:
            _waiter(world).wait()
        assert exc_info.value.busy == [IDLING_RESOURCE_NAME]
        _assert_clean(world, component)

    def test_name_clash_leaves_other_resource_registered(self, world: SimulatedWorld) -> None:
        component = _rotated_world(world)
        other = CountingIdlingResource(IDLING_RESOURCE_NAME)
        world.registry.register(other)
        with pytest.raises(IdlingError):
            _waiter(world).wait()
        assert world.registry.resources() == [other]
        assert component.surface.listener_count == 0
        assert world.monitor.callback_count == 0
