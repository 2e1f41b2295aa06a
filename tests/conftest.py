"""Shared fixtures: a fresh simulated world per test."""

from __future__ import annotations

import pytest

from rootsync.core.models import Config, Orientation
from rootsync.simulation.world import SimulatedComponent, SimulatedRoot, SimulatedWorld


@pytest.fixture()
def config() -> Config:
    return Config()


@pytest.fixture()
def world(config: Config) -> SimulatedWorld:
    return SimulatedWorld(config)


@pytest.fixture()
def resumed_world(world: SimulatedWorld) -> SimulatedWorld:
    """World with one resumed portrait component and one ready root."""
    world.resume(SimulatedComponent("MainActivity", Orientation.PORTRAIT))
    world.lister.add(SimulatedRoot("main", stacking_order=2, has_focus=True))
    return world

