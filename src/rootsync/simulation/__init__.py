"""Deterministic in-process implementations of the picker's collaborators."""

from __future__ import annotations

from rootsync.simulation.context import SimulatedExecutionContext
from rootsync.simulation.world import (
    SimulatedApplication,
    SimulatedComponent,
    SimulatedDeviceController,
    SimulatedRoot,
    SimulatedRootLister,
    SimulatedSurface,
    SimulatedWorld,
)

__all__ = [
    "SimulatedApplication",
    "SimulatedComponent",
    "SimulatedDeviceController",
    "SimulatedExecutionContext",
    "SimulatedRoot",
    "SimulatedRootLister",
    "SimulatedSurface",
    "SimulatedWorld",
]
