"""Root picking: selection, readiness waits and backoff policies."""

from __future__ import annotations

from rootsync.picker.backoff import Backoff
from rootsync.picker.configuration import ConfigurationSettlementWaiter
from rootsync.picker.foreground import ForegroundWaiter
from rootsync.picker.picker import RootViewPicker
from rootsync.picker.results import RootResultFetcher, RootResults, evaluate_roots
from rootsync.picker.stability import RootStabilityWaiter

__all__ = [
    "Backoff",
    "ConfigurationSettlementWaiter",
    "ForegroundWaiter",
    "RootResultFetcher",
    "RootResults",
    "RootStabilityWaiter",
    "RootViewPicker",
    "evaluate_roots",
]
