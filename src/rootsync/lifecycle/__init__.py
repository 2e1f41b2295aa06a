"""Lifecycle stage monitoring."""

from __future__ import annotations

from rootsync.lifecycle.monitor import InMemoryLifecycleMonitor

__all__ = ["InMemoryLifecycleMonitor"]
