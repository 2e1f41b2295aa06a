"""Idling resources shared across synchronization points."""

from __future__ import annotations

from rootsync.idling.counting import CountingIdlingResource
from rootsync.idling.registry import IdlingRegistry

__all__ = [
    "CountingIdlingResource",
    "IdlingRegistry",
]
