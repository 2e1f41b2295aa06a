"""Device actions."""

from __future__ import annotations

from rootsync.device.orientation import ScreenOrientationAction

__all__ = ["ScreenOrientationAction"]
