"""rootsync custom exception hierarchy.

All exceptions inherit from RootSyncError.
Synchronization failures are terminal for the current attempt and carry
enough context (roots, predicate) to diagnose why no root became usable.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rootsync.picker.base import Root


class RootSyncError(Exception):
    """Base exception for all rootsync errors."""


class ConfigError(RootSyncError):
    """Configuration file load/validation error."""


class ScenarioError(RootSyncError):
    """Simulation scenario YAML parsing/validation error."""


class NotOnControlThreadError(RootSyncError):
    """Called from a thread other than the designated control thread."""


class NoForegroundComponentError(RootSyncError):
    """No foreground component reached the resumed stage."""


class NoMatchingRootError(RootSyncError):
    """No root matched the selection predicate before the timeout."""

    def __init__(
        self,
        predicate: Callable[[Root], bool] | Any,
        all_roots: Sequence[Root],
    ) -> None:
        self.predicate = predicate
        self.all_roots = list(all_roots)
        if self.all_roots:
            listing = "\n".join(f"  {root!r}" for root in self.all_roots)
        else:
            listing = "  (none)"
        super().__init__(
            f"No root matched predicate {predicate!r}.\n"
            f"All active roots ({len(self.all_roots)}):\n{listing}"
        )


class RootViewWithoutFocusError(RootSyncError):
    """Picked root never finished layout or took focus before the timeout."""

    def __init__(self, root: Root, timeout_ms: int) -> None:
        self.root = root
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Waited for the root of the view hierarchy to have focus and not "
            f"request layout for {timeout_ms}ms. If you specified a non default "
            f"root predicate, it may be picking a root that never takes focus. "
            f"Root:\n{root!r}"
        )


class IdlingError(RootSyncError):
    """Idling resource misuse (double registration, negative counter, etc.)."""


class IdlingTimeoutError(IdlingError):
    """Execution context could not reach idle within its idle timeout."""

    def __init__(self, busy: Sequence[str], timeout_ms: int) -> None:
        self.busy = list(busy)
        self.timeout_ms = timeout_ms
        names = ", ".join(self.busy) or "(none)"
        super().__init__(f"Not idle after {timeout_ms}ms. Busy resources: {names}")
