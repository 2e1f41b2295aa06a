"""ForegroundWaiter — block until at least one component is resumed.

Two tiers: first wait briefly for any live component to exist (its absence
usually means nothing was launched), then wait much longer for one of the
live components to reach RESUMED.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rootsync.core.exceptions import NoForegroundComponentError
from rootsync.core.models import NON_TERMINAL_STAGES, BackoffConfig, Stage

if TYPE_CHECKING:
    from rootsync.picker.base import ExecutionContext, ForegroundComponent, LifecycleMonitor

logger = logging.getLogger(__name__)


class ForegroundWaiter:
    """Waits for a resumed foreground component."""

    def __init__(
        self,
        context: ExecutionContext,
        monitor: LifecycleMonitor,
        created_wait_times: Sequence[int] | None = None,
        resumed_wait_times: Sequence[int] | None = None,
    ) -> None:
        defaults = BackoffConfig()
        self._context = context
        self._monitor = monitor
        self._created_wait_times = tuple(created_wait_times or defaults.component_created)
        self._resumed_wait_times = tuple(resumed_wait_times or defaults.component_resumed)

    def wait_for_resumed(self) -> None:
        """Return once a component is RESUMED.

        Raises:
            NoForegroundComponentError: If no component shows up, or none of
                the live components reaches RESUMED.
        """
        if self._resumed():
            return
        self._context.loop_until_idle()
        if self._resumed():
            return

        components = self._live_components()
        if not components:
            for wait_ms in self._created_wait_times:
                logger.warning(
                    "No components found - waiting: %sms for one to appear.", wait_ms
                )
                self._context.loop_for_at_least(wait_ms)
                components = self._live_components()
                if components:
                    break
        if not components:
            msg = (
                "No components found. Did you forget to launch the component "
                "before interacting with it?"
            )
            raise NoForegroundComponentError(msg)

        for wait_ms in self._resumed_wait_times:
            logger.warning(
                "No component currently resumed - waiting: %sms for one to appear.", wait_ms
            )
            self._context.loop_for_at_least(wait_ms)
            if self._resumed():
                return
        msg = (
            f"No components in stage {Stage.RESUMED.value}. "
            f"Live components: {[c.name for c in self._live_components()]}. "
            "Did you forget to launch the component?"
        )
        raise NoForegroundComponentError(msg)

    def _resumed(self) -> list[ForegroundComponent]:
        return self._monitor.components_in_stage(Stage.RESUMED)

    def _live_components(self) -> list[ForegroundComponent]:
        return self._monitor.components_in_stages(NON_TERMINAL_STAGES)
