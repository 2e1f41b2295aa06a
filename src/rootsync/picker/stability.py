"""Poll a picked root until it is interactable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rootsync.core.exceptions import RootViewWithoutFocusError
from rootsync.picker.backoff import Backoff

if TYPE_CHECKING:
    from rootsync.core.models import BackoffConfig
    from rootsync.picker.base import ExecutionContext, Root

logger = logging.getLogger(__name__)


class RootStabilityWaiter:
    """Waits for a root to stop laying out and to have (or accept) focus."""

    def __init__(
        self,
        context: ExecutionContext,
        timeout_ms: int = 10000,
        backoff_config: BackoffConfig | None = None,
    ) -> None:
        self._context = context
        self._timeout_ms = timeout_ms
        self._backoff_config = backoff_config

    def wait_until_ready(self, root: Root) -> Root:
        """Return *root* once ready, nudging focus between polls.

        Raises:
            RootViewWithoutFocusError: If not ready within the timeout.
        """
        deadline = self._context.now_ms() + self._timeout_ms
        backoff = Backoff.root_not_ready(self._backoff_config)
        while self._context.now_ms() <= deadline:
            if root.is_ready():
                return root
            root.request_focus()
            self._context.loop_for_at_least(backoff.next_ms())

        raise RootViewWithoutFocusError(root, self._timeout_ms)
