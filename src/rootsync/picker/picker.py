"""RootViewPicker — the interactable root surface, once it is stable.

Sequences the foreground wait, the configuration settlement wait, root
selection and the root stability wait. Must be driven from the execution
context's control thread.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rootsync.core.exceptions import NoMatchingRootError, NotOnControlThreadError
from rootsync.core.models import Config, RootSelectionState
from rootsync.picker.backoff import Backoff
from rootsync.picker.configuration import ConfigurationSettlementWaiter
from rootsync.picker.foreground import ForegroundWaiter
from rootsync.picker.results import RootPredicate, RootResultFetcher
from rootsync.picker.stability import RootStabilityWaiter

if TYPE_CHECKING:
    from rootsync.idling.registry import IdlingRegistry
    from rootsync.picker.base import (
        ActiveRootLister,
        Application,
        ExecutionContext,
        LifecycleMonitor,
        Root,
    )

logger = logging.getLogger(__name__)


class RootViewPicker:
    """Provides the surface of the root the test driver should interact with.

    All collaborators are injected; nothing is looked up globally. The
    picker holds no state between get() calls apart from its configuration.
    """

    def __init__(
        self,
        context: ExecutionContext,
        lister: ActiveRootLister,
        predicate: RootPredicate,
        monitor: LifecycleMonitor,
        application: Application,
        registry: IdlingRegistry,
        config: Config | None = None,
        needs_foreground_component: bool | None = None,
    ) -> None:
        self._config = config or Config()
        self._context = context
        self._fetcher = RootResultFetcher(lister, predicate)
        if needs_foreground_component is None:
            needs_foreground_component = self._config.needs_foreground_component
        self.needs_foreground_component = needs_foreground_component

        backoff = self._config.backoff
        self._foreground = ForegroundWaiter(
            context,
            monitor,
            created_wait_times=backoff.component_created,
            resumed_wait_times=backoff.component_resumed,
        )
        self._settlement = ConfigurationSettlementWaiter(context, monitor, application, registry)
        self._stability = RootStabilityWaiter(
            context,
            timeout_ms=self._config.timeouts.root_ready_ms,
            backoff_config=backoff,
        )

    def get(self) -> Any:
        """Surface of the picked root, once it is ready for interaction.

        Raises:
            NotOnControlThreadError: If called off the control thread.
            NoForegroundComponentError: If no component reaches RESUMED.
            NoMatchingRootError: If no root matches within the pick timeout.
            RootViewWithoutFocusError: If the picked root never stabilizes.
        """
        if not self._context.is_control_thread():
            msg = "RootViewPicker.get() must be called on the control thread."
            raise NotOnControlThreadError(msg)

        if self.needs_foreground_component:
            self._foreground.wait_for_resumed()
        self._settlement.wait()
        return self._stability.wait_until_ready(self.pick_root()).surface

    def pick_root(self) -> Root:
        """Poll until a root matches the predicate.

        Raises:
            NoMatchingRootError: If the pick timeout elapses without a match.
        """
        deadline = self._context.now_ms() + self._config.timeouts.pick_root_ms
        no_active_roots = Backoff.no_active_roots(self._config.backoff)
        no_matching_root = Backoff.no_matching_root(self._config.backoff)

        results = self._fetcher.fetch()
        while self._context.now_ms() <= deadline:
            state = results.state
            if state == RootSelectionState.ROOTS_PICKED:
                return results.picked_root()
            if state == RootSelectionState.NO_ROOTS_PRESENT:
                self._context.loop_for_at_least(no_active_roots.next_ms())
            else:
                self._context.loop_for_at_least(no_matching_root.next_ms())
            results = self._fetcher.fetch()

        # The last fetch may have happened right at the deadline.
        if results.state == RootSelectionState.ROOTS_PICKED:
            return results.picked_root()
        logger.debug("No root matched within %sms", self._config.timeouts.pick_root_ms)
        raise NoMatchingRootError(results.predicate, results.all_roots)
