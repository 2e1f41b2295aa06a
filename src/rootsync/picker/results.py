"""Classify the active roots and pick one.

A RootResults is a snapshot of a single poll. It is never reused across
polls; RootResultFetcher builds a fresh one each time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from rootsync.core.exceptions import NoMatchingRootError
from rootsync.core.models import RootSelectionState

if TYPE_CHECKING:
    from rootsync.picker.base import ActiveRootLister, Root

logger = logging.getLogger(__name__)

RootPredicate = Callable[["Root"], bool]


class RootResults:
    """All active roots of one poll plus the ones matching the predicate."""

    def __init__(
        self,
        all_roots: Sequence[Root],
        picked_roots: Sequence[Root],
        predicate: RootPredicate,
    ) -> None:
        self.all_roots: tuple[Root, ...] = tuple(all_roots)
        self.picked_roots: tuple[Root, ...] = tuple(picked_roots)
        self.predicate = predicate

    @property
    def state(self) -> RootSelectionState:
        if not self.all_roots:
            return RootSelectionState.NO_ROOTS_PRESENT
        if not self.picked_roots:
            return RootSelectionState.NO_ROOTS_PICKED
        return RootSelectionState.ROOTS_PICKED

    def picked_root(self) -> Root:
        """The root to interact with.

        With several matches a dialog wins (it has the user's attention, so
        it gets the test's too); otherwise the topmost root wins, first seen
        on equal stacking order.

        Raises:
            NoMatchingRootError: If no root matched.
        """
        if not self.picked_roots:
            raise NoMatchingRootError(self.predicate, self.all_roots)
        if len(self.picked_roots) == 1:
            return self.picked_roots[0]

        logger.debug("Multiple root windows detected: %s", list(self.picked_roots))
        topmost = self.picked_roots[0]
        for root in self.picked_roots:
            if root.is_dialog():
                return root
            if root.stacking_order() > topmost.stacking_order():
                topmost = root
        return topmost


def evaluate_roots(all_roots: Sequence[Root], predicate: RootPredicate) -> RootResults:
    """Classify *all_roots* against *predicate*. Pure: no hidden state."""
    picked = [root for root in all_roots if predicate(root)]
    return RootResults(all_roots, picked, predicate)


class RootResultFetcher:
    """Fresh RootResults from the lister on every fetch()."""

    def __init__(self, lister: ActiveRootLister, predicate: RootPredicate) -> None:
        self._lister = lister
        self._predicate = predicate

    @property
    def predicate(self) -> RootPredicate:
        return self._predicate

    def fetch(self) -> RootResults:
        return evaluate_roots(self._lister.list_active_roots(), self._predicate)
