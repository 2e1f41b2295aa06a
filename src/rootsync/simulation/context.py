"""SimulatedExecutionContext — virtual clock + task queue on one thread.

Time only moves inside loop_for_at_least() / loop_until_idle(); scheduled
tasks run synchronously there, in (time, insertion) order. This makes every
wait in the picker deterministic and instantaneous in wall-clock terms.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from collections.abc import Callable

from rootsync.core.exceptions import IdlingTimeoutError, NotOnControlThreadError
from rootsync.idling.registry import IdlingRegistry
from rootsync.picker.base import ExecutionContext

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class SimulatedExecutionContext(ExecutionContext):
    """Deterministic execution context bound to the creating thread."""

    def __init__(
        self,
        registry: IdlingRegistry | None = None,
        idle_timeout_ms: int = 26000,
        start_ms: int = 0,
    ) -> None:
        self.registry = registry if registry is not None else IdlingRegistry()
        self._idle_timeout_ms = idle_timeout_ms
        self._now = start_ms
        self._start = start_ms
        self._queue: list[tuple[int, int, Task]] = []
        self._seq = itertools.count()
        self._thread_id = threading.get_ident()
        self.yields: list[tuple[str, int]] = []

    # -- ExecutionContext ----------------------------------------------------

    def now_ms(self) -> int:
        return self._now

    def is_control_thread(self) -> bool:
        return threading.get_ident() == self._thread_id

    def loop_for_at_least(self, duration_ms: int) -> None:
        self._check_thread()
        self.yields.append(("loop_for_at_least", duration_ms))
        target = self._now + max(0, duration_ms)
        self._run_due(target)
        self._now = target

    def loop_until_idle(self) -> None:
        """Run due tasks; while an idling resource is busy, jump to the next task.

        Raises:
            IdlingTimeoutError: If resources stay busy past the idle timeout,
                or nothing is left scheduled that could make them idle.
        """
        self._check_thread()
        self.yields.append(("loop_until_idle", 0))
        deadline = self._now + self._idle_timeout_ms
        self._run_due(self._now)
        while not self.registry.is_idle_now():
            if not self._queue or self._queue[0][0] > deadline:
                busy = self.registry.busy_resources()
                self._now = max(self._now, deadline)
                logger.debug("Idle timeout after %sms, busy: %s", self._idle_timeout_ms, busy)
                raise IdlingTimeoutError(busy, self._idle_timeout_ms)
            self._run_due(self._queue[0][0])

    # -- Scheduling ----------------------------------------------------------

    def schedule(self, delay_ms: int, task: Task) -> None:
        """Run *task* once *delay_ms* of virtual time has passed."""
        self.schedule_at(self._now + max(0, delay_ms), task)

    def schedule_at(self, at_ms: int, task: Task) -> None:
        heapq.heappush(self._queue, (at_ms, next(self._seq), task))

    def run_pending(self) -> None:
        """Run tasks already due, without advancing time."""
        self._run_due(self._now)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def elapsed_ms(self) -> int:
        return self._now - self._start

    def _run_due(self, until_ms: int) -> None:
        while self._queue and self._queue[0][0] <= until_ms:
            at_ms, _, task = heapq.heappop(self._queue)
            self._now = max(self._now, at_ms)
            task()

    def _check_thread(self) -> None:
        if not self.is_control_thread():
            msg = "Execution context used off its control thread."
            raise NotOnControlThreadError(msg)
