import heapq
import itertools
import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self._due = due
        self._callback = callback
        self._cancelled = False
        self._done = False

    @property
    def due(self) -> float:  # noqa: D102
        return self._due

    @property
    def cancelled(self) -> bool:  # noqa: D102
        return self._cancelled

    def cancel(self) -> None:
        """Prevent the callback from running. Has no effect once it has run."""
        if not self._done:
            self._cancelled = True

    def _run(self) -> None:
        self._done = True
        self._callback()


class Scheduler:
    """Deferred callbacks for a single-threaded game loop.

    Nothing runs on its own: the owner calls run_pending() (usually once per UI frame)
    and every task whose due time has passed runs on the caller's thread.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._queue: list[tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:  # noqa: D102
        if delay < 0:
            msg = f"Delay must be non-negative, got {delay}"
            raise ValueError(msg)
        task = ScheduledTask(self._clock() + delay, callback)
        heapq.heappush(self._queue, (task.due, next(self._counter), task))
        return task

    def run_pending(self) -> int:
        """Run every due task in due-time order. Returns how many ran.

        Tasks scheduled by a running callback wait for the next call, even with a zero delay.
        """
        now = self._clock()
        due: list[ScheduledTask] = []
        while self._queue and self._queue[0][0] <= now:
            due.append(heapq.heappop(self._queue)[2])

        ran = 0
        for task in due:
            if task.cancelled:
                continue
            task._run()  # noqa: SLF001
            ran += 1
        return ran

    def has_pending(self) -> bool:  # noqa: D102
        return any(not task.cancelled for _, _, task in self._queue)

    def cancel_all(self) -> None:  # noqa: D102
        for _, _, task in self._queue:
            task.cancel()
        logger.debug("Cancelled %d pending task(s)", len(self._queue))
        self._queue.clear()
