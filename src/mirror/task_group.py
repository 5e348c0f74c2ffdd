"""Fail-fast fan-out over a thread pool.

TaskGroup runs one task per item, waits for all of them, and re-raises the
first failure. When a task fails, the shared cancellation event is set and
tasks that have not started yet are cancelled; running tasks are expected to
check the event at their next suspension point.
"""

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class TaskGroup(Generic[T, R]):
    """Runs a batch of tasks concurrently with a shared cancellation signal.

    Example:
        >>> cancel = threading.Event()
        >>> group = TaskGroup(max_workers=25, cancel_event=cancel)
        >>> paths = group.run(lambda page, ev: pipeline.run(base, page, ev), pages)
    """

    def __init__(self, max_workers: int, cancel_event: Optional[threading.Event] = None):
        """Initialize the task group.

        Args:
            max_workers: Maximum number of tasks running at once
            cancel_event: Cancellation signal shared with the rest of the run
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers
        self.cancel_event = cancel_event or threading.Event()
        self._lock = threading.Lock()
        self._first_error: Optional[BaseException] = None

    def _call(self, func: Callable[[T, threading.Event], R], item: T) -> R:
        try:
            return func(item, self.cancel_event)
        except BaseException as e:
            with self._lock:
                if self._first_error is None:
                    self._first_error = e
            self.cancel_event.set()
            raise

    def run(self, func: Callable[[T, threading.Event], R], items: Sequence[T]) -> List[R]:
        """Run ``func(item, cancel_event)`` for every item and join them all.

        Args:
            func: Task body; receives the item and the cancellation event
            items: Batch of inputs, one task each

        Returns:
            Task results in the order of ``items``

        Raises:
            The first exception raised by any task
        """
        if not items:
            return []

        self._first_error = None
        workers = min(self.max_workers, len(items))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._call, func, item) for item in items]
            try:
                _, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            except BaseException:
                self.cancel_event.set()
                for future in futures:
                    future.cancel()
                raise

            if self._first_error is not None:
                cancelled = sum(1 for future in not_done if future.cancel())
                logger.debug(
                    f"Task failed; cancelled {cancelled} pending task(s), "
                    f"waiting for running tasks to stop"
                )
            # Leaving the executor joins the tasks that are still running

        if self._first_error is not None:
            raise self._first_error

        return [future.result() for future in futures]
