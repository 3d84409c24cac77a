"""Bounded concurrency task runner shared by the spider and the probes."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple, TypeVar

T = TypeVar("T")

Task = Callable[[], T]


class BoundedExecutor:
    """Runs zero-argument tasks with at most ``concurrency`` executing at once.

    Tasks are pulled lazily from the iterable: a new one is submitted only
    when a running one finishes. Results come back in completion order, not
    submission order. A task that raises is logged and left out of the
    results; it never stops the remaining tasks.
    """

    def __init__(
        self,
        concurrency: int,
        *,
        logger: Optional[logging.Logger] = None,
        thread_name_prefix: str = "sentinel",
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency
        self._logger = logger or logging.getLogger(__name__)
        self._thread_name_prefix = thread_name_prefix
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak_in_flight = 0
        self.failures = 0

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        with self._lock:
            return self._peak_in_flight

    def run(self, tasks: Iterable[Task[T]]) -> List[T]:
        """Runs every task and returns the successful results."""

        return list(self.iter_completed(tasks))

    def iter_completed(self, tasks: Iterable[Task[T]]) -> Iterator[T]:
        task_iter = iter(tasks)
        pending: Set[concurrent.futures.Future] = set()

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.concurrency,
            thread_name_prefix=self._thread_name_prefix,
        ) as pool:
            for task in task_iter:
                pending.add(pool.submit(self._run_task, task))
                if len(pending) >= self.concurrency:
                    break

            while pending:
                done, pending = concurrent.futures.wait(
                    pending, return_when=concurrent.futures.FIRST_COMPLETED
                )

                # Refill freed slots before handing results to the caller.
                for _ in done:
                    next_task = next(task_iter, None)
                    if next_task is None:
                        break
                    pending.add(pool.submit(self._run_task, next_task))

                for future in done:
                    succeeded, value = future.result()
                    if succeeded:
                        yield value

    def _run_task(self, task: Task[T]) -> Tuple[bool, Optional[T]]:
        with self._lock:
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        try:
            return True, task()
        except Exception:
            with self._lock:
                self.failures += 1
            self._logger.warning("Task %r failed", task, exc_info=True)
            return False, None
        finally:
            with self._lock:
                self._in_flight -= 1
