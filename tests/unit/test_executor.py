import threading
import time

import pytest

from tests.helpers.sentinel_imports import BoundedExecutor


def test_rejects_non_positive_concurrency():
    with pytest.raises(ValueError):
        BoundedExecutor(0)


def test_never_exceeds_concurrency_and_runs_each_task_once():
    executor = BoundedExecutor(3)
    calls = []
    lock = threading.Lock()

    def make_task(index):
        def task():
            with lock:
                calls.append(index)
            time.sleep(0.01)
            return index

        return task

    results = executor.run(make_task(index) for index in range(20))

    assert sorted(results) == list(range(20))
    assert sorted(calls) == list(range(20))
    assert 1 <= executor.peak_in_flight <= 3
    assert executor.in_flight == 0


def test_concurrency_larger_than_task_count():
    executor = BoundedExecutor(30)

    results = executor.run([lambda: "a", lambda: "b"])

    assert sorted(results) == ["a", "b"]


def test_empty_task_list_returns_nothing():
    assert BoundedExecutor(2).run([]) == []


def test_failed_tasks_are_dropped_without_stopping_others():
    executor = BoundedExecutor(2)

    def boom():
        raise RuntimeError("task failed")

    results = executor.run([lambda: 1, boom, lambda: 3, boom])

    assert sorted(results) == [1, 3]
    assert executor.failures == 2


def test_results_arrive_in_completion_order():
    release = threading.Event()

    def slow():
        release.wait(timeout=5)
        return "slow"

    def fast():
        return "fast"

    completed = BoundedExecutor(2).iter_completed([slow, fast])

    assert next(completed) == "fast"
    release.set()
    assert list(completed) == ["slow"]


def test_tasks_are_pulled_lazily():
    release = threading.Event()
    pulled = []

    def blocked():
        release.wait(timeout=5)
        return "blocked"

    def tasks():
        pulled.append("fast")
        yield lambda: "fast"
        for index in range(4):
            pulled.append(index)
            yield blocked

    completed = BoundedExecutor(2).iter_completed(tasks())

    assert next(completed) == "fast"
    # Two submitted up front plus one refill for the finished task.
    assert len(pulled) == 3

    release.set()
    assert list(completed) == ["blocked"] * 4
    assert len(pulled) == 5
