import pytest

from sentinel_scanner.core.retry import (  # type: ignore[import]
    retry_call,
    retry_with_backoff,
    retrying,
)


class Flaky:
    def __init__(self, failures, result="ok", error=RuntimeError):
        self.failures = failures
        self.result = result
        self.error = error
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return (self.result, args)


def test_retry_call_returns_first_success():
    flaky = Flaky(failures=2)

    assert retry_call(flaky, "x", max_retries=3) == ("ok", ("x",))
    assert flaky.calls == 3


def test_retry_call_reraises_after_max_retries_plus_one_attempts():
    flaky = Flaky(failures=10)

    with pytest.raises(RuntimeError, match="failure 3"):
        retry_call(flaky, max_retries=2)
    assert flaky.calls == 3


def test_zero_retries_means_a_single_attempt():
    flaky = Flaky(failures=1)

    with pytest.raises(RuntimeError):
        retry_call(flaky, max_retries=0)
    assert flaky.calls == 1


def test_negative_retries_are_rejected():
    with pytest.raises(ValueError):
        retry_call(lambda: None, max_retries=-1)


def test_errors_outside_retry_on_propagate_immediately():
    flaky = Flaky(failures=5, error=KeyError)

    with pytest.raises(KeyError):
        retry_call(flaky, max_retries=3, retry_on=(ConnectionError,))
    assert flaky.calls == 1


def test_backoff_doubles_the_delay_between_attempts():
    flaky = Flaky(failures=10)
    delays = []

    with pytest.raises(RuntimeError):
        retry_with_backoff(flaky, max_retries=3, base_delay=1.0, sleep=delays.append)

    assert flaky.calls == 4
    assert delays == [1.0, 2.0, 4.0]


def test_backoff_stops_sleeping_once_successful():
    flaky = Flaky(failures=1)
    delays = []

    assert retry_with_backoff(flaky, max_retries=3, base_delay=0.5, sleep=delays.append)[0] == "ok"
    assert delays == [0.5]


def test_retrying_decorator_passes_keyword_arguments():
    calls = []

    @retrying(max_retries=2)
    def sometimes(value, *, suffix):
        calls.append(value)
        if len(calls) < 2:
            raise RuntimeError("try again")
        return value + suffix

    assert sometimes("a", suffix="!") == "a!"
    assert calls == ["a", "a"]
