"""Retry helpers with immediate and exponential backoff semantics."""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryableErrors = Tuple[Type[BaseException], ...]


def _attempts(
    fn: Callable[..., T],
    args: Tuple[Any, ...],
    *,
    max_retries: int,
    delay_for: Callable[[int], float],
    retry_on: RetryableErrors,
    sleep: Callable[[float], None],
    log: logging.Logger,
) -> T:
    if max_retries < 0:
        raise ValueError("max_retries must not be negative")

    attempt = 0
    while True:
        try:
            return fn(*args)
        except retry_on as exc:
            if attempt >= max_retries:
                log.debug("Giving up on %s after %d attempt(s): %s", _name(fn), attempt + 1, exc)
                raise
            delay = delay_for(attempt)
            log.debug(
                "Attempt %d/%d of %s failed (%s); retrying in %.2fs",
                attempt + 1,
                max_retries + 1,
                _name(fn),
                exc,
                delay,
            )
            if delay > 0:
                sleep(delay)
            attempt += 1


def _name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def retry_call(
    fn: Callable[..., T],
    *args: Any,
    max_retries: int = 3,
    retry_on: RetryableErrors = (Exception,),
    log: Optional[logging.Logger] = None,
) -> T:
    """Calls ``fn`` up to ``max_retries + 1`` times without waiting in between.

    The last error is re-raised once the attempts are exhausted.
    """

    return _attempts(
        fn,
        args,
        max_retries=max_retries,
        delay_for=lambda _attempt: 0.0,
        retry_on=retry_on,
        sleep=time.sleep,
        log=log or logger,
    )


def retry_with_backoff(
    fn: Callable[..., T],
    *args: Any,
    max_retries: int = 3,
    base_delay: float = 1.0,
    retry_on: RetryableErrors = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    log: Optional[logging.Logger] = None,
) -> T:
    """Like :func:`retry_call` but waits ``base_delay * 2 ** attempt`` seconds
    before each retry (1s, 2s, 4s, ... with the default base)."""

    return _attempts(
        fn,
        args,
        max_retries=max_retries,
        delay_for=lambda attempt: base_delay * (2 ** attempt),
        retry_on=retry_on,
        sleep=sleep,
        log=log or logger,
    )


def retrying(
    max_retries: int = 3,
    *,
    backoff: bool = False,
    base_delay: float = 1.0,
    retry_on: RetryableErrors = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of :func:`retry_call` / :func:`retry_with_backoff`."""

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            bound = functools.partial(fn, **kwargs) if kwargs else fn
            if backoff:
                return retry_with_backoff(
                    bound,
                    *args,
                    max_retries=max_retries,
                    base_delay=base_delay,
                    retry_on=retry_on,
                )
            return retry_call(bound, *args, max_retries=max_retries, retry_on=retry_on)

        return wrapper

    return decorator
