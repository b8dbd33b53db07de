"""Exponential backoff retry for transient HTTP failures."""

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from promptfeed.config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


@dataclass(frozen=True)
class RetryOptions:
    """Retry policy.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_delay: Delay before the first retry in seconds; doubles per attempt
        retryable_status_codes: HTTP status codes treated as transient
    """

    max_retries: int = 3
    base_delay: float = 1.0
    retryable_status_codes: frozenset[int] = field(
        default=DEFAULT_RETRYABLE_STATUS_CODES
    )

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be positive")
        # Accept any iterable of codes
        object.__setattr__(
            self, "retryable_status_codes", frozenset(self.retryable_status_codes)
        )

    @classmethod
    def from_settings(cls) -> "RetryOptions":
        """Build the configured default policy."""
        return cls(
            max_retries=settings.retry_max_retries,
            base_delay=settings.retry_base_delay,
            retryable_status_codes=frozenset(settings.retry_status_codes),
        )

    def delay_for(self, attempt: int) -> float:
        """Backoff applied after the failure of zero-based ``attempt``."""
        return self.base_delay * 2**attempt


def _status_code(error: BaseException) -> int | None:
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def _caused_by_reset(error: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, ConnectionResetError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def is_retryable_error(
    error: BaseException,
    retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
) -> bool:
    """Check whether an error is transient.

    Retryable: a response status in ``retryable_status_codes``, a timeout,
    or a connection reset anywhere in the cause chain.
    """
    status = _status_code(error)
    if status is not None:
        return status in set(retryable_status_codes)

    if isinstance(error, (httpx.TimeoutException, TimeoutError, ConnectionResetError)):
        return True

    if isinstance(error, httpx.TransportError):
        return _caused_by_reset(error)

    return False


def _log_retry(options: RetryOptions) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0.0
        logger.warning(
            f"Retry {state.attempt_number}/{options.max_retries} "
            f"after {delay:.2f}s: {error!r}"
        )

    return before_sleep


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions | None = None,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **overrides: Any,
) -> T:
    """Run ``operation`` with exponential backoff on transient failures.

    Attempts run up to ``max_retries + 1`` times. Non-retryable errors and the
    error of the final attempt are raised unchanged. The wait after the
    failure of attempt ``n`` (zero-based) is ``base_delay * 2**n``.

    Args:
        operation: Zero-argument coroutine function to run
        options: Retry policy (defaults to the configured policy)
        sleep: Coroutine used for backoff waits
        **overrides: Field overrides applied on top of ``options``
    """
    opts = options or RetryOptions.from_settings()
    if overrides:
        opts = dataclasses.replace(opts, **overrides)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(opts.max_retries + 1),
        wait=wait_exponential(multiplier=opts.base_delay, exp_base=2),
        retry=retry_if_exception(
            lambda e: is_retryable_error(e, opts.retryable_status_codes)
        ),
        before_sleep=_log_retry(opts),
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)
