"""Base classes for data ingestion."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import httpx

from promptfeed.config.settings import settings
from promptfeed.ingestion.envelope import NormalizedEnvelope
from promptfeed.ingestion.rate_limiter import RateLimiter
from promptfeed.ingestion.retry import RetryOptions, with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")
RawT = TypeVar("RawT")


@dataclass
class PartialResult(Generic[T]):
    """Outcome of a batch of independent sub-requests."""

    results: list[T] = field(default_factory=list)
    skipped: int = 0
    errors: list[BaseException] = field(default_factory=list)

    def raise_if_empty(self) -> None:
        """Re-raise the last error when every sub-request failed."""
        if not self.results and self.errors:
            raise self.errors[-1]


async def collect_partial(
    calls: Iterable[Awaitable[T]],
    *,
    logger: logging.Logger = logger,
) -> PartialResult[T]:
    """Run sub-requests concurrently, keeping successes and skipping failures.

    Results keep input order. ``None`` results count as collected but are
    dropped from ``results``.
    """
    outcomes = await asyncio.gather(*calls, return_exceptions=True)

    partial: PartialResult[T] = PartialResult()
    for outcome in outcomes:
        # Cancellation and interpreter exits are never skipped
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Exception):
            logger.warning(f"Skipping failed sub-request: {outcome!r}")
            partial.skipped += 1
            partial.errors.append(outcome)
        elif outcome is not None:
            partial.results.append(outcome)

    if partial.skipped:
        logger.info(
            f"Collected {len(partial.results)} results, skipped {partial.skipped}"
        )
    return partial


class Provider(ABC, Generic[RawT]):
    """Abstract base class for data providers.

    ``get_data`` is the only public entry point: it takes a rate limit token,
    runs ``fetch_raw`` under the retry policy and passes the result through
    ``normalize``. Subclasses supply only those two steps.
    """

    source_name: str = "base"
    rate_limit: int = 60  # requests per minute

    def __init__(
        self,
        name: str | None = None,
        requests_per_minute: int | None = None,
        *,
        retry_options: RetryOptions | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        if name is not None:
            self.source_name = name
        if requests_per_minute is not None:
            self.rate_limit = requests_per_minute
        self.rate_limiter = rate_limiter or RateLimiter(self.rate_limit)
        self.retry_options = retry_options or RetryOptions.from_settings()
        self.logger = logging.getLogger(f"provider.{self.source_name}")

    @property
    def name(self) -> str:
        return self.source_name

    async def get_data(self) -> NormalizedEnvelope:
        """Fetch and normalize the latest data from this source.

        Raises:
            The last error of ``fetch_raw`` once retries are exhausted, or the
            first non-retryable one.
        """
        self.logger.info("Fetching data")

        await self.rate_limiter.acquire()

        try:
            raw = await with_retry(self.fetch_raw, self.retry_options)
        except Exception as e:
            self.logger.error(f"Fetch failed: {e!r}")
            raise

        envelope = self.normalize(raw)
        self.logger.info(f"Fetched {len(envelope.items)} items")
        return envelope

    @abstractmethod
    async def fetch_raw(self) -> RawT:
        """Fetch raw data from the source."""
        ...

    @abstractmethod
    def normalize(self, raw: RawT) -> NormalizedEnvelope:
        """Convert raw data into a normalized envelope. Must not do I/O."""
        ...


class HTTPProvider(Provider[RawT]):
    """Provider backed by a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        name: str | None = None,
        requests_per_minute: int | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        retry_options: RetryOptions | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(
            name,
            requests_per_minute,
            retry_options=retry_options,
            rate_limiter=rate_limiter,
        )
        self._http = http_client or httpx.AsyncClient(
            headers={"User-Agent": settings.http_user_agent},
            timeout=settings.http_timeout,
            follow_redirects=True,
        )

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        """Rate limited GET that raises on non-2xx responses."""
        await self.rate_limiter.acquire()
        resp = await self._http.get(url, **kwargs)
        resp.raise_for_status()
        return resp

    async def aclose(self) -> None:
        await self._http.aclose()
