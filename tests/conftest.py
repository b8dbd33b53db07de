"""Pytest configuration and fixtures."""

from collections.abc import Callable

import httpx
import pytest

from promptfeed.ingestion.base import Provider
from promptfeed.ingestion.envelope import AggregateSignal, NormalizedEnvelope, TrendRecord
from promptfeed.ingestion.rate_limiter import RateLimiter
from promptfeed.ingestion.retry import RetryOptions


class FakeClock:
    """Manual clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class StaticProvider(Provider[list[TrendRecord]]):
    """Provider returning canned records, or raising canned errors in order."""

    def __init__(self, name: str, records=None, errors=None, **kwargs) -> None:
        kwargs.setdefault("retry_options", RetryOptions(max_retries=0, base_delay=0.001))
        super().__init__(name, 600, **kwargs)
        self.records = list(records or [])
        self.errors = list(errors or [])
        self.calls = 0

    async def fetch_raw(self) -> list[TrendRecord]:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return list(self.records)

    def normalize(self, raw: list[TrendRecord]) -> NormalizedEnvelope:
        return NormalizedEnvelope(
            source=self.source_name,
            items=raw,
            aggregate=AggregateSignal(
                total_mentions=int(sum(r.weight for r in raw)),
                top_tickers=[f"${r.key}" for r in raw],
            ),
        )


def make_status_error(status_code: int, url: str = "https://api.test/") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_limiter() -> Callable[[], RateLimiter]:
    """Limiters large enough that tests never wait."""
    return lambda: RateLimiter(60_000)


@pytest.fixture
def fast_retry() -> RetryOptions:
    return RetryOptions(max_retries=1, base_delay=0.001)


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient served by a request handler."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build


@pytest.fixture
def static_provider() -> type[StaticProvider]:
    return StaticProvider


@pytest.fixture
def status_error() -> Callable[..., httpx.HTTPStatusError]:
    return make_status_error
