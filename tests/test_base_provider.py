"""Tests for the provider contract and partial collection."""

import asyncio

import httpx
import pytest

from promptfeed.config.constants import Sentiment
from promptfeed.ingestion.base import PartialResult, Provider, collect_partial
from promptfeed.ingestion.envelope import AggregateSignal, NormalizedEnvelope, TrendRecord
from promptfeed.ingestion.rate_limiter import RateLimiter
from promptfeed.ingestion.retry import RetryOptions


class TestProviderContract:
    def test_cannot_instantiate_without_extension_points(self):
        with pytest.raises(TypeError):
            Provider("incomplete", 10)

    def test_owns_limiter_sized_from_budget(self, static_provider):
        provider = static_provider("stub")

        assert provider.name == "stub"
        assert provider.rate_limiter.capacity == 600
        assert provider.logger.name == "provider.stub"

    @pytest.mark.asyncio
    async def test_get_data_returns_normalized_envelope(self, static_provider):
        records = [TrendRecord(key="WIF", weight=3.0), TrendRecord(key="BONK", weight=1.0)]
        provider = static_provider("stub", records=records)

        envelope = await provider.get_data()

        assert envelope.source == "stub"
        assert envelope.keys() == ["WIF", "BONK"]
        assert envelope.aggregate.total_mentions == 4
        assert provider.rate_limiter.tokens < provider.rate_limiter.capacity

    @pytest.mark.asyncio
    async def test_empty_source_yields_well_formed_envelope(self, static_provider):
        provider = static_provider("stub")

        envelope = await provider.get_data()

        assert envelope.items == []
        assert envelope.is_empty
        assert envelope.aggregate.total_mentions == 0
        assert envelope.aggregate.sentiment == Sentiment.NEUTRAL
        assert envelope.aggregate.top_tickers == []

    @pytest.mark.asyncio
    async def test_acquires_token_before_fetching(self, static_provider, fake_clock):
        limiter = RateLimiter(60, capacity=1, clock=fake_clock, sleep=fake_clock.sleep)
        provider = static_provider("stub", rate_limiter=limiter)

        await provider.get_data()
        await provider.get_data()

        assert fake_clock.sleeps == [pytest.approx(1.0)]
        assert provider.calls == 2

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(self, static_provider, status_error):
        provider = static_provider(
            "stub",
            records=[TrendRecord(key="SOL")],
            errors=[status_error(503), status_error(429)],
            retry_options=RetryOptions(max_retries=3, base_delay=0.001),
        )

        envelope = await provider.get_data()

        assert envelope.keys() == ["SOL"]
        assert provider.calls == 3

    @pytest.mark.asyncio
    async def test_exhausted_retries_propagate(self, static_provider, status_error):
        error = status_error(503)
        provider = static_provider(
            "stub",
            errors=[error] * 5,
            retry_options=RetryOptions(max_retries=2, base_delay=0.001),
        )

        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            await provider.get_data()

        assert excinfo.value is error
        assert provider.calls == 3

    @pytest.mark.asyncio
    async def test_non_retryable_failure_propagates_immediately(self, static_provider, status_error):
        provider = static_provider(
            "stub",
            errors=[status_error(404)],
            retry_options=RetryOptions(max_retries=3, base_delay=0.001),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await provider.get_data()

        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_normalize_errors_are_not_retried(self, static_provider):
        class BrokenNormalize(static_provider):
            def normalize(self, raw):
                raise ValueError("unexpected payload")

        provider = BrokenNormalize("broken", records=[TrendRecord(key="X")])

        with pytest.raises(ValueError):
            await provider.get_data()

        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_providers_do_not_share_limiter_state(self, static_provider, fake_clock):
        slow = static_provider(
            "slow",
            rate_limiter=RateLimiter(60, capacity=1, clock=fake_clock, sleep=fake_clock.sleep),
        )
        fast = static_provider(
            "fast",
            rate_limiter=RateLimiter(120, capacity=1, clock=fake_clock, sleep=fake_clock.sleep),
        )

        await slow.get_data()
        assert slow.rate_limiter.tokens == 0.0

        await fast.get_data()

        assert fake_clock.sleeps == []
        assert slow.rate_limiter is not fast.rate_limiter


class TestCollectPartial:
    @pytest.mark.asyncio
    async def test_keeps_successes_in_order_and_counts_skips(self, status_error):
        async def ok(value):
            await asyncio.sleep(0)
            return value

        async def fail():
            raise status_error(500)

        partial = await collect_partial([ok(1), fail(), ok(2), fail(), ok(3)])

        assert partial.results == [1, 2, 3]
        assert partial.skipped == 2
        assert len(partial.errors) == 2

    @pytest.mark.asyncio
    async def test_none_results_are_dropped_but_not_skipped(self):
        async def nothing():
            return None

        partial = await collect_partial([nothing(), nothing()])

        assert partial.results == []
        assert partial.skipped == 0
        partial.raise_if_empty()

    @pytest.mark.asyncio
    async def test_raise_if_empty_reraises_last_error(self):
        first = RuntimeError("first")
        last = RuntimeError("last")

        async def fail(error):
            raise error

        partial = await collect_partial([fail(first), fail(last)])

        with pytest.raises(RuntimeError) as excinfo:
            partial.raise_if_empty()
        assert excinfo.value is last

    def test_raise_if_empty_ignores_partial_success(self):
        partial = PartialResult(results=["x"], skipped=1, errors=[RuntimeError()])

        partial.raise_if_empty()

    @pytest.mark.asyncio
    async def test_no_calls(self):
        partial = await collect_partial([])

        assert partial == PartialResult()


class TestEnvelope:
    def test_empty_envelope(self):
        envelope = NormalizedEnvelope.empty("dexscreener")

        data = envelope.to_dict()
        assert data["source"] == "dexscreener"
        assert data["items"] == []
        assert data["aggregate"] == {
            "total_mentions": 0,
            "sentiment": "neutral",
            "top_tickers": [],
            "samples": [],
        }

    def test_aggregate_lists_are_bounded(self):
        envelope = NormalizedEnvelope(source="s")
        envelope.aggregate = AggregateSignal(
            top_tickers=[f"$T{i}" for i in range(30)],
            samples=[f"tweet {i}" for i in range(30)],
        )

        assert len(envelope.aggregate.top_tickers) == 10
        assert len(envelope.aggregate.samples) == 5
