"""Aggregated trend service combining all providers."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from promptfeed.config.settings import settings
from promptfeed.ingestion.base import Provider
from promptfeed.ingestion.envelope import NormalizedEnvelope, TrendRecord, unique_ordered
from promptfeed.ingestion.providers import (
    AgentTrendsProvider,
    DexscreenerProvider,
    NitterProvider,
    ProblemProvider,
)

logger = logging.getLogger(__name__)

NARRATIVE_SOURCES = ("twitter", "axiom")


@dataclass
class TrendSnapshot:
    """Envelopes from every provider for one run."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    envelopes: dict[str, NormalizedEnvelope] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def envelope(self, source: str) -> NormalizedEnvelope:
        return self.envelopes.get(source) or NormalizedEnvelope.empty(source)

    @property
    def tokens(self) -> list[TrendRecord]:
        return self.envelope("dexscreener").items

    @property
    def narratives(self) -> list[TrendRecord]:
        return [r for source in NARRATIVE_SOURCES for r in self.envelope(source).items]

    @property
    def problems(self) -> list[TrendRecord]:
        return self.envelope("problems").items

    @property
    def trending_tickers(self) -> list[str]:
        return unique_ordered([
            ticker
            for env in self.envelopes.values()
            for ticker in env.aggregate.top_tickers
        ])

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "envelopes": {k: v.to_dict() for k, v in self.envelopes.items()},
            "trending_tickers": self.trending_tickers,
            "errors": self.errors,
        }


def build_default_providers() -> list[Provider]:
    """Composition root for the production provider set."""
    return [
        DexscreenerProvider(),
        NitterProvider(),
        AgentTrendsProvider(),
        ProblemProvider(),
    ]


class TrendAggregator:
    """Fans out to providers and merges their envelopes.

    A failing provider, or one still running after ``timeout`` seconds,
    contributes an empty envelope and an entry in
    ``TrendSnapshot.errors``; it never fails the whole run.
    """

    def __init__(
        self,
        providers: Sequence[Provider] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.providers = list(providers) if providers is not None else build_default_providers()
        self.timeout = timeout if timeout is not None else settings.provider_timeout
        self.logger = logging.getLogger(__name__)

    async def collect(self) -> TrendSnapshot:
        """Fetch every provider concurrently."""
        snapshot = TrendSnapshot()

        results = await asyncio.gather(
            *(self._fetch(p) for p in self.providers),
            return_exceptions=True,
        )

        for provider, result in zip(self.providers, results):
            source = provider.source_name
            if isinstance(result, TimeoutError):
                self.logger.error(f"Timed out fetching {source} after {self.timeout}s")
                snapshot.errors.append(f"{source}: timed out after {self.timeout}s")
                snapshot.envelopes[source] = NormalizedEnvelope.empty(source)
            elif isinstance(result, Exception):
                self.logger.error(f"Error fetching {source}: {result!r}")
                snapshot.errors.append(f"{source}: {result}")
                snapshot.envelopes[source] = NormalizedEnvelope.empty(source)
            elif isinstance(result, BaseException):
                raise result
            else:
                snapshot.envelopes[source] = result

        return snapshot

    async def _fetch(self, provider: Provider) -> NormalizedEnvelope:
        async with asyncio.timeout(self.timeout):
            return await provider.get_data()

    async def aclose(self) -> None:
        for provider in self.providers:
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()
