"""Normalized data envelope shared by every provider."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from promptfeed.config.constants import Sentiment

MAX_TOP_TICKERS = 10
MAX_SAMPLES = 5


@dataclass
class TrendRecord:
    """One normalized signal: a key, a numeric weight and a category tag."""

    key: str
    weight: float = 0.0
    tag: str = Sentiment.NEUTRAL.value
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "weight": self.weight,
            "tag": self.tag,
            "metadata": self.metadata,
        }


@dataclass
class AggregateSignal:
    """Rollup over a source's records."""

    total_mentions: int = 0
    sentiment: Sentiment = Sentiment.NEUTRAL
    top_tickers: list[str] = field(default_factory=list)
    samples: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.top_tickers = list(self.top_tickers)[:MAX_TOP_TICKERS]
        self.samples = list(self.samples)[:MAX_SAMPLES]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_mentions": self.total_mentions,
            "sentiment": self.sentiment.value,
            "top_tickers": self.top_tickers,
            "samples": self.samples,
        }


@dataclass
class NormalizedEnvelope:
    """Uniform provider output, created fresh on every fetch."""

    source: str
    items: list[TrendRecord] = field(default_factory=list)
    aggregate: AggregateSignal = field(default_factory=AggregateSignal)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def empty(cls, source: str) -> "NormalizedEnvelope":
        """Envelope with no items and a zeroed aggregate."""
        return cls(source=source)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def keys(self) -> list[str]:
        return [item.key for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "aggregate": self.aggregate.to_dict(),
        }


def dedupe_records(records: list[TrendRecord]) -> list[TrendRecord]:
    """Drop records whose key was already seen, keeping the first."""
    seen: set[str] = set()
    unique = []
    for record in records:
        if record.key not in seen:
            unique.append(record)
            seen.add(record.key)
    return unique


def unique_ordered(values: list[str]) -> list[str]:
    """Remove duplicates while preserving first-seen order."""
    return list(dict.fromkeys(values))
