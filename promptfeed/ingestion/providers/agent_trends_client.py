"""AI agent narrative provider built from news headlines."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup

from promptfeed.config.constants import (
    AI_AGENT_TOKENS,
    AI_HEADLINE_TERMS,
    HEADLINE_SELECTORS,
    SEED_NARRATIVES,
)
from promptfeed.config.settings import settings
from promptfeed.ingestion.base import HTTPProvider, collect_partial
from promptfeed.ingestion.envelope import AggregateSignal, NormalizedEnvelope, TrendRecord

MAX_TRENDS = 15


@dataclass
class AgentTrendsRaw:
    headlines: list[str] = field(default_factory=list)
    narratives: list[str] = field(default_factory=list)
    skipped: int = 0


def is_agent_headline(text: str) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in AI_HEADLINE_TERMS)


class AgentTrendsProvider(HTTPProvider[AgentTrendsRaw]):
    """Agent-economy narratives from crypto news sites plus seed narratives."""

    source_name = "axiom"
    rate_limit = settings.rate_limit_agent_trends

    def __init__(self, news_urls: list[str] | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.news_urls = news_urls if news_urls is not None else settings.agent_news_urls

    async def fetch_raw(self) -> AgentTrendsRaw:
        pages = await collect_partial(
            (self._scrape_headlines(url) for url in self.news_urls),
            logger=self.logger,
        )
        headlines = [h for page in pages.results for h in page]
        return AgentTrendsRaw(
            headlines=headlines,
            narratives=list(SEED_NARRATIVES),
            skipped=pages.skipped,
        )

    async def _scrape_headlines(self, url: str) -> list[str]:
        resp = await self._get(url)
        soup = BeautifulSoup(resp.text, "html.parser")
        headlines = []
        for el in soup.select(HEADLINE_SELECTORS):
            text = el.get_text().strip()
            if text and is_agent_headline(text):
                headlines.append(text)
        return headlines

    def normalize(self, raw: AgentTrendsRaw) -> NormalizedEnvelope:
        tagged = [(h, "headline") for h in raw.headlines]
        tagged += [(n, "narrative") for n in raw.narratives]

        counts = Counter(key for key, _ in tagged)
        records: list[TrendRecord] = []
        seen: set[str] = set()
        for key, tag in tagged:
            if key in seen:
                continue
            seen.add(key)
            records.append(TrendRecord(key=key, weight=float(counts[key]), tag=tag))

        records = records[:MAX_TRENDS]
        return NormalizedEnvelope(
            source=self.source_name,
            items=records,
            aggregate=AggregateSignal(
                total_mentions=sum(int(r.weight) for r in records),
                top_tickers=[f"${symbol}" for symbol in AI_AGENT_TOKENS],
                samples=[r.key for r in records if r.tag == "headline"],
            ),
        )
