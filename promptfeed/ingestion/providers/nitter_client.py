"""Social narrative provider scraping Nitter search pages."""

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from promptfeed.config.constants import (
    BEARISH_WORDS,
    BULLISH_WORDS,
    CRYPTO_KEYWORDS,
    Sentiment,
)
from promptfeed.config.settings import settings
from promptfeed.ingestion.base import HTTPProvider
from promptfeed.ingestion.envelope import (
    AggregateSignal,
    NormalizedEnvelope,
    TrendRecord,
    dedupe_records,
    unique_ordered,
)

TICKER_PATTERN = re.compile(r"\$[A-Z]{2,10}")
MAX_TWEETS_PER_TOPIC = 10
MAX_TICKERS_PER_TOPIC = 10


@dataclass
class TopicScrape:
    """Search result for one keyword."""

    keyword: str
    mentions: int
    sentiment: Sentiment
    tweet_texts: list[str] = field(default_factory=list)
    tickers: list[str] = field(default_factory=list)


@dataclass
class NitterRaw:
    topics: list[TopicScrape] = field(default_factory=list)
    skipped: int = 0


def classify_sentiment(texts: list[str]) -> Sentiment:
    """Keyword-count sentiment; needs a margin of more than two hits."""
    combined = " ".join(texts).lower()
    bullish = sum(1 for word in BULLISH_WORDS if word in combined)
    bearish = sum(1 for word in BEARISH_WORDS if word in combined)

    if bullish > bearish + 2:
        return Sentiment.BULLISH
    if bearish > bullish + 2:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def extract_tickers(texts: list[str]) -> list[str]:
    matches = TICKER_PATTERN.findall(" ".join(texts))
    return unique_ordered(matches)[:MAX_TICKERS_PER_TOPIC]


class NitterProvider(HTTPProvider[NitterRaw]):
    """Trending crypto topics from Nitter, falling back across instances."""

    source_name = "twitter"
    rate_limit = settings.rate_limit_nitter

    def __init__(
        self,
        instances: list[str] | None = None,
        keywords: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.instances = [i.rstrip("/") for i in (instances or settings.nitter_instances)]
        self.keywords = keywords or CRYPTO_KEYWORDS

    async def fetch_raw(self) -> NitterRaw:
        """Search every keyword; keywords whose instances all failed are skipped.

        Instance fallback is the retry for this source, so a fully failed
        search yields an empty result instead of an error.
        """
        raw = NitterRaw()

        for keyword in self.keywords:
            try:
                topic = await self._search(keyword)
            except Exception as e:
                self.logger.warning(f"All instances failed for {keyword!r}: {e!r}")
                raw.skipped += 1
                continue
            if topic is not None:
                raw.topics.append(topic)

        if raw.skipped == len(self.keywords):
            self.logger.warning("Every Nitter instance failed; no topics collected")
        return raw

    async def _search(self, query: str) -> TopicScrape | None:
        """Try each instance in order until one yields tweets.

        Returns None when instances answered but had no tweets; raises the
        last error when every instance failed.
        """
        last_error: Exception | None = None
        answered = False

        for instance in self.instances:
            url = f"{instance}/search?f=tweets&q={quote_plus(query)}"
            try:
                resp = await self._get(url)
            except Exception as e:
                self.logger.debug(f"{instance} failed for {query!r}: {e!r}")
                last_error = e
                continue

            answered = True
            topic = self._parse(query, resp.text)
            if topic is not None:
                return topic

        if not answered and last_error is not None:
            raise last_error
        return None

    @staticmethod
    def _parse(query: str, html: str) -> TopicScrape | None:
        soup = BeautifulSoup(html, "html.parser")
        tweet_count = len(soup.select(".timeline-item"))
        if tweet_count == 0:
            return None

        texts = [el.get_text() for el in soup.select(".tweet-content")]
        return TopicScrape(
            keyword=query,
            mentions=tweet_count,
            sentiment=classify_sentiment(texts),
            tweet_texts=texts[:MAX_TWEETS_PER_TOPIC],
            tickers=extract_tickers(texts),
        )

    def normalize(self, raw: NitterRaw) -> NormalizedEnvelope:
        records = dedupe_records([
            TrendRecord(
                key=topic.keyword,
                weight=float(topic.mentions),
                tag=topic.sentiment.value,
                metadata={"tickers": topic.tickers},
            )
            for topic in raw.topics
        ])

        bullish = sum(1 for t in raw.topics if t.sentiment == Sentiment.BULLISH)
        bearish = sum(1 for t in raw.topics if t.sentiment == Sentiment.BEARISH)
        overall = Sentiment.NEUTRAL
        if bullish > bearish + 1:
            overall = Sentiment.BULLISH
        elif bearish > bullish + 1:
            overall = Sentiment.BEARISH

        tickers = unique_ordered([tk for t in raw.topics for tk in t.tickers])
        samples = [text for t in raw.topics for text in t.tweet_texts]

        return NormalizedEnvelope(
            source=self.source_name,
            items=records,
            aggregate=AggregateSignal(
                total_mentions=sum(t.mentions for t in raw.topics),
                sentiment=overall,
                top_tickers=tickers,
                samples=samples,
            ),
        )
