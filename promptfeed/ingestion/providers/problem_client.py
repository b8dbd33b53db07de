"""Community problem provider: live complaints plus the curated list."""

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from promptfeed.config.constants import (
    COMPLAINT_QUERIES,
    CURATED_PROBLEMS,
    FREQUENCY_WEIGHTS,
    PROBLEM_CATEGORY_RULES,
    PROBLEM_KEYWORDS,
)
from promptfeed.config.settings import settings
from promptfeed.ingestion.base import HTTPProvider, collect_partial
from promptfeed.ingestion.envelope import (
    AggregateSignal,
    NormalizedEnvelope,
    TrendRecord,
    dedupe_records,
)

LIVE_QUERY_COUNT = 2
TWEETS_PER_QUERY = 3
MIN_PROBLEM_LENGTH = 30
MAX_PROBLEM_LENGTH = 200
MAX_CLEAN_LENGTH = 150

_URL_RE = re.compile(r"https?://\S+")
_MENTION_RE = re.compile(r"@\w+")
_HASHTAG_RE = re.compile(r"#\w+")
_SPACE_RE = re.compile(r"\s+")


@dataclass
class ProblemsRaw:
    problems: list[dict[str, str]] = field(default_factory=list)
    skipped: int = 0


def contains_problem_keywords(text: str) -> bool:
    lowered = text.lower()
    return any(kw in lowered for kw in PROBLEM_KEYWORDS)


def clean_problem_text(text: str) -> str:
    text = _URL_RE.sub("", text)
    text = _MENTION_RE.sub("", text)
    text = _HASHTAG_RE.sub("", text)
    return _SPACE_RE.sub(" ", text).strip()[:MAX_CLEAN_LENGTH]


def detect_category(text: str) -> str:
    lowered = text.lower()
    for category, triggers in PROBLEM_CATEGORY_RULES:
        if any(t in lowered for t in triggers):
            return category
    return "general"


class ProblemProvider(HTTPProvider[ProblemsRaw]):
    """Pain points scraped from social search, backed by a curated list.

    Live scraping is best effort: the curated list guarantees a non-empty
    result, so this provider never fails on network errors.
    """

    source_name = "problems"
    rate_limit = settings.rate_limit_problems

    def __init__(self, instance: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.instance = (instance or settings.nitter_instances[0]).rstrip("/")

    async def fetch_raw(self) -> ProblemsRaw:
        live = await collect_partial(
            (self._scrape_complaints(q) for q in COMPLAINT_QUERIES[:LIVE_QUERY_COUNT]),
            logger=self.logger,
        )
        problems = [p for batch in live.results for p in batch]
        problems.extend(dict(p) for p in CURATED_PROBLEMS)
        return ProblemsRaw(problems=problems, skipped=live.skipped)

    async def _scrape_complaints(self, query: str) -> list[dict[str, str]]:
        resp = await self._get(f"{self.instance}/search?f=tweets&q={quote_plus(query)}")
        soup = BeautifulSoup(resp.text, "html.parser")

        problems = []
        for el in soup.select(".tweet-content")[:TWEETS_PER_QUERY]:
            text = el.get_text().strip()
            if not MIN_PROBLEM_LENGTH < len(text) < MAX_PROBLEM_LENGTH:
                continue
            if not contains_problem_keywords(text):
                continue
            problems.append({
                "problem": clean_problem_text(text),
                "source": "twitter",
                "category": detect_category(text),
                "frequency": "medium",
                "sentiment": "frustrated",
            })
        return problems

    def normalize(self, raw: ProblemsRaw) -> NormalizedEnvelope:
        records = dedupe_records([
            TrendRecord(
                key=p["problem"],
                weight=float(FREQUENCY_WEIGHTS.get(p.get("frequency", "low"), 1)),
                tag=p.get("category", "general"),
                metadata={
                    "source": p.get("source", "unknown"),
                    "frequency": p.get("frequency", "low"),
                    "sentiment": p.get("sentiment", ""),
                },
            )
            for p in raw.problems
        ])

        return NormalizedEnvelope(
            source=self.source_name,
            items=records,
            aggregate=AggregateSignal(
                total_mentions=len(records),
                samples=[r.key for r in records],
            ),
        )
