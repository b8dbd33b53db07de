"""Opportunity scoring from market and narrative signals."""

from collections.abc import Iterable
from dataclasses import dataclass

from promptfeed.config.constants import AI_KEYWORDS, SCORING_WEIGHTS
from promptfeed.ingestion.envelope import TrendRecord


@dataclass(frozen=True)
class ScoreBreakdown:
    """Component scores (0-100) and their weighted total."""

    total: int
    volume: int
    narrative: int
    liquidity: int


def score_volume_growth(volume_change_1h: float) -> int:
    """+25 volume change in 1h scores 100."""
    if volume_change_1h <= 0:
        return 0
    return min(100, round(volume_change_1h / 25 * 100))


def score_narrative_velocity(narratives: Iterable[TrendRecord]) -> int:
    """50 AI-related mentions score 100."""
    ai_frequency = sum(
        n.weight for n in narratives
        if any(k in n.key.lower() for k in AI_KEYWORDS)
    )
    return min(100, round(ai_frequency / 50 * 100))


def score_liquidity_health(market_cap: float, liquidity: float) -> int:
    """MC/liquidity of 2-5x is optimal; extremes are risky."""
    if liquidity <= 0:
        return 0

    ratio = market_cap / liquidity
    if 2 <= ratio <= 5:
        return 100
    if 5 < ratio <= 10:
        return 75
    if 10 < ratio <= 20:
        return 50
    return 25


def weighted_score(
    volume_change_1h: float,
    narratives: Iterable[TrendRecord],
    market_cap: float,
    liquidity: float,
) -> ScoreBreakdown:
    volume = score_volume_growth(volume_change_1h)
    narrative = score_narrative_velocity(narratives)
    liquidity_score = score_liquidity_health(market_cap, liquidity)

    total = round(
        volume * SCORING_WEIGHTS["volume_growth"]
        + narrative * SCORING_WEIGHTS["narrative_velocity"]
        + liquidity_score * SCORING_WEIGHTS["liquidity_health"]
    )
    return ScoreBreakdown(
        total=total,
        volume=volume,
        narrative=narrative,
        liquidity=liquidity_score,
    )
