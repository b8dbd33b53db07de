"""Tests for scoring, daily shuffling and idea generation."""

from datetime import date

import pytest

from promptfeed.analysis.ideas import (
    Idea,
    generate_ideas,
    render_build_prompt,
    render_digest,
    render_messages,
)
from promptfeed.analysis.scoring import (
    score_liquidity_health,
    score_narrative_velocity,
    score_volume_growth,
    weighted_score,
)
from promptfeed.analysis.shuffle import daily_seed, seeded_shuffle
from promptfeed.config.constants import CURATED_PROBLEMS, IdeaKind
from promptfeed.ingestion.aggregator import TrendSnapshot
from promptfeed.ingestion.envelope import NormalizedEnvelope, TrendRecord

DAY = date(2024, 3, 1)


def _token(symbol, **meta):
    metadata = {
        "chain": "solana",
        "volume_1h": 20.0,
        "market_cap": 300_000.0,
        "liquidity": 100_000.0,
        "price_change_24h": 15.0,
    }
    metadata.update(meta)
    return TrendRecord(key=symbol, weight=1_000_000.0, tag=metadata["chain"], metadata=metadata)


@pytest.fixture
def snapshot():
    return TrendSnapshot(envelopes={
        "dexscreener": NormalizedEnvelope(
            source="dexscreener",
            items=[_token("WIF"), _token("N/A"), _token("BRETT", chain="base"), _token("BONK")],
        ),
        "twitter": NormalizedEnvelope(
            source="twitter",
            items=[TrendRecord(key="AI agent", weight=30.0, tag="bullish")],
        ),
        "problems": NormalizedEnvelope(
            source="problems",
            items=[
                TrendRecord(key="Gas fees eat my profits", weight=3.0, tag="trading",
                            metadata={"source": "reddit", "frequency": "high"}),
                TrendRecord(key="Lost funds to a rug", weight=2.0, tag="security",
                            metadata={"source": "twitter", "frequency": "medium"}),
                TrendRecord(key="Too many wallets", weight=1.0, tag="portfolio",
                            metadata={"source": "discord", "frequency": "low"}),
            ],
        ),
    })


class TestShuffle:
    def test_daily_seed_is_stable_and_non_negative(self):
        seed = daily_seed(DAY)

        assert seed == daily_seed(date(2024, 3, 1))
        assert 0 <= seed < 2**31
        assert seed != daily_seed(date(2024, 3, 2))

    def test_shuffle_is_a_deterministic_permutation(self):
        items = list(range(25))

        first = seeded_shuffle(items, 1234)
        second = seeded_shuffle(items, 1234)

        assert first == second
        assert sorted(first) == items
        assert items == list(range(25))

    def test_shuffle_of_trivial_lists(self):
        assert seeded_shuffle([], 7) == []
        assert seeded_shuffle(["only"], 7) == ["only"]


class TestScoring:
    @pytest.mark.parametrize(
        ("change", "expected"),
        [(-5.0, 0), (0.0, 0), (12.5, 50), (25.0, 100), (400.0, 100)],
    )
    def test_volume_growth(self, change, expected):
        assert score_volume_growth(change) == expected

    def test_narrative_velocity_counts_ai_mentions_only(self):
        narratives = [
            TrendRecord(key="AI agent swarm", weight=20.0),
            TrendRecord(key="Autonomous trading", weight=5.0),
            TrendRecord(key="Bitcoin ETF", weight=500.0),
        ]

        assert score_narrative_velocity(narratives) == 50
        assert score_narrative_velocity([]) == 0

    @pytest.mark.parametrize(
        ("market_cap", "liquidity", "expected"),
        [
            (300.0, 100.0, 100),
            (800.0, 100.0, 75),
            (1500.0, 100.0, 50),
            (100.0, 100.0, 25),
            (5000.0, 100.0, 25),
            (300.0, 0.0, 0),
        ],
    )
    def test_liquidity_health(self, market_cap, liquidity, expected):
        assert score_liquidity_health(market_cap, liquidity) == expected

    def test_weighted_total(self):
        best = weighted_score(
            volume_change_1h=50.0,
            narratives=[TrendRecord(key="ai agent", weight=80.0)],
            market_cap=300.0,
            liquidity=100.0,
        )
        worst = weighted_score(0.0, [], 0.0, 0.0)

        assert best.total == 100
        assert (best.volume, best.narrative, best.liquidity) == (100, 100, 100)
        assert worst.total == 0


class TestGenerateIdeas:
    def test_generates_both_kinds_sorted_by_score(self, snapshot):
        ideas = generate_ideas(snapshot, day=DAY, per_kind=3)

        assert len(ideas) == 6
        kinds = [idea.kind for idea in ideas]
        assert kinds.count(IdeaKind.AI_AGENT) == 3
        assert kinds.count(IdeaKind.REAL_PROJECT) == 3
        scores = [idea.score for idea in ideas]
        assert scores == sorted(scores, reverse=True)
        assert all(1 <= s <= 10 for s in scores)

    def test_same_day_gives_same_ideas(self, snapshot):
        first = generate_ideas(snapshot, day=DAY, per_kind=3)
        second = generate_ideas(snapshot, day=DAY, per_kind=3)

        assert [i.model_dump() for i in first] == [i.model_dump() for i in second]

    def test_real_projects_use_snapshot_problems(self, snapshot):
        ideas = generate_ideas(snapshot, day=DAY, per_kind=3)

        problems = {i.problem for i in ideas if i.kind == IdeaKind.REAL_PROJECT}
        assert problems == {r.key for r in snapshot.problems}

    def test_unusable_tokens_are_not_trending(self, snapshot):
        ideas = generate_ideas(snapshot, day=DAY, per_kind=2)

        assert all("$N/A" not in idea.trending for idea in ideas)
        assert set(ideas[0].trending) == {"$WIF", "$BRETT", "$BONK"}

    def test_empty_snapshot_falls_back(self):
        ideas = generate_ideas(TrendSnapshot(), day=DAY, per_kind=2)

        assert len(ideas) == 4
        curated = {p["problem"] for p in CURATED_PROBLEMS}
        for idea in ideas:
            assert idea.chain == "solana"
            assert idea.trending == ["$SOL", "$BONK"]
            if idea.kind == IdeaKind.REAL_PROJECT:
                assert idea.problem in curated

    def test_ids_are_unique(self, snapshot):
        ideas = generate_ideas(snapshot, day=DAY, per_kind=4)

        assert sorted(i.id for i in ideas) == list(range(1, 8))


class TestRendering:
    @pytest.fixture
    def idea(self):
        return Idea(
            id=1,
            name="AlphaSniperBot",
            kind=IdeaKind.AI_AGENT,
            category="Trading",
            project_type="Sniper Bot",
            problem="Manual sniping is too slow",
            problem_source="Dexscreener trending ($WIF +15%)",
            solution="An AI-powered sniper bot",
            chain="solana",
            features=["Real-time solana monitoring", "Instant Telegram alerts"],
            trending=["$WIF", "$BONK"],
            score=8,
        )

    def test_build_prompt(self, idea):
        prompt = render_build_prompt(idea)

        assert prompt.startswith("BUILD PROMPT: AlphaSniperBot (AI Agent)")
        assert "CHAIN: SOLANA" in prompt
        assert "SCORE: 8/10" in prompt
        assert "1. Real-time solana monitoring\n2. Instant Telegram alerts" in prompt
        assert prompt.endswith("TRENDING: $WIF, $BONK")

    def test_digest(self, idea):
        digest = render_digest([idea, idea], day=DAY)

        assert digest.startswith("Build ideas for Friday, March 01, 2024 (2 ideas)")
        assert digest.count("BUILD PROMPT:") == 2

    def test_messages_are_header_then_one_per_idea(self, idea):
        messages = render_messages([idea, idea], day=DAY)

        assert len(messages) == 3
        assert messages[0] == "Build ideas for Friday, March 01, 2024 (2 ideas)"
        assert messages[1] == render_build_prompt(idea)
        assert "\n\n".join(messages) == render_digest([idea, idea], day=DAY)
