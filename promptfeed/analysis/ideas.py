"""Build-prompt idea generation from a trend snapshot."""

import logging
from datetime import UTC, date, datetime

from pydantic import BaseModel, Field

from promptfeed.analysis.scoring import weighted_score
from promptfeed.analysis.shuffle import daily_seed, seeded_shuffle
from promptfeed.config.constants import (
    AI_AGENT_TYPES,
    CURATED_PROBLEMS,
    FREQUENCY_WEIGHTS,
    NAME_PREFIXES,
    PROJECT_SOLUTIONS,
    IdeaKind,
)
from promptfeed.config.settings import settings
from promptfeed.ingestion.aggregator import TrendSnapshot
from promptfeed.ingestion.envelope import TrendRecord

logger = logging.getLogger(__name__)

FALLBACK_TOKEN = TrendRecord(
    key="SOL",
    weight=500_000.0,
    tag="solana",
    metadata={"chain": "solana", "price_change_24h": 10.0, "volume_1h": 0.0},
)


class Idea(BaseModel):
    """A generated project idea with its build prompt."""

    id: int
    name: str
    kind: IdeaKind
    category: str
    project_type: str
    problem: str
    problem_source: str
    solution: str
    chain: str = "solana"
    features: list[str] = Field(default_factory=list)
    trending: list[str] = Field(default_factory=list)
    score: int = 0


def _agent_features(agent_name: str, chain: str) -> list[str]:
    return [
        f"Real-time {chain} monitoring",
        f"Core workflow: {agent_name.lower()}",
        "AI-powered decisions",
        "Instant Telegram alerts",
        "One-click execution",
    ]


def _project_features(category: str, chain: str) -> list[str]:
    return [
        f"{chain} blockchain integration",
        f"Purpose-built {category} workflows",
        "Dark UI, mobile responsive",
        "Export functionality",
    ]


def _problem_records(snapshot: TrendSnapshot) -> list[TrendRecord]:
    if snapshot.problems:
        return snapshot.problems
    # Problems provider failed; fall back to the curated list
    return [
        TrendRecord(
            key=p["problem"],
            weight=float(FREQUENCY_WEIGHTS[p["frequency"]]),
            tag=p["category"],
            metadata={"source": p["source"], "frequency": p["frequency"]},
        )
        for p in CURATED_PROBLEMS
    ]


def _score(token: TrendRecord, snapshot: TrendSnapshot, bonus_seed: int) -> int:
    meta = token.metadata
    breakdown = weighted_score(
        volume_change_1h=meta.get("volume_1h", 0.0),
        narratives=snapshot.narratives,
        market_cap=meta.get("market_cap", 0.0),
        liquidity=meta.get("liquidity", 0.0),
    )
    return max(1, min(10, round(breakdown.total / 10) + bonus_seed % 3))


def generate_ideas(
    snapshot: TrendSnapshot,
    day: date | None = None,
    per_kind: int | None = None,
) -> list[Idea]:
    """Generate AI agent and real project ideas, highest score first.

    Ordering of inputs is shuffled with the day's seed, so the same snapshot
    on the same day always yields the same ideas.
    """
    per_kind = per_kind if per_kind is not None else settings.ideas_per_kind
    seed = daily_seed(day)

    tokens = seeded_shuffle([t for t in snapshot.tokens if t.key != "N/A"], seed)
    problems = seeded_shuffle(_problem_records(snapshot), seed + 1)
    agent_types = seeded_shuffle(AI_AGENT_TYPES, seed + 2)
    trending = [f"${t.key}" for t in tokens[:5]] or ["$SOL", "$BONK"]

    ideas: list[Idea] = []

    for i, agent in enumerate(agent_types[:per_kind]):
        token = tokens[i] if i < len(tokens) else FALLBACK_TOKEN
        chain = token.metadata.get("chain", token.tag)
        change = token.metadata.get("price_change_24h", 0.0)
        idea_id = len(ideas) + 1
        ideas.append(Idea(
            id=idea_id,
            name=f"{NAME_PREFIXES[(seed + i) % len(NAME_PREFIXES)]}{agent['name'].replace(' ', '')}",
            kind=IdeaKind.AI_AGENT,
            category=agent["category"],
            project_type=agent["name"],
            problem=(
                f"Traders need automated {agent['focus'].lower()} for tokens like "
                f"${token.key} but manual execution is too slow"
            ),
            problem_source=f"Dexscreener trending (${token.key} {change:+.0f}%)",
            solution=(
                f"An AI-powered {agent['name'].lower()} that automates "
                f"{agent['focus'].lower()} with real-time on-chain data"
            ),
            chain=chain,
            features=_agent_features(agent["name"], chain),
            trending=trending,
            score=_score(token, snapshot, seed + idea_id),
        ))

    for i, problem in enumerate(problems[:per_kind]):
        token = tokens[(i + per_kind) % len(tokens)] if tokens else FALLBACK_TOKEN
        chain = token.metadata.get("chain", token.tag)
        category = problem.tag
        options = PROJECT_SOLUTIONS.get(category, PROJECT_SOLUTIONS["trading"])
        project_type = options[(seed + i) % len(options)]
        idea_id = len(ideas) + 1
        ideas.append(Idea(
            id=idea_id,
            name=f"{NAME_PREFIXES[(seed + i + 3) % len(NAME_PREFIXES)]}{project_type.split()[-1]}",
            kind=IdeaKind.REAL_PROJECT,
            category=category.capitalize(),
            project_type=project_type,
            problem=problem.key,
            problem_source=(
                f"Community problem from {problem.metadata.get('source', 'unknown')} "
                f"({problem.metadata.get('frequency', 'low')} frequency)"
            ),
            solution=f"A {project_type.lower()} that solves this with a simple interface",
            chain=chain,
            features=_project_features(category, chain),
            trending=trending,
            score=_score(token, snapshot, seed + idea_id),
        ))

    logger.info(f"Generated {len(ideas)} ideas")
    return sorted(ideas, key=lambda idea: idea.score, reverse=True)


def render_build_prompt(idea: Idea) -> str:
    """Render a single idea as a plain-text build prompt."""
    features = "\n".join(f"{n}. {f}" for n, f in enumerate(idea.features, start=1))
    lines = [
        f"BUILD PROMPT: {idea.name} ({idea.kind.value})",
        f"CATEGORY: {idea.category}",
        f"CHAIN: {idea.chain.upper()}",
        f"SCORE: {idea.score}/10",
        "",
        f"PROBLEM: {idea.problem}",
        f"SOURCE: {idea.problem_source}",
        f"SOLUTION: {idea.solution}",
        "",
        "CORE FEATURES:",
        features,
        "",
        f"TRENDING: {', '.join(idea.trending)}",
    ]
    return "\n".join(lines)


def render_messages(ideas: list[Idea], day: date | None = None) -> list[str]:
    """Render a run as chat messages: a header, then one message per idea."""
    day = day or datetime.now(UTC).date()
    header = f"Build ideas for {day.strftime('%A, %B %d, %Y')} ({len(ideas)} ideas)"
    return [header, *(render_build_prompt(i) for i in ideas)]


def render_digest(ideas: list[Idea], day: date | None = None) -> str:
    """Render the full run as a single text."""
    return "\n\n".join(render_messages(ideas, day))
