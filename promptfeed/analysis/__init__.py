"""Scoring, shuffling and idea generation."""

from .ideas import Idea, generate_ideas, render_build_prompt, render_digest, render_messages
from .scoring import ScoreBreakdown, weighted_score
from .shuffle import daily_seed, seeded_shuffle

__all__ = [
    "Idea",
    "ScoreBreakdown",
    "daily_seed",
    "generate_ideas",
    "render_build_prompt",
    "render_digest",
    "render_messages",
    "seeded_shuffle",
    "weighted_score",
]
