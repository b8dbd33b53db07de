"""Concrete data providers."""

from .agent_trends_client import AgentTrendsProvider
from .dexscreener_client import DexscreenerProvider
from .nitter_client import NitterProvider
from .problem_client import ProblemProvider

__all__ = [
    "AgentTrendsProvider",
    "DexscreenerProvider",
    "NitterProvider",
    "ProblemProvider",
]
