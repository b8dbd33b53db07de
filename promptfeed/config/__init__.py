"""Configuration module for promptfeed."""

from .settings import settings
from .constants import IdeaKind, Sentiment

__all__ = ["settings", "IdeaKind", "Sentiment"]
