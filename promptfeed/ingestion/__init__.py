"""Data ingestion module for promptfeed."""

from .base import HTTPProvider, PartialResult, Provider, collect_partial
from .envelope import AggregateSignal, NormalizedEnvelope, TrendRecord
from .rate_limiter import RateLimiter
from .retry import RetryOptions, is_retryable_error, with_retry

__all__ = [
    "AggregateSignal",
    "HTTPProvider",
    "NormalizedEnvelope",
    "PartialResult",
    "Provider",
    "RateLimiter",
    "RetryOptions",
    "TrendRecord",
    "collect_partial",
    "is_retryable_error",
    "with_retry",
]
