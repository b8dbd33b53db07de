"""promptfeed: scheduled build-prompt generator fed by rate limited trend providers."""

__version__ = "0.1.0"
