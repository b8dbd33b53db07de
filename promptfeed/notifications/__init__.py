"""Outbound notifications."""

from .telegram import TelegramNotifier

__all__ = ["TelegramNotifier"]
