"""Celery tasks for idea generation."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from celery import shared_task

from promptfeed.analysis.ideas import generate_ideas, render_messages
from promptfeed.config.settings import settings
from promptfeed.ingestion.aggregator import TrendAggregator
from promptfeed.notifications.telegram import TelegramNotifier

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def run_daily(
    aggregator: TrendAggregator | None = None,
    notifier: TelegramNotifier | None = None,
    send: bool = True,
) -> dict[str, Any]:
    """Collect trends, generate ideas and deliver them.

    The header and each idea go out as separate messages, each within the
    Telegram message size limit.
    """
    aggregator = aggregator or TrendAggregator()
    try:
        snapshot = await aggregator.collect()
    finally:
        await aggregator.aclose()

    ideas = generate_ideas(snapshot)
    messages = render_messages(ideas)
    digest = "\n\n".join(messages)

    delivered = False
    if send and (notifier is not None or settings.telegram_enabled):
        notifier = notifier or TelegramNotifier()
        try:
            for message in messages:
                await notifier.send(message)
            delivered = True
        finally:
            await notifier.aclose()
    elif send:
        logger.warning("Telegram is not configured; digest not sent")

    return {
        "status": "completed",
        "ideas": len(ideas),
        "delivered": delivered,
        "errors": snapshot.errors,
        "digest": digest,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@shared_task(name="promptfeed.tasks.idea_tasks.generate_daily_ideas")
def generate_daily_ideas() -> dict:
    """Generate and send the daily build ideas.

    Scheduled by Celery beat; see ``celery_app.beat_schedule``.
    """
    logger.info("Generating daily build ideas")

    try:
        result = run_async(run_daily())
        logger.info(f"Generated {result['ideas']} ideas, errors: {result['errors']}")
        result.pop("digest")
        return result

    except Exception as e:
        logger.error(f"Daily idea generation failed: {e}")
        return {"status": "failed", "error": str(e)}
