"""Manual trigger: ``python -m promptfeed``."""

import asyncio
import json

import click

from promptfeed.logging_config import configure_logging
from promptfeed.tasks.idea_tasks import run_daily


@click.command()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.option("--dry-run", is_flag=True, help="Print the digest instead of sending it")
def main(log_level: str | None, dry_run: bool) -> None:
    """Collect trends now and deliver today's build ideas."""
    configure_logging(log_level.upper() if log_level else None)

    result = asyncio.run(run_daily(send=not dry_run))
    if dry_run:
        click.echo(result["digest"])

    summary = {k: v for k, v in result.items() if k != "digest"}
    click.echo(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
