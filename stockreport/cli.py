import argparse
import asyncio
import sys

import structlog
import uvicorn

from stockreport.config import Settings, get_settings
from stockreport.context import build_context, validate_settings
from stockreport.exceptions import ConfigurationError
from stockreport.logging_config import setup_logging
from stockreport.main import create_app
from stockreport.scheduler.cron import describe_cron
from stockreport.scheduler.status import RunStatus

logger = structlog.get_logger()


async def run_once(settings: Settings) -> RunStatus:
    """Build the full context, run one report and tear everything down."""
    context = await build_context(settings)
    try:
        return await context.scheduler.pipeline.run("cli")
    finally:
        await context.aclose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="stockreport",
        description="Send a daily stock report for a watchlist of tickers.",
    )
    parser.add_argument(
        "-t",
        "--test",
        action="store_true",
        help="generate and send one report now, then exit",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        validate_settings(settings)
    except ConfigurationError as exc:
        logger.error(
            "configuration_invalid",
            error=exc.message,
            hint="Create a .env file and fill in the required values.",
        )
        sys.exit(1)

    logger.info(
        "configuration_validated",
        recipients=settings.recipients,
        symbols=settings.default_symbols,
        schedule=describe_cron(settings.cron_schedule),
    )

    if args.test:
        status = asyncio.run(run_once(settings))
        logger.info(
            "test_report_finished",
            outcome=status.last_outcome,
            error=status.last_error,
        )
        sys.exit(0)

    uvicorn.run(
        create_app(),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
