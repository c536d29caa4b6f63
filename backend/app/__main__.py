"""CLI entry point for the investment notice system.

Runs one CSI 300 analysis (or a perpetual schedule of them), generates an AI
commentary, prints the report and optionally emails it.

Usage:
    python -m app --mode daily
    python -m app --mode weekly --send-email
    python -m app --mode monthly --schedule
    python -m app --mode weekly --time-info
"""

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime, timezone

from app.clients import AlphaVantageClient, GeminiClient, TushareClient
from app.config import ConfigError, Settings, get_settings
from app.services.analysis_job import AnalysisJob
from app.services.market_data import MarketDataService
from app.services.narrative import NarrativeService
from app.services.notifier import EmailNotifier
from app.services.scheduler import Scheduler
from core.indicators import IndicatorCalculator
from core.market_calendar import describe_date
from core.schedule import SUPPORTED_MODES, next_execution_time

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="investment-notice",
        description="A-Share Investment Notification System - CSI 300 ETF Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app --mode daily
  python -m app --mode weekly --send-email
  python -m app --mode monthly --schedule
        """,
    )
    parser.add_argument(
        "--mode", "-m",
        type=str,
        default="daily",
        help="Run mode: daily, weekly, monthly (default: daily)",
    )
    parser.add_argument(
        "--send-email", "-s",
        action="store_true",
        help="Send the report by email",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Keep running and fire at each scheduled time for the mode",
    )
    parser.add_argument(
        "--time-info",
        action="store_true",
        help="Print calendar info for now and the next fire time, then exit",
    )
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def build_job(mode: str, send_email: bool, settings: Settings) -> AnalysisJob:
    """Wire an AnalysisJob from settings. Raises ConfigError on missing settings."""
    market_data = MarketDataService(
        tushare=TushareClient(settings.tushare_token),
        alpha_vantage=AlphaVantageClient(settings.alpha_vantage_api_key),
    )
    narrative = NarrativeService(GeminiClient(settings.gemini_config()))
    notifier = EmailNotifier(settings.email_config()) if send_email else None

    return AnalysisJob(
        mode=mode,
        market_data=market_data,
        narrative=narrative,
        notifier=notifier,
        calculator=IndicatorCalculator(settings.indicator_config()),
    )


async def close_job(job: AnalysisJob) -> None:
    await job.market_data.close()
    await job.narrative.close()


async def cmd_run_once(job: AnalysisJob) -> int:
    """Run a single analysis. Returns the process exit code."""
    try:
        await job.execute()
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1
    finally:
        await close_job(job)

    logger.info("Analysis completed")
    return 0


async def cmd_schedule(job: AnalysisJob) -> int:
    """Run the scheduler until SIGINT/SIGTERM, or until its loop dies.

    Returns 0 on a requested stop and 1 if the loop ended on its own.
    """
    scheduler = Scheduler(job.mode.value, job)
    stop_requested = asyncio.Event()

    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_requested.set)
            installed.append(sig)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await scheduler.start()
    stop_wait = asyncio.create_task(stop_requested.wait())
    loop_done = asyncio.create_task(scheduler.join())
    try:
        await asyncio.wait({stop_wait, loop_done}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop_wait.cancel()
        loop_done.cancel()
        for sig in installed:
            loop.remove_signal_handler(sig)
        logger.info("Shutting down scheduler...")
        await scheduler.stop()
        await close_job(job)

    if stop_requested.is_set():
        return 0
    logger.error("Scheduler loop exited unexpectedly")
    return 1


def cmd_time_info(mode: str) -> int:
    now = datetime.now(timezone.utc)
    print(describe_date(now))
    print(f"Next {mode} execution: {next_execution_time(mode, now):%Y-%m-%d %H:%M:%S} UTC")
    return 0


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if args.mode not in SUPPORTED_MODES:
        print(
            f"Invalid mode: {args.mode}. Supported modes: {', '.join(SUPPORTED_MODES)}",
            file=sys.stderr,
        )
        return 1

    configure_logging(args.debug)

    if args.time_info:
        return cmd_time_info(args.mode)

    logger.info(f"Starting A-Share Investment Notification System, mode: {args.mode}")

    try:
        job = build_job(args.mode, args.send_email, get_settings())
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.schedule:
        return await cmd_schedule(job)
    return await cmd_run_once(job)


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
