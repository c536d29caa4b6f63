"""End-to-end analysis run: fetch, analyze, narrate, report, notify.

Weekly and monthly runs also produce (but do not email) the daily report,
matching the command-line behaviour of running the daily analysis first.
"""

from __future__ import annotations

import logging

from app.services.market_data import MarketDataService
from app.services.narrative import NarrativeService
from app.services.notifier import EmailNotifier
from app.services.report import ReportFormatter
from core.indicators import IndicatorCalculator
from core.period_analyzer import analyze_daily, analyze_monthly, analyze_weekly
from core.schedule import ScheduleMode

logger = logging.getLogger(__name__)

SUBJECTS = {
    ScheduleMode.DAILY: "Daily Investment Analysis Report",
    ScheduleMode.WEEKLY: "Weekly Investment Analysis Report",
    ScheduleMode.MONTHLY: "Monthly Investment Analysis Report",
}


class NotificationError(Exception):
    """The report was produced but could not be delivered."""


class AnalysisJob:
    """One analysis mode wired to its collaborators.

    Satisfies the ScheduledAction protocol through run().
    """

    def __init__(
        self,
        mode: ScheduleMode | str,
        market_data: MarketDataService,
        narrative: NarrativeService,
        notifier: EmailNotifier | None = None,
        calculator: IndicatorCalculator | None = None,
        echo: bool = True,
    ):
        self.mode = ScheduleMode(mode)
        self.market_data = market_data
        self.narrative = narrative
        self.notifier = notifier
        self.calculator = calculator or IndicatorCalculator()
        self.echo = echo

    def _emit(self, report: str) -> None:
        if self.echo:
            print(report)

    async def _notify(self, subject: str, report: str) -> None:
        if self.notifier is None:
            return
        if not await self.notifier.send(subject, report):
            raise NotificationError(f"Failed to send '{subject}'")
        logger.info("Email sent successfully")

    async def daily_report(self) -> str:
        """Run the daily analysis and return the formatted report."""
        logger.info("Starting daily analysis")

        points = await self.market_data.fetch_daily()
        logger.info(f"Retrieved {len(points)} data points")

        summary = analyze_daily(points, self.calculator)
        logger.info(f"Analysis completed, price change: {summary.price_change_pct:.2f}%")

        narrative = await self.narrative.daily(summary)
        logger.info("Narrative generation completed")

        return ReportFormatter.daily(summary, narrative)

    async def weekly_report(self) -> str:
        logger.info("Starting weekly analysis")
        points = await self.market_data.fetch_weekly()
        summary = analyze_weekly(points)
        narrative = await self.narrative.weekly(summary)
        return ReportFormatter.weekly(summary, narrative)

    async def monthly_report(self) -> str:
        logger.info("Starting monthly analysis")
        points = await self.market_data.fetch_monthly()
        summary = analyze_monthly(points)
        narrative = await self.narrative.monthly(summary)
        return ReportFormatter.monthly(summary, narrative)

    async def execute(self) -> str:
        """
        Run the configured mode once.

        Returns:
            The mode's report (the one that is emailed)

        Raises:
            EmptyInputError, NarrativeError, ConfigError, NotificationError
        """
        daily = await self.daily_report()
        self._emit(daily)

        if self.mode == ScheduleMode.DAILY:
            report = daily
        elif self.mode == ScheduleMode.WEEKLY:
            report = await self.weekly_report()
            self._emit(report)
        else:
            report = await self.monthly_report()
            self._emit(report)

        await self._notify(SUBJECTS[self.mode], report)
        return report

    async def run(self) -> None:
        """Scheduled entry point: execute and log any failure."""
        try:
            await self.execute()
        except Exception:
            logger.exception(f"Scheduled {self.mode.value} analysis failed")
