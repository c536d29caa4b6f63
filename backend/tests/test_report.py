"""Tests for report formatting and narrative prompts."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.services.narrative import (
    NarrativeService,
    build_daily_prompt,
    build_monthly_prompt,
    build_weekly_prompt,
)
from app.services.report import ReportFormatter
from core.indicators import IndicatorCalculator
from core.models.point import TimeSeriesPoint
from core.period_analyzer import analyze_daily, analyze_monthly, analyze_weekly


BASE = datetime(2024, 6, 3, tzinfo=timezone.utc)


def make_series(closes: list[float]) -> list[TimeSeriesPoint]:
    return [
        TimeSeriesPoint(
            timestamp=BASE + timedelta(days=i),
            open=c, high=c + 10, low=c - 10, close=c, volume=1000 * (i + 1),
        )
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def series():
    return make_series([3500.0, 3550.0, 3450.0, 3600.0])


class TestDailyReport:
    def test_core_lines(self, series):
        report = ReportFormatter.daily(analyze_daily(series), "Looks fine.")

        assert report.startswith("📊 CSI 300 ETF Daily Analysis Report")
        assert "📅 Date: 2024-06-06" in report
        assert "💰 Current Price: 3600.00 CNY" in report
        assert "📈 Price Change: 4.35%" in report
        assert "🤖 AI Analysis:\nLooks fine." in report
        assert "MACD" not in report

    def test_indicator_lines(self, series):
        summary = analyze_daily(series, IndicatorCalculator())
        report = ReportFormatter.daily(summary, "n")

        assert "MA20: 0.00" in report
        assert "EMA20:" in report
        # three price changes are fewer than rsi_period + 1 points
        assert "RSI14: n/a" in report
        assert "MACD:" in report

    def test_non_finite_values_render(self):
        point = make_series([100.0])[0].model_copy(update={"high": 100.0, "low": 100.0})
        report = ReportFormatter.daily(analyze_daily([point]), "n")

        assert "Relative to High: nan%" in report


class TestPeriodReports:
    def test_weekly(self, series):
        report = ReportFormatter.weekly(analyze_weekly(series), "Weekly view.")

        assert report.startswith("📈 CSI 300 ETF Weekly Analysis Report")
        assert "📅 Period: 2024-06-03 to 2024-06-06" in report
        assert "💰 Start Price: 3500.00 CNY" in report
        assert "📈 Weekly Change: 2.86%" in report
        assert "📊 Highest: 3610.00 CNY (2024-06-06)" in report
        assert "📉 Lowest: 3440.00 CNY (2024-06-05)" in report
        assert "Weekly view." in report

    def test_monthly(self, series):
        report = ReportFormatter.monthly(analyze_monthly(series), "Monthly view.")

        assert report.startswith("📊 CSI 300 ETF Monthly Analysis Report")
        assert "📅 Month: 2024-6" in report
        assert "📈 Monthly Change: 2.86%" in report


class TestPrompts:
    def test_daily_prompt(self, series):
        prompt = build_daily_prompt(analyze_daily(series, IndicatorCalculator()))

        assert prompt.startswith("You are a professional stock analyst.")
        assert "Current Price: 3600.00 CNY" in prompt
        assert "Volume: 4000" in prompt
        assert "MA20:" in prompt
        assert "RSI14" not in prompt
        assert prompt.endswith("maintaining professionalism and objectivity.")

    def test_weekly_prompt(self, series):
        prompt = build_weekly_prompt(analyze_weekly(series))

        assert "weekly data" in prompt
        assert "Period: 2024-06-03 to 2024-06-06" in prompt
        assert "Average Volume: 2500" in prompt
        assert "Total Volume: 10000" in prompt
        assert "Next week outlook" in prompt

    def test_monthly_prompt(self, series):
        prompt = build_monthly_prompt(analyze_monthly(series))

        assert "Month: 2024-6" in prompt
        assert "Monthly Change: 2.86%" in prompt
        assert "Long-term investment recommendations" in prompt


class TestNarrativeService:
    @pytest.mark.asyncio
    async def test_daily_sends_built_prompt(self, series):
        client = AsyncMock()
        client.generate.return_value = "commentary"
        service = NarrativeService(client)
        summary = analyze_daily(series)

        assert await service.daily(summary) == "commentary"
        client.generate.assert_awaited_once_with(build_daily_prompt(summary))

    @pytest.mark.asyncio
    async def test_weekly_and_monthly(self, series):
        client = AsyncMock()
        client.generate.return_value = "x"
        service = NarrativeService(client)

        await service.weekly(analyze_weekly(series))
        await service.monthly(analyze_monthly(series))

        prompts = [call.args[0] for call in client.generate.await_args_list]
        assert "weekly data" in prompts[0]
        assert "monthly data" in prompts[1]

    @pytest.mark.asyncio
    async def test_custom_and_close(self):
        client = AsyncMock()
        client.generate.return_value = "answer"
        service = NarrativeService(client)

        assert await service.custom("free-form") == "answer"
        client.generate.assert_awaited_once_with("free-form")

        await service.close()
        client.close.assert_awaited_once()
