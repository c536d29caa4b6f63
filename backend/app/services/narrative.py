"""AI narrative generation for analysis summaries."""

from __future__ import annotations

import logging

from app.clients import GeminiClient
from core.models.summary import DailySummary, MonthlySummary, PeriodSummary

logger = logging.getLogger(__name__)

ANALYST_PREAMBLE = "You are a professional stock analyst."
CLOSING = "Please respond in English, maintaining professionalism and objectivity."


def build_daily_prompt(summary: DailySummary) -> str:
    lines = [
        f"{ANALYST_PREAMBLE} Please analyze the following CSI 300 ETF data:",
        "",
        f"Date: {summary.date:%Y-%m-%d}",
        f"Current Price: {summary.current_price:.2f} CNY",
        f"Price Change: {summary.price_change_pct:.2f}%",
        f"Relative to High: {summary.relative_to_high:.2f}%",
        f"Relative to Low: {summary.relative_to_low:.2f}%",
        f"Historical High: {summary.historical_high:.2f} CNY",
        f"Historical Low: {summary.historical_low:.2f} CNY",
        f"Volume: {summary.volume}",
    ]

    ind = summary.indicators
    if ind is not None:
        lines.append(f"MA{ind.ma_period}: {ind.moving_average:.2f}")
        lines.append(f"EMA{ind.ema_period}: {ind.ema:.2f}")
        if ind.rsi is not None:
            lines.append(f"RSI{ind.rsi_period}: {ind.rsi:.2f}")
        lines.append(
            f"MACD: {ind.macd:.2f} (signal {ind.macd_signal:.2f}, "
            f"histogram {ind.macd_histogram:.2f})"
        )

    lines += [
        "",
        "Please provide professional investment advice including:",
        "1. Market trend analysis",
        "2. Risk assessment",
        "3. Investment recommendations",
        "4. Key points to watch",
        "",
        CLOSING,
    ]
    return "\n".join(lines)


def _period_lines(summary: PeriodSummary, change_label: str) -> list[str]:
    return [
        f"Start Price: {summary.start_price:.2f} CNY",
        f"End Price: {summary.end_price:.2f} CNY",
        f"{change_label}: {summary.change_pct:.2f}%",
        f"Highest: {summary.highest_price:.2f} CNY ({summary.highest_date:%Y-%m-%d})",
        f"Lowest: {summary.lowest_price:.2f} CNY ({summary.lowest_date:%Y-%m-%d})",
        f"Average Volume: {summary.average_volume:.0f}",
        f"Total Volume: {summary.total_volume}",
    ]


def build_weekly_prompt(summary: PeriodSummary) -> str:
    lines = [
        f"{ANALYST_PREAMBLE} Please analyze the following CSI 300 ETF weekly data:",
        "",
        f"Period: {summary.start_date:%Y-%m-%d} to {summary.end_date:%Y-%m-%d}",
        *_period_lines(summary, "Weekly Change"),
        "",
        "Please analyze this week's market performance including:",
        "1. Weekly trend analysis",
        "2. Key price breakouts",
        "3. Volume analysis",
        "4. Next week outlook",
        "5. Investment strategy recommendations",
        "",
        CLOSING,
    ]
    return "\n".join(lines)


def build_monthly_prompt(summary: MonthlySummary) -> str:
    lines = [
        f"{ANALYST_PREAMBLE} Please analyze the following CSI 300 ETF monthly data:",
        "",
        f"Month: {summary.year}-{summary.month}",
        *_period_lines(summary, "Monthly Change"),
        "",
        "Please analyze this month's market performance including:",
        "1. Overall monthly trend",
        "2. Important support and resistance levels",
        "3. Monthly volume analysis",
        "4. Next month market outlook",
        "5. Long-term investment recommendations",
        "",
        CLOSING,
    ]
    return "\n".join(lines)


class NarrativeService:
    """Turns summaries into prompts and asks the model for commentary."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def close(self) -> None:
        await self.client.close()

    async def daily(self, summary: DailySummary) -> str:
        return await self.client.generate(build_daily_prompt(summary))

    async def weekly(self, summary: PeriodSummary) -> str:
        return await self.client.generate(build_weekly_prompt(summary))

    async def monthly(self, summary: MonthlySummary) -> str:
        return await self.client.generate(build_monthly_prompt(summary))

    async def custom(self, prompt: str) -> str:
        return await self.client.generate(prompt)
