"""Plain-text report formatting for console output and email bodies."""

from __future__ import annotations

from core.models.summary import DailySummary, MonthlySummary, PeriodSummary

DATE_FMT = "%Y-%m-%d"


class ReportFormatter:
    """Formats analysis summaries into human-readable reports."""

    @staticmethod
    def daily(summary: DailySummary, narrative: str) -> str:
        lines = [
            "📊 CSI 300 ETF Daily Analysis Report",
            "",
            f"📅 Date: {summary.date:{DATE_FMT}}",
            "",
            f"💰 Current Price: {summary.current_price:.2f} CNY",
            f"📈 Price Change: {summary.price_change_pct:.2f}%",
            f"📊 Relative to High: {summary.relative_to_high:.2f}%",
            f"📉 Relative to Low: {summary.relative_to_low:.2f}%",
        ]

        ind = summary.indicators
        if ind is not None:
            rsi_text = f"{ind.rsi:.2f}" if ind.rsi is not None else "n/a"
            lines += [
                "",
                f"📐 MA{ind.ma_period}: {ind.moving_average:.2f}  "
                f"EMA{ind.ema_period}: {ind.ema:.2f}  "
                f"RSI{ind.rsi_period}: {rsi_text}",
                f"📐 MACD: {ind.macd:.2f}  Signal: {ind.macd_signal:.2f}  "
                f"Histogram: {ind.macd_histogram:.2f}",
            ]

        lines += ["", "🤖 AI Analysis:", narrative, ""]
        return "\n".join(lines)

    @staticmethod
    def _period_body(summary: PeriodSummary) -> list[str]:
        return [
            f"💰 Start Price: {summary.start_price:.2f} CNY",
            f"💰 End Price: {summary.end_price:.2f} CNY",
        ]

    @staticmethod
    def _extrema(summary: PeriodSummary) -> list[str]:
        return [
            f"📊 Highest: {summary.highest_price:.2f} CNY ({summary.highest_date:{DATE_FMT}})",
            f"📉 Lowest: {summary.lowest_price:.2f} CNY ({summary.lowest_date:{DATE_FMT}})",
        ]

    @classmethod
    def weekly(cls, summary: PeriodSummary, narrative: str) -> str:
        lines = [
            "📈 CSI 300 ETF Weekly Analysis Report",
            "",
            f"📅 Period: {summary.start_date:{DATE_FMT}} to {summary.end_date:{DATE_FMT}}",
            "",
            *cls._period_body(summary),
            f"📈 Weekly Change: {summary.change_pct:.2f}%",
            *cls._extrema(summary),
            "",
            "🤖 AI Analysis:",
            narrative,
            "",
        ]
        return "\n".join(lines)

    @classmethod
    def monthly(cls, summary: MonthlySummary, narrative: str) -> str:
        lines = [
            "📊 CSI 300 ETF Monthly Analysis Report",
            "",
            f"📅 Month: {summary.year}-{summary.month}",
            "",
            *cls._period_body(summary),
            f"📈 Monthly Change: {summary.change_pct:.2f}%",
            *cls._extrema(summary),
            "",
            "🤖 AI Analysis:",
            narrative,
            "",
        ]
        return "\n".join(lines)
