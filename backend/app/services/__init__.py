"""Business services."""

from app.services.analysis_job import AnalysisJob, NotificationError
from app.services.market_data import MarketDataService, generate_synthetic_series
from app.services.narrative import NarrativeService
from app.services.notifier import EmailNotifier
from app.services.report import ReportFormatter
from app.services.scheduler import Scheduler, ScheduledAction

__all__ = [
    "AnalysisJob",
    "NotificationError",
    "MarketDataService",
    "generate_synthetic_series",
    "NarrativeService",
    "EmailNotifier",
    "ReportFormatter",
    "Scheduler",
    "ScheduledAction",
]
