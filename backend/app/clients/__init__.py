"""External service clients."""

from app.clients.errors import MarketDataError, NarrativeError
from app.clients.tushare import TushareClient
from app.clients.alpha_vantage import AlphaVantageClient
from app.clients.gemini import GeminiClient

__all__ = [
    "MarketDataError",
    "NarrativeError",
    "TushareClient",
    "AlphaVantageClient",
    "GeminiClient",
]
