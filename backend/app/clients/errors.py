"""Errors raised by external service clients."""


class MarketDataError(Exception):
    """A market-data provider could not return a usable series."""


class NarrativeError(Exception):
    """The narrative service request failed (transport or HTTP status)."""
