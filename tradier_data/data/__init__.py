"""
Data Access Module
==================

Tradier market-data client and the value objects it returns.

1. TradierClient - authenticated GETs against the Tradier REST endpoints
2. Models - typed, immutable shapes for quotes, chains, history, calendars
3. Date windows - lookback window computation for seasonal views
4. Calendar events - confirmed quarterly earnings extraction
"""

from .errors import (
    TradierError,
    TransportError,
    APIKeyError,
    DecodeError,
    NoDataError,
)
from .models import (
    Interval,
    HistoricalWindow,
    HistoricalSeries,
    PriceBar,
    PriceResult,
    Quote,
    SymbolMatch,
    Greeks,
    OptionContract,
    OptionChain,
    RawCalendarRecord,
    RawCalendarResult,
    RawCalendarResponse,
    CorporateCalendarEvent,
)
from .date_windows import compute_window, parse_duration, market_today, to_query_date
from .calendar_events import (
    extract_earnings_events,
    is_quarterly_earnings,
    select_envelope,
    events_to_frame,
)
from .tradier_client import TradierClient, get_tradier_client

__all__ = [
    # Client
    "TradierClient",
    "get_tradier_client",
    # Errors
    "TradierError",
    "TransportError",
    "APIKeyError",
    "DecodeError",
    "NoDataError",
    # Models
    "Interval",
    "HistoricalWindow",
    "HistoricalSeries",
    "PriceBar",
    "PriceResult",
    "Quote",
    "SymbolMatch",
    "Greeks",
    "OptionContract",
    "OptionChain",
    "RawCalendarRecord",
    "RawCalendarResult",
    "RawCalendarResponse",
    "CorporateCalendarEvent",
    # Pure helpers
    "compute_window",
    "parse_duration",
    "market_today",
    "to_query_date",
    "extract_earnings_events",
    "is_quarterly_earnings",
    "select_envelope",
    "events_to_frame",
]
