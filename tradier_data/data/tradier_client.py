"""
Tradier Market Data Client
==========================

Thin synchronous client over the Tradier brokerage REST API:
- Option expirations and chains (with greeks)
- Quotes and symbol lookup
- Historical prices (single day and seasonal windows)
- Corporate calendars (confirmed quarterly earnings)

Every operation issues exactly one GET and either returns a typed value
or raises. There is no retry, rate limiting or caching at this layer.

Usage:
    client = TradierClient()  # reads TRADIER_TOKEN / TRADIER_BASE_URI

    client.get_current_price("AAPL")
    client.get_seasonal_view("AAPL", "3y", "monthly").to_frame()
    client.get_earning_dates("AAPL")
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from ..config import TradierConfig
from .calendar_events import extract_earnings_events, select_envelope
from .date_windows import compute_window, market_today, parse_duration, to_query_date
from .errors import APIKeyError, DecodeError, TradierError, TransportError
from .models import (
    CorporateCalendarEvent,
    HistoricalSeries,
    Interval,
    OptionChain,
    PriceResult,
    Quote,
    SymbolMatch,
    parse_expirations,
    parse_history_bars,
    parse_lookup,
    parse_quotes,
)

logger = logging.getLogger(__name__)

# Endpoints, relative to the configured base URI
OPTIONS_CHAIN = "v1/markets/options/chains"
OPTIONS_EXPIRATIONS = "v1/markets/options/expirations"
LOOKUP = "v1/markets/lookup"
HISTORY = "v1/markets/history"
QUOTES = "v1/markets/quotes"
CALENDARS = "beta/markets/fundamentals/calendars"

DateLike = Union[str, date, datetime]


class TradierClient:
    """
    Client for the Tradier market-data API.

    Authentication is a bearer token sent on every request together with
    ``Accept: application/json`` and ``Cache-Control: no-cache``.

    Errors:
        TransportError: non-2xx status or network failure (APIKeyError on 401)
        DecodeError: body is not JSON or not the expected shape
    """

    def __init__(
        self,
        config: Optional[TradierConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Tradier client.

        Args:
            config: Connection settings (defaults to TradierConfig.from_env())
            session: Optional pre-built requests session

        Raises:
            APIKeyError: no token configured
        """
        self.config = config or TradierConfig.from_env()
        if not self.config.token:
            raise APIKeyError(
                "Tradier API token not found. Set TRADIER_TOKEN in .env file."
            )

        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/json",
            "Cache-Control": "no-cache",
        })

        logger.info(f"TradierClient initialized (base: {self.config.base_uri})")

    def __enter__(self) -> "TradierClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an endpoint and decode its JSON body."""
        url = f"{self.config.base_uri}{endpoint}"
        logger.debug(f"GET {endpoint} params={params}")

        try:
            response = self._session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code == 401:
            raise APIKeyError("Invalid API token", status_code=401)
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"API error {response.status_code} from {endpoint}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Malformed JSON from {endpoint}: {e}") from e

    # =========================================================================
    # Options
    # =========================================================================

    def get_option_expirations(self, symbol: str) -> List[date]:
        """
        Get available option expiration dates for a symbol.

        Returns:
            Expiration dates as returned by the API (ascending); empty for
            symbols without listed options
        """
        data = self._request(OPTIONS_EXPIRATIONS, {"symbol": symbol})
        return parse_expirations(data)

    def get_option_data(self, symbol: str, expiration: DateLike) -> OptionChain:
        """
        Get the options chain for one expiration, including greeks.

        Args:
            symbol: Underlying symbol
            expiration: Expiration date (YYYY-MM-DD or date)
        """
        expiration_date = to_query_date(expiration)
        data = self._request(OPTIONS_CHAIN, {
            "symbol": symbol,
            "expiration": expiration_date.isoformat(),
            "greeks": "true",
        })
        return OptionChain.from_response(symbol, expiration_date, data)

    # =========================================================================
    # Quotes & lookup
    # =========================================================================

    def get_quote(self, symbol: str) -> Quote:
        """
        Get the latest quote for a symbol.

        Raises:
            DecodeError: the response holds no quote for ``symbol``
        """
        quotes = parse_quotes(self._request(QUOTES, {"symbols": symbol}))
        for quote in quotes:
            if quote.symbol.upper() == symbol.upper():
                return quote
        raise DecodeError(f"No quote returned for {symbol}")

    def get_current_price(self, symbol: str) -> float:
        """Get the last traded price for a symbol."""
        quote = self.get_quote(symbol)
        if quote.last is None:
            raise DecodeError(f"Quote for {symbol} has no last price")
        return quote.last

    def lookup_symbol(
        self,
        q: str,
        types: Optional[Union[str, Sequence[str]]] = None,
    ) -> List[SymbolMatch]:
        """
        Search securities by symbol or company name.

        Args:
            q: Free-text query
            types: Security types to restrict to, as a list ("stock", "etf",
                "index", ...) or an already comma-separated string

        Returns:
            Matching securities (always a list, possibly empty)
        """
        params = {"q": q}
        if isinstance(types, str):
            types = types.split(",")
        joined = ",".join(t.strip() for t in types or () if t.strip())
        if joined:
            params["types"] = joined
        return parse_lookup(self._request(LOOKUP, params))

    # =========================================================================
    # Historical prices
    # =========================================================================

    def get_price_at_date(self, symbol: str, dt: DateLike) -> PriceResult:
        """
        Get the opening price of a symbol on a given date.

        Timestamps are truncated to their date component.

        Returns:
            PriceResult holding the open price, or a NoDataError if the
            date has no trading-day record
        """
        logger.debug(f"{symbol} -- {dt}")
        day = to_query_date(dt).isoformat()

        data = self._request(HISTORY, {
            "symbol": symbol,
            "interval": Interval.DAILY.value,
            "start": day,
            "end": day,
            "session_filter": "all",
        })

        for bar in parse_history_bars(data):
            if bar.date.isoformat() == day and bar.open is not None:
                return PriceResult.success(symbol, day, bar.open)

        logger.debug(f"No trading-day record for {symbol} on {day}")
        return PriceResult.no_data(symbol, day)

    def get_seasonal_view(
        self,
        symbol: str,
        duration: str,
        interval: Union[Interval, str],
        today: Optional[date] = None,
    ) -> HistoricalSeries:
        """
        Get historical prices over a lookback window for seasonal comparison.

        Args:
            symbol: Ticker symbol
            duration: Lookback token, "1y" to "5y"
            interval: "daily", "weekly", "monthly" or "earnings"
            today: Reference date (defaults to today in New York)
        """
        years = parse_duration(duration)
        window = compute_window(years, interval, today or market_today())

        params = {"symbol": symbol, "session_filter": "all"}
        params.update(window.to_params())
        bars = parse_history_bars(self._request(HISTORY, params))

        return HistoricalSeries(symbol=symbol, window=window, bars=tuple(bars))

    # =========================================================================
    # Corporate calendars
    # =========================================================================

    def get_earning_dates(self, symbol: str) -> List[CorporateCalendarEvent]:
        """
        Get confirmed quarterly earnings events, oldest first.

        Raises:
            DecodeError: response is not a single calendar envelope
        """
        data = self._request(CALENDARS, {"symbols": symbol})
        return extract_earnings_events(select_envelope(data))

    # =========================================================================
    # Utilities
    # =========================================================================

    def test_connection(self) -> bool:
        """Test API connection."""
        try:
            self.get_quote("SPY")
            return True
        except TradierError as e:
            logger.warning(f"Tradier connection test failed: {e}")
            return False


def get_tradier_client() -> TradierClient:
    """Get a Tradier client configured from the environment."""
    return TradierClient()
