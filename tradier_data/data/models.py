"""
Tradier Response Models
=======================

Typed value objects for the Tradier market-data endpoints.

Tradier collapses single-element collections: a lookup matching one
security returns ``{"security": {...}}`` while two matches return
``{"security": [{...}, {...}]}``, and an empty match returns ``null``.
The same holds for quotes, option contracts, history bars and expiration
dates. Every ``from_*`` constructor below normalizes these shapes to a
tuple exactly once, so nothing downstream branches on shape.

All models are frozen dataclasses; collections are tuples.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .errors import DecodeError, NoDataError

DATE_FORMAT = "%Y-%m-%d"


# =============================================================================
# Decoding helpers
# =============================================================================

def as_list(value: Any) -> List[Any]:
    """Normalize a Tradier one-or-many field to a list (``None`` -> ``[]``)."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def require_mapping(value: Any, what: str) -> Dict[str, Any]:
    """Return ``value`` if it is a JSON object, else raise DecodeError."""
    if not isinstance(value, dict):
        raise DecodeError(f"Expected object for {what}, got {type(value).__name__}")
    return value


def parse_date(value: Any) -> date:
    """Parse a ``YYYY-MM-DD`` string (longer timestamps are truncated)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], DATE_FORMAT).date()
    except ValueError as e:
        raise DecodeError(f"Invalid date {value!r}: {e}") from e


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Expected number, got {value!r}") from e


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Expected integer, got {value!r}") from e


# =============================================================================
# Historical windows
# =============================================================================

class Interval(str, Enum):
    """Sampling granularity accepted by the history endpoint."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    EARNINGS = "earnings"


@dataclass(frozen=True)
class HistoricalWindow:
    """
    A ``[start_date, end_date]`` query range for the history endpoint.

    Invariant: ``start_date <= end_date``.
    """
    start_date: date
    end_date: date
    interval: Interval

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )

    @property
    def start(self) -> str:
        return self.start_date.strftime(DATE_FORMAT)

    @property
    def end(self) -> str:
        return self.end_date.strftime(DATE_FORMAT)

    def to_params(self) -> Dict[str, str]:
        """Query parameters for the history endpoint."""
        return {"interval": self.interval.value, "start": self.start, "end": self.end}


@dataclass(frozen=True)
class PriceBar:
    """One OHLCV record from the history endpoint."""
    date: date
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "PriceBar":
        data = require_mapping(data, "history day")
        if "date" not in data:
            raise DecodeError("History day record has no date")
        return cls(
            date=parse_date(data["date"]),
            open=_opt_float(data.get("open")),
            high=_opt_float(data.get("high")),
            low=_opt_float(data.get("low")),
            close=_opt_float(data.get("close")),
            volume=_opt_int(data.get("volume")),
        )


def parse_history_bars(payload: Any) -> List[PriceBar]:
    """
    Decode a history response body into bars.

    ``{"history": null}`` is how Tradier reports "no trading days in range"
    and yields an empty list.
    """
    body = require_mapping(payload, "history response")
    if "history" not in body:
        raise DecodeError("History response has no 'history' field")
    history = body["history"]
    if history is None:
        return []
    history = require_mapping(history, "history")
    return [PriceBar.from_dict(d) for d in as_list(history.get("day"))]


@dataclass(frozen=True)
class HistoricalSeries:
    """Historical prices for one symbol over a computed window."""
    symbol: str
    window: HistoricalWindow
    bars: Tuple[PriceBar, ...] = ()

    def __len__(self) -> int:
        return len(self.bars)

    def to_frame(self) -> pd.DataFrame:
        """Bars as a DataFrame indexed by date (empty frame if no bars)."""
        columns = ["date", "open", "high", "low", "close", "volume"]
        if not self.bars:
            return pd.DataFrame(columns=columns + ["ticker"]).set_index("date")

        df = pd.DataFrame([asdict(b) for b in self.bars], columns=columns)
        df["date"] = pd.to_datetime(df["date"])
        df["ticker"] = self.symbol
        return df.sort_values("date").set_index("date")


@dataclass(frozen=True)
class PriceResult:
    """
    Outcome of a price-at-date lookup.

    Either ``price`` is set, or ``error`` holds the NoDataError explaining
    why no price exists. Callers check ``ok`` or call ``unwrap()``.
    """
    symbol: str
    date: str
    price: Optional[float] = None
    error: Optional[NoDataError] = None

    @classmethod
    def success(cls, symbol: str, day: str, price: float) -> "PriceResult":
        return cls(symbol=symbol, date=day, price=price)

    @classmethod
    def no_data(cls, symbol: str, day: str) -> "PriceResult":
        return cls(
            symbol=symbol,
            date=day,
            error=NoDataError(f"unable to determine price for {symbol} on {day}"),
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> float:
        """Return the price or raise the NoDataError."""
        if self.error is not None:
            raise self.error
        return self.price


# =============================================================================
# Quotes & lookup
# =============================================================================

@dataclass(frozen=True)
class SymbolMatch:
    """A security returned by the lookup endpoint."""
    symbol: str
    description: str = ""
    exchange: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "SymbolMatch":
        data = require_mapping(data, "security")
        if not data.get("symbol"):
            raise DecodeError("Security record has no symbol")
        return cls(
            symbol=data["symbol"],
            description=data.get("description") or "",
            exchange=data.get("exchange"),
            type=data.get("type"),
        )


def parse_lookup(payload: Any) -> List[SymbolMatch]:
    """Decode a lookup response; no matches yields an empty list."""
    body = require_mapping(payload, "lookup response")
    securities = body.get("securities")
    if securities is None:
        return []
    securities = require_mapping(securities, "securities")
    return [SymbolMatch.from_dict(s) for s in as_list(securities.get("security"))]


@dataclass(frozen=True)
class Quote:
    """Latest quote for a symbol."""
    symbol: str
    description: str = ""
    last: Optional[float] = None
    bid: Optional[float] = None
    ask: Optional[float] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    prevclose: Optional[float] = None
    change: Optional[float] = None
    volume: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Quote":
        data = require_mapping(data, "quote")
        if not data.get("symbol"):
            raise DecodeError("Quote record has no symbol")
        return cls(
            symbol=data["symbol"],
            description=data.get("description") or "",
            last=_opt_float(data.get("last")),
            bid=_opt_float(data.get("bid")),
            ask=_opt_float(data.get("ask")),
            open=_opt_float(data.get("open")),
            high=_opt_float(data.get("high")),
            low=_opt_float(data.get("low")),
            prevclose=_opt_float(data.get("prevclose")),
            change=_opt_float(data.get("change")),
            volume=_opt_int(data.get("volume")),
        )


def parse_quotes(payload: Any) -> List[Quote]:
    body = require_mapping(payload, "quotes response")
    quotes = body.get("quotes")
    if quotes is None:
        return []
    quotes = require_mapping(quotes, "quotes")
    return [Quote.from_dict(q) for q in as_list(quotes.get("quote"))]


def parse_expirations(payload: Any) -> List[date]:
    """Decode an expirations response; unknown symbols yield an empty list."""
    body = require_mapping(payload, "expirations response")
    expirations = body.get("expirations")
    if expirations is None:
        return []
    expirations = require_mapping(expirations, "expirations")
    return [parse_date(d) for d in as_list(expirations.get("date"))]


# =============================================================================
# Options
# =============================================================================

@dataclass(frozen=True)
class Greeks:
    """Option sensitivities as reported by Tradier (ORATS-sourced)."""
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None
    rho: Optional[float] = None
    phi: Optional[float] = None
    bid_iv: Optional[float] = None
    mid_iv: Optional[float] = None
    ask_iv: Optional[float] = None
    smv_vol: Optional[float] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Greeks":
        data = require_mapping(data, "greeks")
        return cls(
            delta=_opt_float(data.get("delta")),
            gamma=_opt_float(data.get("gamma")),
            theta=_opt_float(data.get("theta")),
            vega=_opt_float(data.get("vega")),
            rho=_opt_float(data.get("rho")),
            phi=_opt_float(data.get("phi")),
            bid_iv=_opt_float(data.get("bid_iv")),
            mid_iv=_opt_float(data.get("mid_iv")),
            ask_iv=_opt_float(data.get("ask_iv")),
            smv_vol=_opt_float(data.get("smv_vol")),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class OptionContract:
    """A single option contract in a chain."""
    symbol: str
    underlying: str
    option_type: str  # "call" or "put"
    strike: float
    expiration_date: date
    description: str = ""
    bid: Optional[float] = None
    ask: Optional[float] = None
    last: Optional[float] = None
    volume: Optional[int] = None
    open_interest: Optional[int] = None
    greeks: Optional[Greeks] = None

    @property
    def mid(self) -> Optional[float]:
        if self.bid is None or self.ask is None:
            return None
        return (self.bid + self.ask) / 2

    @classmethod
    def from_dict(cls, data: Any) -> "OptionContract":
        data = require_mapping(data, "option")
        for key in ("symbol", "option_type", "strike", "expiration_date"):
            if data.get(key) is None:
                raise DecodeError(f"Option record missing '{key}'")
        greeks = data.get("greeks")
        return cls(
            symbol=data["symbol"],
            underlying=data.get("underlying") or data.get("root_symbol") or "",
            option_type=data["option_type"],
            strike=_opt_float(data["strike"]),
            expiration_date=parse_date(data["expiration_date"]),
            description=data.get("description") or "",
            bid=_opt_float(data.get("bid")),
            ask=_opt_float(data.get("ask")),
            last=_opt_float(data.get("last")),
            volume=_opt_int(data.get("volume")),
            open_interest=_opt_int(data.get("open_interest")),
            greeks=Greeks.from_dict(greeks) if greeks is not None else None,
        )


@dataclass(frozen=True)
class OptionChain:
    """Options chain for one symbol and expiration."""
    symbol: str
    expiration: date
    contracts: Tuple[OptionContract, ...] = field(default_factory=tuple)

    @classmethod
    def from_response(cls, symbol: str, expiration: date, payload: Any) -> "OptionChain":
        body = require_mapping(payload, "options chain response")
        options = body.get("options")
        if options is None:
            return cls(symbol=symbol, expiration=expiration)
        options = require_mapping(options, "options")
        contracts = tuple(OptionContract.from_dict(o) for o in as_list(options.get("option")))
        return cls(symbol=symbol, expiration=expiration, contracts=contracts)

    def __len__(self) -> int:
        return len(self.contracts)

    @property
    def calls(self) -> List[OptionContract]:
        return [c for c in self.contracts if c.option_type == "call"]

    @property
    def puts(self) -> List[OptionContract]:
        return [c for c in self.contracts if c.option_type == "put"]

    def to_frame(self) -> pd.DataFrame:
        """One row per contract; greeks flattened into ``greeks_*`` columns."""
        greek_names = [f.name for f in fields(Greeks)]
        columns = [f.name for f in fields(OptionContract) if f.name != "greeks"]
        columns += [f"greeks_{name}" for name in greek_names]

        rows = []
        for c in self.contracts:
            row = asdict(c)
            greeks = row.pop("greeks") or {}
            for name in greek_names:
                row[f"greeks_{name}"] = greeks.get(name)
            rows.append(row)

        df = pd.DataFrame(rows, columns=columns)
        if df.empty:
            return df
        return df.sort_values(["option_type", "strike"]).reset_index(drop=True)


# =============================================================================
# Corporate calendars
# =============================================================================

@dataclass(frozen=True)
class RawCalendarRecord:
    """One entry of ``tables.corporate_calendars`` as sent by the API."""
    company_id: Optional[str] = None
    begin_date_time: Optional[str] = None
    end_date_time: Optional[str] = None
    event_type: Optional[int] = None
    estimated_date_for_next_event: Optional[str] = None
    event: Optional[str] = None
    event_fiscal_year: Optional[int] = None
    event_status: Optional[str] = None
    time_zone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RawCalendarRecord":
        data = require_mapping(data, "corporate calendar record")
        return cls(
            company_id=data.get("company_id"),
            begin_date_time=data.get("begin_date_time"),
            end_date_time=data.get("end_date_time"),
            event_type=_opt_int(data.get("event_type")),
            estimated_date_for_next_event=data.get("estimated_date_for_next_event"),
            event=data.get("event"),
            event_fiscal_year=_opt_int(data.get("event_fiscal_year")),
            event_status=data.get("event_status"),
            time_zone=data.get("time_zone"),
        )


@dataclass(frozen=True)
class RawCalendarResult:
    """
    Calendar data for one company.

    ``corporate_calendars`` is ``None`` when the API sent null (no
    scheduled events) and may contain ``None`` entries verbatim.
    """
    type: Optional[str] = None
    id: Optional[str] = None
    corporate_calendars: Optional[Tuple[Optional[RawCalendarRecord], ...]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RawCalendarResult":
        data = require_mapping(data, "calendar result")
        tables = data.get("tables")
        calendars = None
        if tables is not None:
            raw = require_mapping(tables, "calendar tables").get("corporate_calendars")
            if raw is not None:
                calendars = tuple(
                    RawCalendarRecord.from_dict(r) if r is not None else None
                    for r in as_list(raw)
                )
        return cls(type=data.get("type"), id=data.get("id"), corporate_calendars=calendars)


@dataclass(frozen=True)
class RawCalendarResponse:
    """One envelope of the calendars endpoint."""
    request: Optional[str] = None
    type: Optional[str] = None
    results: Tuple[RawCalendarResult, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "RawCalendarResponse":
        data = require_mapping(data, "calendar envelope")
        results = data.get("results")
        if results is not None and not isinstance(results, list):
            raise DecodeError(f"Expected list for results, got {type(results).__name__}")
        return cls(
            request=data.get("request"),
            type=data.get("type"),
            results=tuple(RawCalendarResult.from_dict(r) for r in as_list(results)),
        )


@dataclass(frozen=True)
class CorporateCalendarEvent:
    """A confirmed corporate event, projected to the fields callers use."""
    begin_date_time: str
    event_type: Optional[int]
    event_description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
