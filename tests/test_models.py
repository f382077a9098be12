"""
Tests for Tradier Response Models (tradier_data/data/models.py)

Tests:
1. One-or-many normalization for lookup, quotes, expirations, history
2. Options chain decoding with greeks
3. PriceResult success/failure variant
4. DataFrame conversion
"""

from datetime import date

import pandas as pd
import pytest

from tradier_data.data.errors import DecodeError, NoDataError
from tradier_data.data.models import (
    HistoricalSeries,
    HistoricalWindow,
    Interval,
    OptionChain,
    PriceResult,
    as_list,
    parse_date,
    parse_expirations,
    parse_history_bars,
    parse_lookup,
    parse_quotes,
)


class TestShapeNormalization:
    """Single object, list and null all become lists."""

    def test_as_list(self):
        assert as_list(None) == []
        assert as_list({"a": 1}) == [{"a": 1}]
        assert as_list([1, 2]) == [1, 2]

    def test_lookup_single_security(self):
        payload = {"securities": {"security": {
            "symbol": "AAPL", "exchange": "Q", "type": "stock", "description": "Apple Inc",
        }}}

        matches = parse_lookup(payload)

        assert len(matches) == 1
        assert matches[0].symbol == "AAPL"
        assert matches[0].description == "Apple Inc"
        assert matches[0].type == "stock"

    def test_lookup_many_securities(self):
        payload = {"securities": {"security": [
            {"symbol": "GOOGL", "description": "Alphabet Inc Class A"},
            {"symbol": "GOOG", "description": "Alphabet Inc Class C"},
        ]}}

        assert [m.symbol for m in parse_lookup(payload)] == ["GOOGL", "GOOG"]

    def test_lookup_no_matches(self):
        assert parse_lookup({"securities": None}) == []

    def test_lookup_security_without_symbol(self):
        with pytest.raises(DecodeError):
            parse_lookup({"securities": {"security": {"description": "??"}}})

    def test_quotes_single_and_many(self):
        single = parse_quotes({"quotes": {"quote": {"symbol": "AAPL", "last": 190.5}}})
        many = parse_quotes({"quotes": {"quote": [
            {"symbol": "AAPL", "last": 190.5},
            {"symbol": "MSFT", "last": "410.25"},
        ]}})

        assert single[0].last == 190.5
        assert [q.last for q in many] == [190.5, 410.25]

    def test_quote_with_bad_number(self):
        with pytest.raises(DecodeError):
            parse_quotes({"quotes": {"quote": {"symbol": "AAPL", "last": "n/a"}}})

    def test_expirations(self):
        payload = {"expirations": {"date": ["2024-06-21", "2024-06-28"]}}
        assert parse_expirations(payload) == [date(2024, 6, 21), date(2024, 6, 28)]

    def test_single_expiration(self):
        assert parse_expirations({"expirations": {"date": "2024-06-21"}}) == [date(2024, 6, 21)]

    def test_expirations_null(self):
        assert parse_expirations({"expirations": None}) == []

    def test_expirations_not_an_object(self):
        with pytest.raises(DecodeError):
            parse_expirations(["2024-06-21"])


class TestHistoryBars:

    def test_single_day(self):
        bars = parse_history_bars({"history": {"day": {
            "date": "2024-06-14", "open": 213.85, "high": 215.17,
            "low": 211.3, "close": 212.49, "volume": 70122748,
        }}})

        assert len(bars) == 1
        assert bars[0].date == date(2024, 6, 14)
        assert bars[0].open == 213.85
        assert bars[0].volume == 70122748

    def test_null_history(self):
        assert parse_history_bars({"history": None}) == []

    def test_missing_history_field(self):
        with pytest.raises(DecodeError, match="history"):
            parse_history_bars({"quotes": {}})

    def test_day_without_date(self):
        with pytest.raises(DecodeError):
            parse_history_bars({"history": {"day": {"open": 1.0}}})


class TestOptionChain:

    @pytest.fixture
    def chain_payload(self):
        return {"options": {"option": [
            {
                "symbol": "AAPL240621P00190000", "description": "AAPL Jun 21 2024 $190.00 Put",
                "underlying": "AAPL", "option_type": "put", "strike": 190.0,
                "expiration_date": "2024-06-21", "bid": 1.2, "ask": 1.3, "last": 1.25,
                "volume": 1200, "open_interest": 5400,
                "greeks": {"delta": -0.31, "gamma": 0.04, "theta": -0.12, "vega": 0.09,
                           "rho": -0.01, "phi": 0.01, "mid_iv": 0.22, "smv_vol": 0.21},
            },
            {
                "symbol": "AAPL240621C00190000", "description": "AAPL Jun 21 2024 $190.00 Call",
                "root_symbol": "AAPL", "option_type": "call", "strike": 190.0,
                "expiration_date": "2024-06-21", "bid": 3.1, "ask": 3.3,
                "greeks": None,
            },
        ]}}

    def test_decodes_contracts_and_greeks(self, chain_payload):
        chain = OptionChain.from_response("AAPL", date(2024, 6, 21), chain_payload)

        assert len(chain) == 2
        put = chain.puts[0]
        assert put.greeks.delta == -0.31
        assert put.greeks.vega == 0.09
        assert put.open_interest == 5400
        assert put.mid == pytest.approx(1.25)

        call = chain.calls[0]
        assert call.underlying == "AAPL"
        assert call.greeks is None

    def test_single_contract(self, chain_payload):
        payload = {"options": {"option": chain_payload["options"]["option"][0]}}
        chain = OptionChain.from_response("AAPL", date(2024, 6, 21), payload)
        assert len(chain) == 1

    def test_null_options(self):
        chain = OptionChain.from_response("XYZ", date(2024, 6, 21), {"options": None})
        assert len(chain) == 0
        assert chain.to_frame().empty

    def test_empty_chain_frame_keeps_columns(self, chain_payload):
        empty = OptionChain.from_response("XYZ", date(2024, 6, 21), {"options": None}).to_frame()
        full = OptionChain.from_response("AAPL", date(2024, 6, 21), chain_payload).to_frame()

        assert list(empty.columns) == list(full.columns)
        assert {"strike", "option_type", "greeks_delta", "greeks_smv_vol"} <= set(empty.columns)

    def test_contract_missing_strike(self):
        with pytest.raises(DecodeError, match="strike"):
            OptionChain.from_response("AAPL", date(2024, 6, 21), {"options": {"option": {
                "symbol": "X", "option_type": "call", "expiration_date": "2024-06-21",
            }}})

    def test_to_frame_flattens_greeks(self, chain_payload):
        df = OptionChain.from_response("AAPL", date(2024, 6, 21), chain_payload).to_frame()

        assert len(df) == 2
        assert "greeks_delta" in df.columns
        assert "greeks" not in df.columns
        # Calls sort before puts
        assert list(df["option_type"]) == ["call", "put"]
        assert df.loc[1, "greeks_delta"] == -0.31


class TestPriceResult:

    def test_success(self):
        result = PriceResult.success("AAPL", "2024-06-14", 213.85)
        assert result.ok
        assert result.unwrap() == 213.85

    def test_no_data_is_distinct_failure(self):
        result = PriceResult.no_data("AAPL", "2024-06-15")

        assert not result.ok
        assert result.price is None
        assert isinstance(result.error, NoDataError)
        with pytest.raises(NoDataError, match="unable to determine price"):
            result.unwrap()


class TestHistoricalSeriesFrame:

    def test_to_frame(self):
        window = HistoricalWindow(date(2023, 1, 1), date(2024, 6, 1), Interval.MONTHLY)
        bars = parse_history_bars({"history": {"day": [
            {"date": "2023-02-01", "open": 2.0, "high": 3.0, "low": 1.0, "close": 2.5, "volume": 10},
            {"date": "2023-01-01", "open": 1.0, "high": 2.0, "low": 0.5, "close": 1.5, "volume": 20},
        ]}})

        df = HistoricalSeries("AAPL", window, tuple(bars)).to_frame()

        assert isinstance(df.index, pd.DatetimeIndex)
        assert list(df["close"]) == [1.5, 2.5]
        assert (df["ticker"] == "AAPL").all()

    def test_empty_frame(self):
        window = HistoricalWindow(date(2023, 1, 1), date(2024, 6, 1), Interval.MONTHLY)
        df = HistoricalSeries("AAPL", window).to_frame()
        assert df.empty
        assert "close" in df.columns
        assert "ticker" in df.columns

    def test_empty_and_full_frames_share_columns(self):
        window = HistoricalWindow(date(2024, 6, 14), date(2024, 6, 14), Interval.DAILY)
        bars = parse_history_bars({"history": {"day": {"date": "2024-06-14", "open": 1.0}}})

        full = HistoricalSeries("AAPL", window, tuple(bars)).to_frame()
        empty = HistoricalSeries("AAPL", window).to_frame()

        assert list(empty.columns) == list(full.columns)


class TestParseDate:

    def test_truncates_timestamp(self):
        assert parse_date("2024-06-14T13:30:00Z") == date(2024, 6, 14)

    def test_invalid(self):
        with pytest.raises(DecodeError):
            parse_date("June 14")
