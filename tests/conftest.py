"""Shared test fixtures."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from tradier_data.config import TradierConfig
from tradier_data.data.tradier_client import TradierClient


def _calendar_record(begin, event="Q2 2024 Quarter Earnings Result", status="Confirmed", **extra):
    record = {
        "company_id": "0C00000ADA",
        "begin_date_time": begin,
        "end_date_time": begin,
        "event_type": 14,
        "estimated_date_for_next_event": "1970-01-01",
        "event": event,
        "event_fiscal_year": 2024,
        "event_status": status,
        "time_zone": "EST",
    }
    record.update(extra)
    return record


@pytest.fixture
def calendar_record():
    """Factory for raw corporate calendar records."""
    return _calendar_record


@pytest.fixture
def calendar_payload():
    """Calendars endpoint body: one envelope, a null table and mixed records."""
    return [
        {
            "request": "AAPL",
            "type": "Symbol",
            "results": [
                {
                    "type": "Company",
                    "id": "0C00000ADA",
                    "tables": {
                        "corporate_calendars": [
                            _calendar_record("2024-08-01"),
                            _calendar_record("2024-02-01"),
                            _calendar_record("2024-05-01", status="Pending"),
                            _calendar_record("2024-03-15", event="Annual General Meeting"),
                            None,
                            _calendar_record("2024-05-02"),
                        ]
                    },
                },
                {
                    "type": "Stock",
                    "id": "0P000000GY",
                    "tables": {"corporate_calendars": None},
                },
            ],
        }
    ]


def make_response(payload, status_code=200):
    """Mock requests.Response returning ``payload`` as JSON."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = json.dumps(payload)
    return resp


@pytest.fixture
def session():
    """Real requests session with ``get`` stubbed out (no network)."""
    s = requests.Session()
    s.get = MagicMock()
    return s


@pytest.fixture
def respond(session):
    """Set the payload (and status) the stubbed session returns."""
    def _respond(payload, status_code=200):
        session.get.return_value = make_response(payload, status_code)
        return session.get
    return _respond


@pytest.fixture
def config():
    return TradierConfig(token="test_token", base_uri="https://sandbox.tradier.com/")


@pytest.fixture
def client(config, session):
    return TradierClient(config, session=session)
