"""
Corporate Calendar Earnings Extraction
======================================

Turns the deeply nested response of the fundamentals calendars endpoint
into a flat, time-ordered list of confirmed quarterly earnings releases.

Response shape (one envelope per queried symbol):

    [
      {
        "request": "AAPL",
        "type": "Symbol",
        "results": [
          {"type": "Company", "id": "...",
           "tables": {"corporate_calendars": [ {...}, {...} ] | null}},
          ...
        ]
      }
    ]

Pipeline:
1. Flatten ``tables.corporate_calendars`` of every result
   (null tables contribute nothing)
2. Drop null records
3. Keep ``event_status == "Confirmed"``
4. Keep records matching the earnings predicate
5. Stable sort by ``begin_date_time`` (ISO strings sort lexically)
6. Project to CorporateCalendarEvent (records without a description are skipped)

The default predicate matches on the event description, not the numeric
``event_type`` code.
"""

import logging
from typing import Any, Callable, Iterable, Iterator, List

import pandas as pd

from .errors import DecodeError
from .models import CorporateCalendarEvent, RawCalendarRecord, RawCalendarResponse

logger = logging.getLogger(__name__)

CONFIRMED_STATUS = "Confirmed"
EARNINGS_EVENT_MARKER = "Quarter Earnings Result"

EventPredicate = Callable[[RawCalendarRecord], bool]


def is_quarterly_earnings(record: RawCalendarRecord) -> bool:
    """True if the record describes a quarterly earnings release."""
    return EARNINGS_EVENT_MARKER in (record.event or "")


def is_confirmed(record: RawCalendarRecord) -> bool:
    return record.event_status == CONFIRMED_STATUS


def select_envelope(payload: Any) -> RawCalendarResponse:
    """
    Decode the top-level calendars array into its single envelope.

    The endpoint is queried one symbol at a time, so exactly one envelope
    is expected. An empty array or several envelopes are treated as a
    malformed response rather than guessed at.

    Raises:
        DecodeError: payload is not a list of exactly one envelope
    """
    if not isinstance(payload, list):
        raise DecodeError(
            f"Expected list of calendar envelopes, got {type(payload).__name__}"
        )
    if not payload:
        raise DecodeError("Calendar response contained no envelopes")
    if len(payload) > 1:
        raise DecodeError(
            f"Calendar response contained {len(payload)} envelopes; expected 1"
        )
    return RawCalendarResponse.from_dict(payload[0])


def iter_calendar_records(response: RawCalendarResponse) -> Iterator[RawCalendarRecord]:
    """Yield every non-null calendar record across all results."""
    for result in response.results:
        if result.corporate_calendars is None:
            continue
        for record in result.corporate_calendars:
            if record is not None:
                yield record


def extract_earnings_events(
    response: RawCalendarResponse,
    predicate: EventPredicate = is_quarterly_earnings,
) -> List[CorporateCalendarEvent]:
    """
    Extract confirmed earnings events sorted by start time.

    Args:
        response: Decoded calendars envelope
        predicate: Event classification rule (defaults to the description match)

    Returns:
        Events ordered by begin_date_time; empty if nothing qualifies
    """
    records = [
        r for r in iter_calendar_records(response)
        if is_confirmed(r) and predicate(r) and r.event is not None
    ]
    records.sort(key=lambda r: r.begin_date_time or "")

    events = [
        CorporateCalendarEvent(
            begin_date_time=r.begin_date_time,
            event_type=r.event_type,
            event_description=r.event,
        )
        for r in records
    ]
    logger.debug(f"Extracted {len(events)} earnings events for {response.request}")
    return events


def events_to_frame(events: Iterable[CorporateCalendarEvent]) -> pd.DataFrame:
    """Events as a DataFrame with the three projected columns."""
    columns = ["begin_date_time", "event_type", "event_description"]
    return pd.DataFrame([e.to_dict() for e in events], columns=columns)
