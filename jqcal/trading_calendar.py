"""Trading calendar query (/markets/trading_calendar).

The endpoint returns one row per calendar date with a holiday division code:

    0  non-trading day
    1  trading day
    2  half trading day (TSE morning session only)
    3  non-trading day with holiday trading
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Any

import pandas as pd
import requests

from jqcal.auth import build_auth_headers
from jqcal.config import API_URL, DEFAULT_TIMEOUT
from jqcal.exceptions import QueryDeserializationError
from jqcal.transport import QUERY_ERRORS, request_json

logger = logging.getLogger(__name__)

TRADING_CALENDAR_PATH = "/markets/trading_calendar"
DATA_KEY = "trading_calendar"
DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)


class HolidayDivision(IntEnum):
    HOLIDAY = 0
    BUSINESS_DAY = 1
    HALF_DAY = 2
    TRADING_HOLIDAY = 3


@dataclass(frozen=True)
class CalendarQueryParams:
    """Optional filters for a trading calendar query.

    ``from_date`` and ``to_date`` only take effect together; when just one of
    them is set the range is dropped entirely.
    """

    holiday_division: HolidayDivision | None = None
    from_date: date | None = None
    to_date: date | None = None


@dataclass(frozen=True)
class CalendarEntry:
    date: date
    # Codes outside HolidayDivision are passed through as plain ints.
    holiday_division: HolidayDivision | int


def build_query_params(params: CalendarQueryParams | None = None) -> dict[str, str]:
    query: dict[str, str] = {}
    if params is None:
        return query
    if params.holiday_division is not None:
        query["holidaydivision"] = str(int(params.holiday_division))
    if params.from_date is not None and params.to_date is not None:
        query["from"] = params.from_date.strftime(DATE_FORMAT)
        query["to"] = params.to_date.strftime(DATE_FORMAT)
    elif params.from_date is not None or params.to_date is not None:
        logger.warning("Both from_date and to_date are required for a range; ignoring the range")
    return query


def _parse_date(raw: Any) -> date:
    if not isinstance(raw, str) or not _DATE_RE.fullmatch(raw):
        raise QueryDeserializationError(
            f"TradingCalendar could not parse date {raw!r}: expected YYYY-MM-DD", raw_value=raw
        )
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError as e:
        raise QueryDeserializationError(
            f"TradingCalendar could not parse date {raw!r}: {e}", raw_value=raw
        ) from e


def _parse_division(raw: Any) -> HolidayDivision | int:
    # The API sends the code as a string holding a decimal integer.
    if not isinstance(raw, str) or not _INT_RE.fullmatch(raw):
        raise QueryDeserializationError(
            f"TradingCalendar could not parse holidaydivision {raw!r}", raw_value=raw
        )
    code = int(raw)
    try:
        return HolidayDivision(code)
    except ValueError:
        logger.debug(f"Unknown holidaydivision code {code}, passing through")
        return code


def parse_trading_calendar(payload: Any) -> list[CalendarEntry]:
    """Convert a trading calendar response body into entries.

    Parsing is all-or-nothing: the first malformed element raises
    QueryDeserializationError and nothing parsed so far is returned.
    """
    if not isinstance(payload, dict):
        raise QueryDeserializationError(
            f"TradingCalendar expected a JSON object, got {type(payload).__name__}",
            raw_value=payload,
        )
    rows = payload.get(DATA_KEY)
    if not isinstance(rows, list):
        raise QueryDeserializationError(
            f"TradingCalendar response has no {DATA_KEY} array", raw_value=rows
        )

    entries: list[CalendarEntry] = []
    for row in rows:
        if not isinstance(row, dict):
            raise QueryDeserializationError(
                f"TradingCalendar expected an object per entry, got {row!r}", raw_value=row
            )
        entries.append(
            CalendarEntry(
                date=_parse_date(row.get("date")),
                holiday_division=_parse_division(row.get("holidaydivision")),
            )
        )
    return entries


def fetch_trading_calendar(
    id_token: str,
    params: CalendarQueryParams | None = None,
    *,
    session: requests.Session | None = None,
    api_url: str = API_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[CalendarEntry]:
    query = build_query_params(params)
    payload = request_json(
        session or requests,
        "GET",
        f"{api_url}{TRADING_CALENDAR_PATH}",
        operation="TradingCalendar",
        errors=QUERY_ERRORS,
        params=query,
        headers=build_auth_headers(id_token),
        timeout=timeout,
    )
    entries = parse_trading_calendar(payload)
    logger.info(f"Fetched {len(entries)} trading calendar entries (query={query})")
    return entries


def to_frame(entries: Iterable[CalendarEntry]) -> pd.DataFrame:
    """Tabulate entries as a DataFrame with ``date`` and ``holiday_division`` columns."""
    rows = [{"date": e.date, "holiday_division": int(e.holiday_division)} for e in entries]
    return pd.DataFrame(rows, columns=["date", "holiday_division"])
