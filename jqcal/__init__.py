"""Minimal J-Quants API client for the trading calendar.

This package provides:
- The two-step token exchange (mail address/password -> refresh token -> ID token)
- A typed trading calendar query built on top of the ID token

Note: tokens are obtained once per client and never refreshed.
"""

from jqcal.client import JQuantsClient
from jqcal.exceptions import AuthError, JQuantsError, QueryError
from jqcal.trading_calendar import CalendarEntry, CalendarQueryParams, HolidayDivision

__all__ = [
    "JQuantsClient",
    "CalendarEntry",
    "CalendarQueryParams",
    "HolidayDivision",
    "JQuantsError",
    "AuthError",
    "QueryError",
]
