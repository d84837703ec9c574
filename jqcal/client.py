from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import requests

from jqcal.auth import authenticate
from jqcal.config import API_URL, DEFAULT_TIMEOUT, Settings, load_credentials
from jqcal.trading_calendar import (
    CalendarEntry,
    CalendarQueryParams,
    HolidayDivision,
    fetch_trading_calendar,
)

logger = logging.getLogger(__name__)


@dataclass
class JQuantsClient:
    """Authenticated J-Quants client.

    The ID token is obtained once (see :meth:`login`) and reused for every
    call for the lifetime of the instance. It is never refreshed.
    """

    id_token: str = field(repr=False)
    api_url: str = API_URL
    timeout: float = DEFAULT_TIMEOUT
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    @classmethod
    def login(
        cls,
        mail_address: str,
        password: str,
        *,
        api_url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> JQuantsClient:
        """Authenticate with mail address and password and return a ready client.

        Raises AuthError (or one of its subclasses) when either token exchange
        fails; the credentials are not kept.
        """
        sess = session or requests.Session()
        try:
            id_token = authenticate(
                mail_address, password, session=sess, api_url=api_url, timeout=timeout
            )
        except Exception:
            if session is None:
                sess.close()
            raise
        return cls(id_token=id_token, api_url=api_url, timeout=timeout, session=sess)

    @classmethod
    def from_env(cls, env_file: str | Path = ".env") -> JQuantsClient:
        mail_address, password = load_credentials(env_file=env_file)
        settings = Settings.from_env()
        return cls.login(mail_address, password, api_url=settings.api_url, timeout=settings.timeout)

    def trading_calendar(
        self,
        params: CalendarQueryParams | None = None,
        *,
        holiday_division: HolidayDivision | int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[CalendarEntry]:
        """Fetch the trading calendar.

        Filters may be given either as a CalendarQueryParams or as keyword
        arguments, not both.
        """
        if params is None:
            division = HolidayDivision(holiday_division) if holiday_division is not None else None
            params = CalendarQueryParams(
                holiday_division=division, from_date=from_date, to_date=to_date
            )
        elif holiday_division is not None or from_date is not None or to_date is not None:
            raise ValueError("Pass filters either as params or as keyword arguments, not both")

        return fetch_trading_calendar(
            self.id_token,
            params,
            session=self.session,
            api_url=self.api_url,
            timeout=self.timeout,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> JQuantsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
