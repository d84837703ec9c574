"""Thin request/response helpers shared by the auth and calendar calls.

The HTTP work itself is done by ``requests``; this module only maps its
outcomes onto the jqcal exception hierarchy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from jqcal.exceptions import (
    AuthDeserializationError,
    AuthHTTPStatusError,
    AuthTransportError,
    DeserializationError,
    HTTPStatusError,
    QueryDeserializationError,
    QueryHTTPStatusError,
    QueryTransportError,
    TransportError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorKinds:
    transport: type[TransportError]
    status: type[HTTPStatusError]
    decode: type[DeserializationError]


AUTH_ERRORS = ErrorKinds(AuthTransportError, AuthHTTPStatusError, AuthDeserializationError)
QUERY_ERRORS = ErrorKinds(QueryTransportError, QueryHTTPStatusError, QueryDeserializationError)


def request_json(
    http: Any,
    method: str,
    url: str,
    *,
    operation: str,
    errors: ErrorKinds,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body of a 200 response.

    ``http`` is a ``requests.Session`` or the ``requests`` module itself.
    Anything other than status 200 is an error; there are no retries.
    """
    logger.debug(f"{operation}: {method} {url}")
    try:
        res = http.request(method, url, **kwargs)
    except requests.RequestException as e:
        # The message of e can contain the query string (refreshtoken); keep it out.
        raise errors.transport(f"{operation} {method} {url} failed: {type(e).__name__}") from e

    if res.status_code != 200:
        raise errors.status(
            f"{operation} got non 200 HTTP status code {res.status_code}: {res.reason}",
            status_code=res.status_code,
            reason=res.reason or "",
        )

    try:
        return res.json()
    except ValueError as e:
        raise errors.decode(f"{operation} could not decode JSON response: {e}") from e
