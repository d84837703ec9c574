"""Exception hierarchy for the J-Quants calendar client.

Errors are classified on two axes: the operation that failed (``AuthError``
or ``QueryError``) and the kind of failure (serialization, transport, HTTP
status, deserialization). Concrete exceptions inherit from one class of each
axis, so callers can catch whichever is more convenient::

    try:
        client = JQuantsClient.login(mail, password)
    except HTTPStatusError as e:
        print(e.status_code)
"""

from __future__ import annotations


class JQuantsError(RuntimeError):
    """Base class for every error raised by jqcal."""


class ConfigError(JQuantsError):
    """Raised when required configuration is missing or invalid."""


class AuthError(JQuantsError):
    """Raised when the credential -> refresh token -> ID token exchange fails."""


class QueryError(JQuantsError):
    """Raised when a trading calendar query fails."""


class SerializationError(JQuantsError):
    """The request body could not be encoded."""


class TransportError(JQuantsError):
    """The API could not be reached."""


class HTTPStatusError(JQuantsError):
    """The API answered with a status other than 200."""

    def __init__(self, message: str, status_code: int, reason: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class DeserializationError(JQuantsError):
    """The response body or one of its fields could not be decoded."""

    def __init__(self, message: str, raw_value: object = None) -> None:
        super().__init__(message)
        self.raw_value = raw_value


class AuthSerializationError(AuthError, SerializationError):
    pass


class AuthTransportError(AuthError, TransportError):
    pass


class AuthHTTPStatusError(AuthError, HTTPStatusError):
    pass


class AuthDeserializationError(AuthError, DeserializationError):
    pass


class QueryTransportError(QueryError, TransportError):
    pass


class QueryHTTPStatusError(QueryError, HTTPStatusError):
    pass


class QueryDeserializationError(QueryError, DeserializationError):
    pass
