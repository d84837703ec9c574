from __future__ import annotations

import json
import logging
from typing import Any

import requests

from jqcal.config import API_URL, DEFAULT_TIMEOUT
from jqcal.exceptions import AuthDeserializationError, AuthSerializationError
from jqcal.transport import AUTH_ERRORS, request_json

logger = logging.getLogger(__name__)


def _require_token(payload: Any, key: str, operation: str) -> str:
    if not isinstance(payload, dict):
        raise AuthDeserializationError(
            f"{operation} expected a JSON object, got {type(payload).__name__}",
            raw_value=payload,
        )
    token = payload.get(key)
    if not token or not isinstance(token, str):
        raise AuthDeserializationError(f"{operation} succeeded but {key} missing in response")
    return token


def get_refresh_token(
    mail_address: str,
    password: str,
    *,
    session: requests.Session | None = None,
    api_url: str = API_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Exchange a mail address and password for a refresh token.

    POSTs ``{"mailaddress": ..., "password": ...}`` to /token/auth_user and
    extracts ``refreshToken`` from the JSON response.
    """
    operation = "getRefreshToken"
    try:
        body = json.dumps({"mailaddress": mail_address, "password": password})
    except (TypeError, ValueError) as e:
        raise AuthSerializationError(f"{operation} could not encode request body: {e}") from e

    payload = request_json(
        session or requests,
        "POST",
        f"{api_url}/token/auth_user",
        operation=operation,
        errors=AUTH_ERRORS,
        data=body,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    return _require_token(payload, "refreshToken", operation)


def get_id_token(
    refresh_token: str,
    *,
    session: requests.Session | None = None,
    api_url: str = API_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Exchange a refresh token for an idToken suitable for API calls.

    POSTs to /token/auth_refresh with the token as the ``refreshtoken`` query
    parameter and an empty body, then extracts ``idToken``.
    """
    operation = "getIDToken"
    payload = request_json(
        session or requests,
        "POST",
        f"{api_url}/token/auth_refresh",
        operation=operation,
        errors=AUTH_ERRORS,
        params={"refreshtoken": refresh_token},
        timeout=timeout,
    )
    return _require_token(payload, "idToken", operation)


def authenticate(
    mail_address: str,
    password: str,
    *,
    session: requests.Session | None = None,
    api_url: str = API_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Run the two-step token exchange and return the ID token.

    A failure while obtaining the refresh token raises before the second
    request is made.
    """
    refresh_token = get_refresh_token(
        mail_address, password, session=session, api_url=api_url, timeout=timeout
    )
    id_token = get_id_token(refresh_token, session=session, api_url=api_url, timeout=timeout)
    logger.info("Authenticated against J-Quants API")
    return id_token


def build_auth_headers(id_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {id_token}"}
