from __future__ import annotations

from unittest.mock import Mock

import pytest


def _make_response(status_code=200, payload=None, reason="OK"):
    """Build a Mock standing in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def clean_env(monkeypatch):
    """Clean environment fixture to isolate tests."""
    for key in ["JQ_MAIL_ADDRESS", "JQ_PASSWORD", "JQ_API_URL", "JQ_TIMEOUT"]:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def mock_session():
    """A session Mock whose ``request`` returns queued responses."""
    return Mock()


@pytest.fixture
def auth_responses():
    """Successful auth_user and auth_refresh responses, in call order."""
    return [
        _make_response(payload={"refreshToken": "mock_refresh_token"}),
        _make_response(payload={"idToken": "mock_id_token_12345"}),
    ]


@pytest.fixture
def sample_trading_calendar_data():
    """Sample trading calendar data matching J-Quants API structure."""
    return {
        "trading_calendar": [
            {"date": "2024-01-01", "holidaydivision": "0"},
            {"date": "2024-01-04", "holidaydivision": "1"},
            {"date": "2024-01-05", "holidaydivision": "1"},
            {"date": "2024-01-06", "holidaydivision": "0"},
            {"date": "2024-01-08", "holidaydivision": "3"},
        ]
    }


@pytest.fixture
def make_response():
    """Factory for Mock responses: ``make_response(status_code, payload, reason)``."""
    return _make_response
