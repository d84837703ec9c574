from __future__ import annotations

from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from jqcal.client import JQuantsClient
from jqcal.exceptions import AuthHTTPStatusError, ConfigError, QueryHTTPStatusError
from jqcal.trading_calendar import CalendarEntry, CalendarQueryParams, HolidayDivision


class TestJQuantsClient:
    def test_init_with_id_token(self):
        client = JQuantsClient(id_token="test_token")

        assert client.id_token == "test_token"
        assert client.api_url == "https://api.jquants.com/v1"
        assert client.timeout == 30.0
        assert isinstance(client.session, requests.Session)

    def test_init_with_custom_params(self):
        client = JQuantsClient(
            id_token="custom_token", api_url="https://custom.api.com/v1", timeout=60.0
        )

        assert client.api_url == "https://custom.api.com/v1"
        assert client.timeout == 60.0

    def test_repr_hides_token(self):
        client = JQuantsClient(id_token="secret_id_token")

        assert "secret_id_token" not in repr(client)

    def test_context_manager_closes_session(self):
        session = Mock()

        with JQuantsClient(id_token="t", session=session) as client:
            assert client.session is session

        session.close.assert_called_once()


class TestLogin:
    def test_login_authenticates_once(self, mock_session, auth_responses):
        mock_session.request.side_effect = auth_responses

        client = JQuantsClient.login("user@example.com", "secret", session=mock_session)

        assert client.id_token == "mock_id_token_12345"
        assert client.session is mock_session
        assert mock_session.request.call_count == 2
        assert not hasattr(client, "password")

    def test_login_failure_raises(self, mock_session, make_response):
        mock_session.request.return_value = make_response(status_code=401, reason="Unauthorized")

        with pytest.raises(AuthHTTPStatusError) as exc_info:
            JQuantsClient.login("user@example.com", "wrong", session=mock_session)

        assert exc_info.value.status_code == 401
        mock_session.request.assert_called_once()
        mock_session.close.assert_not_called()

    @patch("jqcal.client.requests.Session")
    def test_login_failure_closes_own_session(self, mock_session_cls, make_response):
        session = mock_session_cls.return_value
        session.request.return_value = make_response(status_code=500, reason="Server Error")

        with pytest.raises(AuthHTTPStatusError):
            JQuantsClient.login("user@example.com", "secret")

        session.close.assert_called_once()

    @patch("jqcal.client.authenticate")
    @patch("jqcal.client.load_credentials")
    def test_from_env(self, mock_load_credentials, mock_authenticate, clean_env, monkeypatch):
        monkeypatch.setenv("JQ_API_URL", "https://staging.example.com/v1/")
        monkeypatch.setenv("JQ_TIMEOUT", "5")
        mock_load_credentials.return_value = ("env@example.com", "env_password")
        mock_authenticate.return_value = "id_token_from_env"

        client = JQuantsClient.from_env(env_file="custom.env")

        assert client.id_token == "id_token_from_env"
        assert client.api_url == "https://staging.example.com/v1"
        assert client.timeout == 5.0
        mock_load_credentials.assert_called_once_with(env_file="custom.env")
        args, kwargs = mock_authenticate.call_args
        assert args == ("env@example.com", "env_password")
        assert kwargs["api_url"] == "https://staging.example.com/v1"

    def test_from_env_missing_credentials(self, clean_env, tmp_path):
        with pytest.raises(ConfigError, match="JQ_MAIL_ADDRESS, JQ_PASSWORD"):
            JQuantsClient.from_env(env_file=tmp_path / "missing.env")


class TestTradingCalendar:
    def test_reuses_stored_token(self, make_response):
        client = JQuantsClient(id_token="stored_token")
        response = make_response(
            payload={"trading_calendar": [{"date": "2024-01-04", "holidaydivision": "1"}]}
        )

        with patch.object(client.session, "request", return_value=response) as mock_request:
            first = client.trading_calendar()
            second = client.trading_calendar()

        assert first == second == [CalendarEntry(date(2024, 1, 4), HolidayDivision.BUSINESS_DAY)]
        assert mock_request.call_count == 2
        for call in mock_request.call_args_list:
            assert call.kwargs["headers"] == {"Authorization": "Bearer stored_token"}

    def test_keyword_filters(self, make_response):
        client = JQuantsClient(id_token="t", timeout=10.0)
        response = make_response(payload={"trading_calendar": []})

        with patch.object(client.session, "request", return_value=response) as mock_request:
            result = client.trading_calendar(
                holiday_division=0, from_date=date(2024, 1, 1), to_date=date(2024, 1, 7)
            )

        assert result == []
        mock_request.assert_called_once_with(
            "GET",
            "https://api.jquants.com/v1/markets/trading_calendar",
            params={"holidaydivision": "0", "from": "2024-01-01", "to": "2024-01-07"},
            headers={"Authorization": "Bearer t"},
            timeout=10.0,
        )

    def test_params_and_keywords_are_exclusive(self):
        client = JQuantsClient(id_token="t")

        with pytest.raises(ValueError, match="not both"):
            client.trading_calendar(CalendarQueryParams(), from_date=date(2024, 1, 1))

    def test_unknown_keyword_division_rejected(self):
        client = JQuantsClient(id_token="t")

        with pytest.raises(ValueError):
            client.trading_calendar(holiday_division=7)

    def test_http_error_propagates(self, make_response):
        client = JQuantsClient(id_token="expired")
        response = make_response(status_code=401, reason="Unauthorized")

        with (
            patch.object(client.session, "request", return_value=response),
            pytest.raises(QueryHTTPStatusError) as exc_info,
        ):
            client.trading_calendar()

        assert exc_info.value.status_code == 401
