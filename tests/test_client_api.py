"""
Tests for the front end's HTTP client (services.api).

The requests session is replaced with a mock; no server is started.
"""

import json
from unittest import mock

import pytest
import requests

import schemas
from services import api
from services.api import ApiError


def _response(status, body=None, text=""):
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(body).encode() if body is not None else text.encode()
    resp.url = "http://testserver/api/expenses"
    return resp


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(api, "RETRY_DELAY", 0)


@pytest.fixture
def session(monkeypatch):
    fake = mock.Mock(name="session")
    monkeypatch.setattr(api, "_session", fake)
    return fake


PAYLOAD = {"id": "k1", "amount": 12.5, "category": "Food", "description": "Lunch", "date": "2024-03-15"}
CREATED = {**PAYLOAD, "created_at": "2024-03-15T10:00:00.000000+00:00"}


class TestCreateExpense:
    def test_success(self, session):
        session.request.return_value = _response(201, CREATED)

        assert api.create_expense(PAYLOAD) == CREATED
        session.request.assert_called_once_with(
            "POST", f"{api.API_BASE_URL}/expenses", timeout=api.TIMEOUT, json=PAYLOAD
        )

    def test_client_error_is_not_retried(self, session):
        session.request.return_value = _response(400, {"error": "Amount must be greater than zero"})

        with pytest.raises(ApiError) as info:
            api.create_expense(PAYLOAD)

        assert str(info.value) == "Amount must be greater than zero"
        assert info.value.status_code == 400
        assert session.request.call_count == 1

    def test_server_error_retried_three_times(self, session):
        session.request.return_value = _response(500, {"error": "boom"})

        with pytest.raises(ApiError, match="boom"):
            api.create_expense(PAYLOAD)

        assert session.request.call_count == api.MAX_RETRIES + 1

    def test_recovers_after_transient_failure(self, session):
        session.request.side_effect = [
            _response(503, {"error": "unavailable"}),
            requests.Timeout("read timed out"),
            _response(201, CREATED),
        ]

        assert api.create_expense(PAYLOAD) == CREATED
        assert session.request.call_count == 3
        # same idempotency key on every attempt
        assert all(c.kwargs["json"]["id"] == "k1" for c in session.request.call_args_list)

    def test_network_error_after_retries(self, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError) as info:
            api.create_expense(PAYLOAD)

        assert info.value.message == api.NETWORK_ERROR_MSG
        assert info.value.status_code is None
        assert session.request.call_count == 4

    def test_retries_can_be_disabled(self, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError):
            api.create_expense(PAYLOAD, retries=0)

        assert session.request.call_count == 1

    def test_unstructured_error_body(self, session):
        session.request.return_value = _response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(ApiError) as info:
            api.create_expense(PAYLOAD)

        assert info.value.message == api.UNEXPECTED_ERROR_MSG
        assert info.value.status_code == 502


class TestReads:
    def test_get_expenses_passes_only_set_filters(self, session):
        session.request.return_value = _response(200, [CREATED])

        assert api.get_expenses(category="Food") == [CREATED]
        assert session.request.call_args.kwargs["params"] == {"category": "Food"}

    def test_get_expenses_not_retried(self, session):
        session.request.return_value = _response(500, {"error": "boom"})

        with pytest.raises(ApiError, match="boom"):
            api.get_expenses(sort="date_desc")
        assert session.request.call_count == 1

    def test_get_expense_by_id_not_found(self, session):
        session.request.return_value = _response(404, {"error": "Expense not found"})

        with pytest.raises(ApiError) as info:
            api.get_expense_by_id("nope")

        assert info.value.message == "Expense not found"
        assert info.value.status_code == 404
        assert session.request.call_args.args[1].endswith("/expenses/nope")

    def test_get_stats_network_error(self, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError) as info:
            api.get_expense_stats()

        assert info.value.message == api.NETWORK_ERROR_MSG
        assert session.request.call_count == 1


class TestFormatting:
    def test_format_currency(self):
        assert api.format_currency(1234.5) == "₹1,234.50"
        assert api.format_currency(0) == "₹0.00"

    def test_format_date(self):
        assert api.format_date("2024-01-05") == "05 Jan 2024"

    def test_today(self):
        assert len(api.get_today_date()) == 10

    def test_categories_match_backend(self):
        assert api.EXPENSE_CATEGORIES == schemas.EXPENSE_CATEGORIES
        assert len(api.EXPENSE_CATEGORIES) == 9
