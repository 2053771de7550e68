# services/api.py
"""
HTTP client for the expense API.

Only ``create_expense`` retries: a 4xx answer is final, while network
failures and 5xx answers are retried MAX_RETRIES times, RETRY_DELAY seconds
apart. Every failure is raised as ``ApiError`` with a message fit for the UI.
"""
from __future__ import annotations
import logging, os
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_fixed

log = logging.getLogger(__name__)

API_BASE_URL = os.getenv("EXPENSES_API_URL", "http://localhost:5000/api").rstrip("/")
TIMEOUT = 10  # seconds
MAX_RETRIES = 3
RETRY_DELAY = 1.0  # seconds

NETWORK_ERROR_MSG = "Network error. Please check your connection."
UNEXPECTED_ERROR_MSG = "An unexpected error occurred."

EXPENSE_CATEGORIES = (
    "Food",
    "Transport",
    "Entertainment",
    "Shopping",
    "Bills",
    "Healthcare",
    "Education",
    "Travel",
    "Other",
)

_session = requests.Session()
_session.headers.update({"Content-Type": "application/json"})


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# ------------------------------ helpers ------------------------------
def _request(method: str, path: str, **kwargs) -> Any:
    resp = _session.request(method, f"{API_BASE_URL}{path}", timeout=TIMEOUT, **kwargs)
    resp.raise_for_status()
    return resp.json()

def _is_transient(exc: BaseException) -> bool:
    response = getattr(exc, "response", None)
    if isinstance(exc, requests.HTTPError) and response is not None:
        return response.status_code >= 500
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))

def _to_api_error(exc: Exception) -> ApiError:
    response = getattr(exc, "response", None)
    if response is None:
        if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
            return ApiError(NETWORK_ERROR_MSG)
        return ApiError(UNEXPECTED_ERROR_MSG)
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return ApiError(str(body["error"]), response.status_code)
    return ApiError(UNEXPECTED_ERROR_MSG, response.status_code)

def _call(method: str, path: str, **kwargs) -> Any:
    try:
        return _request(method, path, **kwargs)
    except (requests.RequestException, ValueError) as e:
        raise _to_api_error(e) from e

def _params(**filters) -> Dict[str, str]:
    return {k: v for k, v in filters.items() if v}

# ------------------------------ endpoints ------------------------------
def create_expense(payload: Dict[str, Any], retries: int = MAX_RETRIES) -> Dict[str, Any]:
    """POST /expenses. Send an ``id`` in the payload so retries cannot duplicate."""
    retrying = Retrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_fixed(RETRY_DELAY),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    try:
        return retrying(_request, "POST", "/expenses", json=payload)
    except (requests.RequestException, ValueError) as e:
        raise _to_api_error(e) from e

def get_expenses(category: Optional[str] = None, sort: Optional[str] = None) -> List[Dict[str, Any]]:
    return _call("GET", "/expenses", params=_params(category=category, sort=sort))

def get_expense_by_id(expense_id: str) -> Dict[str, Any]:
    return _call("GET", f"/expenses/{quote(expense_id, safe='')}")

def get_expense_stats(category: Optional[str] = None) -> Dict[str, Any]:
    return _call("GET", "/expenses/stats", params=_params(category=category))

# ------------------------------ formatting ------------------------------
def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{abs(amount):,.2f}"

def format_date(value: str) -> str:
    return datetime.strptime(value, "%Y-%m-%d").strftime("%d %b %Y")

def get_today_date() -> str:
    return date.today().isoformat()
