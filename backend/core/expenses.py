# core/expenses.py
"""
Business rules for expenses: validation, cents <-> major-unit conversion,
idempotent create by id, filtered listing and per-category statistics.

Every function takes an open connection (see core.dbutils.get_db).
Amounts are stored as integer cents and exposed as major units.
"""
from __future__ import annotations
import logging, re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from core.dbutils import run_insert, run_query
from core.errors import DuplicateKeyError, StorageError, ValidationError

log = logging.getLogger("uvicorn.error")

MSG_AMOUNT   = "Amount must be greater than zero"
MSG_REQUIRED = "Category, description, and date are required"
MSG_DATE     = "Invalid date format. Use YYYY-MM-DD"

# fits a 32-bit INTEGER column on every engine
MAX_AMOUNT_CENTS = 2**31 - 1
MSG_AMOUNT_MAX   = f"Amount must not exceed {MAX_AMOUNT_CENTS / 100:.2f}"

_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

_ORDER_BY = {
    "date_desc": "date DESC, created_at DESC",
    "date_asc":  "date ASC, created_at ASC",
    None:        "created_at DESC",
}

# ----------------------------- Units / validation -----------------------------
def to_cents(major: Any) -> int:
    """12.5 -> 1250. Half-cents round away from zero."""
    value = Decimal(str(major)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def to_major(cents: int) -> float:
    return int(cents) / 100

def is_valid_date(value: Any) -> bool:
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True

def _amount_cents(amount: Any) -> int:
    """Amount in cents; 0 when missing, non-numeric or not finite, capped at MAX + 1."""
    if amount is None or isinstance(amount, bool):
        return 0
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return 0
    if not value.is_finite():
        return 0
    if value * 100 > MAX_AMOUNT_CENTS:
        return MAX_AMOUNT_CENTS + 1
    return to_cents(value)

def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()

def validate_expense(data: Mapping[str, Any]) -> None:
    cents = _amount_cents(data.get("amount"))
    if cents <= 0:
        raise ValidationError(MSG_AMOUNT)
    if cents > MAX_AMOUNT_CENTS:
        raise ValidationError(MSG_AMOUNT_MAX)
    if any(_blank(data.get(k)) for k in ("category", "description", "date")):
        raise ValidationError(MSG_REQUIRED)
    if not is_valid_date(data.get("date")):
        raise ValidationError(MSG_DATE)

def _format_expense(row: Mapping[str, Any]) -> Dict[str, Any]:
    created = row.get("created_at")
    return {
        "id": row["id"],
        "amount": to_major(row["amount"]),
        "category": row["category"],
        "description": row["description"],
        "date": row["date"],
        "created_at": created.isoformat() if isinstance(created, datetime) else created,
    }

def _where(category: Optional[str]):
    if category:
        return "WHERE category = %s", [category]
    return "", []

# ------------------------------- Operations -------------------------------------
def find_by_id(conn, expense_id: str) -> Optional[Dict[str, Any]]:
    rows = run_query(conn, "SELECT * FROM expenses WHERE id = %s;", (expense_id,))
    return _format_expense(rows[0]) if rows else None

def find_all(conn, category: Optional[str] = None, sort: Optional[str] = None) -> List[Dict[str, Any]]:
    if sort not in _ORDER_BY:
        raise ValidationError("Invalid sort parameter. Use date_desc or date_asc")
    where_sql, params = _where(category)
    rows = run_query(
        conn,
        f"SELECT * FROM expenses {where_sql} ORDER BY {_ORDER_BY[sort]};",
        params,
    )
    return [_format_expense(r) for r in rows]

def get_stats(conn, category: Optional[str] = None) -> Dict[str, Any]:
    where_sql, params = _where(category)
    rows = run_query(
        conn,
        f"SELECT category, amount FROM expenses {where_sql} ORDER BY created_at DESC;",
        params,
    )
    total_cents = 0
    by_category: Dict[str, int] = {}
    for r in rows:
        cents = int(r["amount"])
        total_cents += cents
        by_category[r["category"]] = by_category.get(r["category"], 0) + cents
    return {
        "total": to_major(total_cents),
        "count": len(rows),
        "categories": {k: to_major(v) for k, v in by_category.items()},
    }

def create_expense(conn, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Inserts an expense, at most once per id.

    If a row with the (client supplied or generated) id already exists it is
    returned untouched and the incoming fields are discarded. A concurrent
    insert that loses the race on the primary key gets the winner's row.
    """
    validate_expense(data)

    expense_id = data.get("id")
    if _blank(expense_id):
        expense_id = str(uuid4())

    existing = find_by_id(conn, expense_id)
    if existing:
        log.info("Expense %s already exists, returning stored row", expense_id)
        return existing

    params = (
        expense_id,
        to_cents(data["amount"]),
        str(data["category"]).strip(),
        str(data["description"]).strip(),
        data["date"],
        datetime.now(timezone.utc).isoformat(timespec="microseconds"),
    )
    try:
        run_insert(
            conn,
            """
            INSERT INTO expenses (id, amount, category, description, date, created_at)
            VALUES (%s, %s, %s, %s, %s, %s);
            """,
            params,
        )
    except DuplicateKeyError:
        existing = find_by_id(conn, expense_id)
        if existing:
            log.info("Expense %s created concurrently, returning stored row", expense_id)
            return existing
        raise

    created = find_by_id(conn, expense_id)
    if not created:
        raise StorageError("Failed to create expense")
    return created
