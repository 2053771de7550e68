# routers/expenses.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.dbutils import get_db
from core.errors import ValidationError
from core.expenses import (
    MSG_DATE, create_expense, find_all, find_by_id, get_stats, is_valid_date,
)
from schemas import SORT_OPTIONS, ExpenseIn, ExpenseOut, ExpenseStats

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])

# ---------- Endpoints ----------
@router.post("", status_code=201, response_model=ExpenseOut)
def post_expense(body: ExpenseIn, conn=Depends(get_db)):
    # same helper the manager validates with; checked first for the clearer message
    if body.date and not is_valid_date(body.date):
        raise HTTPException(400, MSG_DATE)
    try:
        return create_expense(conn, body.model_dump())
    except ValidationError as e:
        raise HTTPException(400, str(e))

@router.get("", response_model=List[ExpenseOut])
def list_expenses(
    category: Optional[str] = Query(None, description="Exact category match"),
    sort: Optional[str] = Query(None, description="date_desc | date_asc"),
    conn=Depends(get_db),
):
    """
    GET /api/expenses?category=Food&sort=date_desc
    Without sort the newest created expenses come first.
    """
    if sort and sort not in SORT_OPTIONS:
        raise HTTPException(400, "Invalid sort parameter. Use date_desc or date_asc")
    return find_all(conn, category=category or None, sort=sort or None)

# declared before /{id} so "stats" is not taken as an id
@router.get("/stats", response_model=ExpenseStats)
def expense_stats(category: Optional[str] = Query(None), conn=Depends(get_db)):
    return get_stats(conn, category=category or None)

@router.get("/{id}", response_model=ExpenseOut)
def get_expense(id: str, conn=Depends(get_db)):
    expense = find_by_id(conn, id)
    if not expense:
        raise HTTPException(404, "Expense not found")
    return expense
