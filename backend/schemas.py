from typing import Dict, Optional

from pydantic import BaseModel

# Suggested labels for the UI selector; the API accepts any non-empty category.
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

SORT_OPTIONS = ("date_desc", "date_asc")

# -------- Expenses --------
class ExpenseIn(BaseModel):
    # all optional so that missing fields reach the business rules (400, not 422)
    id: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None

class ExpenseOut(BaseModel):
    id: str
    amount: float
    category: str
    description: str
    date: str
    created_at: Optional[str] = None

class ExpenseStats(BaseModel):
    total: float
    count: int
    categories: Dict[str, float]
