from __future__ import annotations
from typing import Any, Dict, List, Tuple

import streamlit as st

from services.api import format_currency


def summarize(expenses: List[Dict[str, Any]]) -> Tuple[float, int]:
    # sum in cents so 0.1 + 0.2 shows as 0.30
    cents = sum(round(e["amount"] * 100) for e in expenses)
    return cents / 100, len(expenses)


def render_total_display(expenses: List[Dict[str, Any]]) -> None:
    total, count = summarize(expenses)
    label = "expense" if count == 1 else "expenses"
    st.metric("Total Expenses", format_currency(total))
    st.caption(f"{count} {label}")
