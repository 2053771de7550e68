from __future__ import annotations
from typing import Any, Dict, List

import streamlit as st

from services.api import format_currency, format_date


def to_rows(expenses: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    return [
        {
            "Date": format_date(e["date"]),
            "Category": e["category"],
            "Description": e["description"],
            "Amount": format_currency(e["amount"]),
        }
        for e in expenses
    ]


def render_expense_list(expenses: List[Dict[str, Any]]) -> None:
    if not expenses:
        st.info("No expenses found. Add your first expense to get started!")
        return
    st.dataframe(to_rows(expenses), use_container_width=True, hide_index=True)
