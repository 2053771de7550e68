from __future__ import annotations
from typing import Dict, Optional

import streamlit as st

from services.api import EXPENSE_CATEGORIES

ALL_CATEGORIES = "All Categories"


def apply_filter_change(category: str, newest_first: bool) -> Dict[str, str]:
    """Builds the filters dict the list endpoint expects, dropping unset keys."""
    out: Dict[str, str] = {}
    if category and category != ALL_CATEGORIES:
        out["category"] = category
    if newest_first:
        out["sort"] = "date_desc"
    return out


def render_filter_controls(filters: Dict[str, Optional[str]]) -> Dict[str, str]:
    options = [ALL_CATEGORIES, *EXPENSE_CATEGORIES]
    current = filters.get("category") or ALL_CATEGORIES
    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        category = st.selectbox("Filter by Category", options,
                                index=options.index(current) if current in options else 0)
    with col2:
        newest_first = st.toggle("Newest first", value=filters.get("sort") == "date_desc")
    with col3:
        if (filters.get("category") or filters.get("sort")) and st.button("Clear Filters"):
            return {}
    return apply_filter_change(category, newest_first)
