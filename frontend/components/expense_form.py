"""
expense_form.py - "Add New Expense" form

Client-side checks mirror the API rules (amount > 0, category, description
and date required). Each submission gets a fresh UUID so the retried POSTs of
that submission are idempotent on the server.
"""
from __future__ import annotations
import datetime
from typing import Any, Callable, Dict, Mapping
from uuid import uuid4

import streamlit as st

from services.api import EXPENSE_CATEGORIES


def validate_form(values: Mapping[str, Any]) -> Dict[str, str]:
    """Returns {field: message} for every invalid field; empty when valid."""
    errors: Dict[str, str] = {}
    amount = values.get("amount")
    if not amount or amount <= 0:
        errors["amount"] = "Amount must be greater than zero"
    if not values.get("category"):
        errors["category"] = "Category is required"
    if not str(values.get("description") or "").strip():
        errors["description"] = "Description is required"
    if not values.get("date"):
        errors["date"] = "Date is required"
    return errors


def build_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
    day = values["date"]
    return {
        "id": str(uuid4()),
        "amount": float(values["amount"]),
        "category": values["category"],
        "description": str(values["description"]).strip(),
        "date": day.isoformat() if isinstance(day, datetime.date) else str(day),
    }


def render_expense_form(on_submit: Callable[[Dict[str, Any]], None]) -> None:
    st.subheader("Add New Expense")
    with st.form("expense_form", clear_on_submit=True):
        amount = st.number_input("Amount (₹)", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox("Category", ["", *EXPENSE_CATEGORIES],
                                format_func=lambda c: c or "Select a category")
        description = st.text_input("Description", placeholder="Enter expense description")
        day = st.date_input("Date", value=datetime.date.today(), max_value=datetime.date.today())
        submitted = st.form_submit_button("Add Expense")

    if not submitted:
        return

    values = {"amount": amount, "category": category, "description": description, "date": day}
    errors = validate_form(values)
    if errors:
        for msg in errors.values():
            st.error(msg)
        return
    on_submit(build_payload(values))
