"""
Streamlit front end for the expense API.

Run with:  streamlit run frontend/streamlit_app.py
The API location comes from EXPENSES_API_URL (default http://localhost:5000/api).
"""
import logging

import streamlit as st

from components.expense_form import render_expense_form
from components.expense_list import render_expense_list
from components.filter_controls import render_filter_controls
from components.total_display import render_total_display
from services.api import ApiError, create_expense, get_expenses

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def _handle_add_expense(payload):
    try:
        create_expense(payload)
        st.session_state["flash"] = "Expense added."
    except ApiError as e:
        st.session_state["error"] = e.message or "Failed to add expense"
    st.rerun()


def main():
    st.set_page_config(page_title="Personal Expense Tracker", page_icon="💰", layout="wide")
    st.title("Personal Expense Tracker")
    st.caption("Track and manage your expenses efficiently")

    st.session_state.setdefault("filters", {})

    error = st.session_state.pop("error", None)
    if error:
        st.error(f"Error: {error}")
    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    left, right = st.columns([1, 2])

    with right:
        filters = render_filter_controls(st.session_state["filters"])
        if filters != st.session_state["filters"]:
            st.session_state["filters"] = filters
            st.rerun()

        expenses = []
        try:
            with st.spinner("Loading expenses..."):
                expenses = get_expenses(**filters)
        except ApiError as e:
            st.error(f"Error: {e.message or 'Failed to load expenses'}")
        render_expense_list(expenses)

    with left:
        render_expense_form(_handle_add_expense)
        render_total_display(expenses)


if __name__ == "__main__":
    main()
