"""
Cold Calling Dashboard
Page through business records one at a time for outbound calling
"""

import sqlite3
import logging
from typing import Optional

import streamlit as st

from business_records import SAMPLE_CSV, ParseResult, load_csv_text, parse_businesses, preview_table
from card_view import CardView, present
from dashboard_state import DashboardState
from position_store import QueryParamStore, SqliteStore
from settings import load_settings, setup_logging

# -----------------------------------------------------------------------------
# Page config (must be first Streamlit command)
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title="Cold Calling Dashboard",
    page_icon="📞",
    layout="centered",
    initial_sidebar_state="expanded",
)

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)
logger = logging.getLogger("cold_call_dashboard")

ALL_INDUSTRIES = "All industries"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
@st.cache_data
def cached_parse(csv_text: str) -> ParseResult:
    return parse_businesses(csv_text)


def open_storage(db_path: str) -> Optional[SqliteStore]:
    try:
        return SqliteStore(db_path)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Position storage unavailable (%s): %s", db_path, e)
        return None


def ensure_session_keys():
    for k in ["data_source", "csv_text", "dashboard"]:
        st.session_state.setdefault(k, None)


def load_data(source: str) -> Optional[str]:
    """Load CSV text for ``source``; None when the configured source moved on meanwhile."""
    fallback = SAMPLE_CSV if SETTINGS.use_sample else ""
    with st.spinner("Loading businesses..."):
        text = load_csv_text(
            source,
            timeout=SETTINGS.fetch_timeout,
            is_current=lambda: load_settings().csv_source == source,
            fallback=fallback,
        )
    if text is not None:
        logger.info("Loaded %d characters of CSV from %s", len(text), source)
    return text


def get_dashboard() -> DashboardState:
    if st.session_state["dashboard"] is None:
        st.session_state["dashboard"] = DashboardState(
            storage=open_storage(SETTINGS.state_db),
            url_params=QueryParamStore(st.query_params),
        ).start()
    return st.session_state["dashboard"]


# -----------------------------------------------------------------------------
# Callbacks
# -----------------------------------------------------------------------------
def on_reload():
    st.session_state["csv_text"] = None


def on_industry_change():
    choice = st.session_state.get("industry_choice")
    get_dashboard().set_industry(None if choice == ALL_INDUSTRIES else choice)


def on_previous():
    get_dashboard().go_previous()


def on_next():
    get_dashboard().go_next()


def on_jump():
    get_dashboard().jump_to(st.session_state.get("jump_input", ""))


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------
def render_sidebar(dashboard: DashboardState, result: ParseResult):
    with st.sidebar:
        st.title("📞 Cold Calling")
        st.caption(f"Source: `{SETTINGS.csv_source}`")

        st.header("Filters")
        options = [ALL_INDUSTRIES] + dashboard.industries
        if dashboard.industry and dashboard.industry not in options:
            options.append(dashboard.industry)
        desired = dashboard.industry or ALL_INDUSTRIES
        if st.session_state.get("industry_choice") != desired:
            st.session_state["industry_choice"] = desired
        st.selectbox(
            "Industry",
            options,
            key="industry_choice",
            on_change=on_industry_change,
            help="Only show businesses in this industry",
        )

        st.divider()
        col_a, col_b = st.columns(2)
        with col_a:
            st.metric("Loaded", result.total)
        with col_b:
            st.metric("In view", dashboard.total)

        st.button("Reload data", key="reload_btn", on_click=on_reload, use_container_width=True)


def render_card(card: CardView):
    st.caption("COLD CALLING DASHBOARD")
    st.title(card.title)
    st.markdown(card.position_label)

    if card.advisory:
        st.warning(card.advisory)

    if not card.has_record:
        st.info(card.empty_message)
        return

    for label, value in card.rows:
        st.markdown(f"**{label}**  \n{value}")
    if card.website:
        st.markdown(f"**Website**  \n[{card.website}]({card.website})")
    else:
        st.markdown("**Website**  \n—")


def render_navigation(card: CardView):
    col_prev, col_next = st.columns(2)
    with col_prev:
        st.button("Previous", key="prev_btn", on_click=on_previous, disabled=not card.can_go_previous,
                  use_container_width=True)
    with col_next:
        st.button("Next", key="next_btn", on_click=on_next, disabled=not card.can_go_next,
                  type="primary", use_container_width=True)

    if card.total:
        with st.form("jump_form", clear_on_submit=True):
            col_in, col_go = st.columns([3, 1])
            with col_in:
                st.text_input(
                    "Go to business",
                    placeholder=f"1-{card.total}",
                    key="jump_input",
                    label_visibility="collapsed",
                )
            with col_go:
                st.form_submit_button("Go", on_click=on_jump, use_container_width=True)


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------
ensure_session_keys()

# A widget interaction during a slow load stops this run before the text is stored
if st.session_state["csv_text"] is None or st.session_state["data_source"] != SETTINGS.csv_source:
    text = load_data(SETTINGS.csv_source)
    if text is not None:
        st.session_state["data_source"] = SETTINGS.csv_source
        st.session_state["csv_text"] = text

result = cached_parse(st.session_state["csv_text"] or "")
dashboard = get_dashboard()
dashboard.attach(result.records)

card = present(dashboard.active, dashboard.index, result.errors)

render_sidebar(dashboard, result)
render_card(card)
st.divider()
render_navigation(card)

if dashboard.total:
    with st.expander("📋 All businesses in view", expanded=False):
        table, note = preview_table(dashboard.active)
        st.dataframe(table, use_container_width=True, hide_index=True)
        if note:
            st.caption(note)
