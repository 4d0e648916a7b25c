import anomaly_dashboard.bootstrap_env  # must be first to set env/secrets
import streamlit as st

from anomaly_dashboard.config import TABS
from anomaly_dashboard.data.filters import serialize_filters
from anomaly_dashboard.data.loader import clear_cache, load_records
from anomaly_dashboard.state import LoadStatus, ViewState
from anomaly_dashboard.ui.components.formatting import format_number
from anomaly_dashboard.ui.layout import setup_page, sidebar_filters_ui
from anomaly_dashboard.ui.pages import about, data_quality, records, statistics
from anomaly_dashboard.ui.pages.context import PageContext

STATE_KEY = "anomaly_view_state"

PAGE_RENDERERS = {
    "records": records.render,
    "statistics": statistics.render,
    "data_quality": data_quality.render,
    "about": about.render,
}


def _view_state() -> ViewState:
    state = st.session_state.get(STATE_KEY)
    if state is None:
        state = ViewState()
        st.session_state[STATE_KEY] = state
    return state


def _active_filter_summary(state: ViewState) -> None:
    filters = serialize_filters(state.filters)
    badges = []
    if filters["search_text"]:
        badges.append(f"Search: \"{filters['search_text']}\"")
    if filters["category"]:
        badges.append(f"Category: {filters['category']}")
    start, end = filters["date_range"]
    if start or end:
        badges.append(f"{filters['date_field'].replace('_', ' ').title()}: {start or '…'} – {end or '…'}")

    summary_text = "Active Filters: " + " | ".join(badges) if badges else "Active Filters: All data"
    st.markdown(f"**{summary_text}**")
    st.caption(f"Showing {format_number(len(state.filtered), 0)} anomalies after filters.")


def main() -> None:
    setup_page()
    st.title("GlitchWatch: Anomalies Dashboard")

    state = _view_state()

    refresh = st.sidebar.button("🔄 Refresh Data")
    if refresh:
        clear_cache()
    if refresh or state.status is LoadStatus.LOADING:
        with st.spinner("Loading anomalies..."):
            state.load(load_records)

    if state.status is LoadStatus.ERROR:
        st.error(state.error)
        if st.button("Retry", key="anomaly_retry"):
            clear_cache()
            state.begin_load()
            st.rerun()
        if not state.has_loaded:
            return

    filters = sidebar_filters_ui(state.records)
    state.set_filters(filters)
    st.session_state["anomaly_active_filters"] = serialize_filters(filters)

    prev_count = st.session_state.get("anomaly_prev_filtered_count")
    current_count = len(state.filtered)
    if prev_count is not None and prev_count != current_count:
        st.toast(f"Filters applied to {current_count:,} anomalies", icon="🔎")
    st.session_state["anomaly_prev_filtered_count"] = current_count

    if state.records.empty:
        st.warning("No anomalies found. Check that the spreadsheet is shared with the service account.")

    _active_filter_summary(state)

    context = PageContext(state=state)
    streamlit_tabs = st.tabs([tab.label for tab in TABS])
    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(state.filtered, context)


if __name__ == "__main__":
    main()
