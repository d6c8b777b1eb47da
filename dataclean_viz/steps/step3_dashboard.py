# Step 3: Filtered data and AI dashboard
import asyncio
from datetime import datetime

import pandas as pd
import streamlit as st

from ..components.chart_renderer import render_chart
from ..services.gemini_service import MissingInstructionsError, ServiceError, generate_chart_configs
from ..session_state import reset_session_state
from ..utils.filter_utils import DashboardView
from ..utils.history_utils import get_history, log_action
from ..utils.report_utils import generate_cleaning_report, records_to_csv, report_to_json

DASHBOARD_ACTION = "dashboard"


def _sync_view() -> DashboardView:
    """Rebuild the derived view only when the wizard hands over a new dataset."""
    wizard = st.session_state.wizard
    view: DashboardView = st.session_state.dashboard_view
    if st.session_state.dashboard_data_version != wizard.data_version:
        view.set_dataset(wizard.cleaned_data)
        st.session_state.dashboard_data_version = wizard.data_version
    return view


def _render_filters(view: DashboardView) -> None:
    if not view.columns:
        return
    st.markdown("**🎯 Filters**")
    cols = st.columns(min(len(view.columns), 4))
    for i, column in enumerate(view.columns):
        with cols[i % len(cols)]:
            selected = st.multiselect(
                column,
                options=view.filter_values[column],
                key=f"filter_{st.session_state.dashboard_data_version}_{column}",
                disabled=st.session_state.processing,
            )
        view.set_selection(column, selected)


def _render_table(view: DashboardView) -> None:
    _render_filters(view)
    st.subheader(f"Filtered Data ({len(view.filtered)} of {len(view.records)} rows)")

    if not view.filtered:
        st.info("No rows match the current filters.")
        return

    st.dataframe(
        pd.DataFrame(view.page_rows, columns=view.headers),
        use_container_width=True,
        hide_index=True,
    )

    paginator = view.paginator
    if paginator.page_count > 1:
        c1, c2, c3 = st.columns([1, 2, 1])
        with c1:
            if st.button("← Previous", disabled=not paginator.has_previous, use_container_width=True):
                paginator.previous()
                st.rerun()
        with c2:
            st.markdown(f"<div style='text-align:center'>Page {paginator.page + 1} of {paginator.page_count}</div>",
                        unsafe_allow_html=True)
        with c3:
            if st.button("Next →", disabled=not paginator.has_next, use_container_width=True):
                paginator.next()
                st.rerun()


def _queue_dashboard(prompt: str) -> None:
    st.session_state.error = ""
    st.session_state.processing = True
    st.session_state.active_action = DASHBOARD_ACTION
    st.session_state.pending_instructions = prompt


def _run_dashboard(view: DashboardView) -> None:
    """Run the pending chart request over the filtered rows; charts only change on success."""
    wizard = st.session_state.wizard
    try:
        with st.spinner("Generating..."):
            configs = asyncio.run(
                generate_chart_configs(view.filtered, st.session_state.pending_instructions)
            )
    except (MissingInstructionsError, ServiceError) as e:
        st.session_state.error = str(e)
        return
    finally:
        st.session_state.processing = False
        st.session_state.active_action = None
        st.session_state.pending_instructions = ""

    wizard.dashboard_generated(configs)
    log_action(f"Generated dashboard with {len(configs)} charts")


def _render_downloads() -> None:
    wizard = st.session_state.wizard
    report = generate_cleaning_report(
        get_history(), st.session_state.cleaning_summary, st.session_state.action_log
    )
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    c1, c2 = st.columns(2)
    with c1:
        st.download_button(
            "📥 Download Cleaned Data (CSV)",
            data=records_to_csv(wizard.cleaned_data),
            file_name=f"cleaned_{stamp}.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with c2:
        st.download_button(
            "📋 Download Cleaning Report (JSON)",
            data=report_to_json(report),
            file_name=f"cleaning_report_{stamp}.json",
            mime="application/json",
            use_container_width=True,
        )


def step3_dashboard():
    st.header("Step 3 · Generate Dashboard")
    st.markdown("**Step 3 of 3**")

    wizard = st.session_state.wizard
    view = _sync_view()

    if not view.records:
        st.warning("No data to show. The cleaned dataset is empty.")
    else:
        _render_table(view)

    st.divider()
    st.subheader("📊 Generate Dashboard")
    processing = st.session_state.processing
    prompt = st.text_area(
        "Describe the charts you want",
        placeholder="e.g., 'Show total sales by region. Create a time-series chart for profit over time. "
                    "What's the distribution of product categories?'",
        height=110,
        disabled=processing,
        key="dashboard_prompt",
    )
    if st.session_state.error:
        st.error(st.session_state.error)

    c1, c2, c3 = st.columns([1, 1, 2])
    with c1:
        if st.button("🔄 Start Over", use_container_width=True):
            reset_session_state()
            st.rerun()
    with c2:
        if st.button("← Back to Cleaning", disabled=processing, use_container_width=True):
            wizard.back_to_clean()
            st.session_state.is_reviewing = True
            st.rerun()
    with c3:
        if st.button("✨ Generate with AI", type="primary", use_container_width=True,
                     disabled=processing or not prompt.strip() or not view.records):
            _queue_dashboard(prompt)
            st.rerun()

    if processing and st.session_state.active_action == DASHBOARD_ACTION:
        _run_dashboard(view)
        st.rerun()

    if wizard.chart_configs:
        st.divider()
        cols = st.columns(2)
        for i, config in enumerate(wizard.chart_configs):
            with cols[i % 2]:
                render_chart(config, view.filtered)

    if view.records:
        st.divider()
        _render_downloads()
