# Step 2: Clean Data
import asyncio

import pandas as pd
import streamlit as st

from ..components.overview_metrics import show_overview_metrics
from ..config import settings
from ..services.gemini_service import (
    AUTO_CLEAN_PROMPT, MissingInstructionsError, ServiceError, clean_dataset
)
from ..utils.history_utils import (
    get_history, init_history_on_clean, log_action, render_history_controls, restore_removed_row
)
from ..utils.ingest_utils import preview_rows

CLEAN_ACTIONS = ("auto", "custom")


def _queue_cleaning(instructions: str, action: str) -> None:
    """Mark a cleaning request as pending; the next rerun draws the controls disabled and runs it."""
    st.session_state.error = ""
    st.session_state.processing = True
    st.session_state.active_action = action
    st.session_state.pending_instructions = instructions


def _run_cleaning() -> None:
    """Run the pending cleaning request; history is only touched on success."""
    wizard = st.session_state.wizard
    action = st.session_state.active_action
    try:
        spinner = "Processing..." if action == "auto" else "Cleaning..."
        with st.spinner(spinner):
            results = asyncio.run(clean_dataset(wizard.raw_csv, st.session_state.pending_instructions))
    except (MissingInstructionsError, ServiceError) as e:
        st.session_state.error = str(e)
        return
    finally:
        st.session_state.processing = False
        st.session_state.active_action = None
        st.session_state.pending_instructions = ""

    label = "Auto-clean" if action == "auto" else "Custom clean"
    init_history_on_clean(results, label)
    st.session_state.is_reviewing = True


def _render_removed_rows(headers) -> None:
    removed = get_history().present.removed_rows
    if not removed:
        st.success("✨ No rows are currently removed.")
        return

    st.markdown(f"#### Removed Rows ({len(removed)})")
    columns = list(headers) + ["Reason", ""]
    widths = [2] * len(headers) + [3, 1]
    head = st.columns(widths)
    for col, name in zip(head, columns):
        col.markdown(f"**{name}**")

    for item in removed:
        cells = st.columns(widths)
        for col, header in zip(cells, headers):
            value = item.original_row.get(header, "")
            col.write("" if value is None else str(value))
        cells[-2].caption(f"_{item.reason}_")
        # keyed by row_id so the button always restores the row it was drawn for
        if cells[-1].button("↩️ Restore", key=f"restore_{item.row_id}"):
            restore_removed_row(item.row_id)
            st.rerun()


def _render_review(headers) -> None:
    history = get_history()
    wizard = st.session_state.wizard

    st.subheader("Cleaning Summary")
    st.markdown("Review the changes made by the AI. You can restore any row removals before proceeding.")
    st.info(f"**AI's Summary of Actions:**\n\n{st.session_state.cleaning_summary}")

    show_overview_metrics(history)
    render_history_controls()
    _render_removed_rows(headers)

    st.divider()
    c1, c2 = st.columns(2)
    with c1:
        if st.button("← Back to Edit", use_container_width=True):
            st.session_state.is_reviewing = False
            st.rerun()
    with c2:
        if st.button("Confirm & Proceed ➡️", type="primary", use_container_width=True):
            wizard.data_cleaned(list(history.present.cleaned_data))
            st.session_state.error = ""
            log_action(f"Confirmed cleaned data ({len(history.present.cleaned_data)} rows)")
            st.rerun()


def step2_clean():
    wizard = st.session_state.wizard
    st.header("Step 2 · Clean Data")
    st.markdown(f"**Step 2 of 3** · `{wizard.file_name}`")

    headers, sample = preview_rows(wizard.raw_csv, settings.PREVIEW_ROWS)

    if st.session_state.is_reviewing:
        _render_review(headers)
        return

    st.subheader(f"📋 Data Preview (First {settings.PREVIEW_ROWS} Rows)")
    if sample:
        st.dataframe(pd.DataFrame(sample, columns=headers), use_container_width=True, hide_index=True)
    else:
        st.warning("No rows to preview.")

    processing = st.session_state.processing
    prompt = st.text_area(
        "Option 1: Describe how to clean the data (for custom tasks)",
        placeholder="e.g., 'Remove rows where 'Sales' is 0. Fill missing 'Region' with 'N/A'. "
                    "Convert 'Order Date' to YYYY-MM-DD format.'",
        height=130,
        disabled=processing,
        key="cleaning_prompt",
    )

    if st.session_state.error:
        st.error(st.session_state.error)

    st.markdown("**Option 2: One-click cleaning.** Let AI handle common cleaning tasks automatically.")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("🪄 Auto-clean with AI", disabled=processing, use_container_width=True):
            _queue_cleaning(AUTO_CLEAN_PROMPT, "auto")
            st.rerun()
    with c2:
        if st.button("✨ Clean with Instructions", type="primary",
                     disabled=processing or not prompt.strip(), use_container_width=True):
            _queue_cleaning(prompt, "custom")
            st.rerun()

    if get_history().total_rows:
        st.divider()
        if st.button("🔍 Return to last review", disabled=processing, use_container_width=True):
            st.session_state.is_reviewing = True
            st.rerun()

    if processing and st.session_state.active_action in CLEAN_ACTIONS:
        _run_cleaning()
        st.rerun()
