# Cleaning review metrics
import streamlit as st

from ..utils.history_utils import CleaningHistory


def show_overview_metrics(history: CleaningHistory):
    present = history.present
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Rows Kept", f"{len(present.cleaned_data):,}")
    with c2:
        st.metric("Rows Removed", f"{len(present.removed_rows):,}")
    with c3:
        st.metric("Rows Restored", f"{history.restored_count:,}")
    with c4:
        removed_pct = (len(present.removed_rows) / history.total_rows) * 100 if history.total_rows > 0 else 0
        st.metric("Removed %", f"{removed_pct:.1f}%")
