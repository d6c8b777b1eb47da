# Step 1: Upload Data
import streamlit as st

from ..utils.history_utils import log_action
from ..utils.ingest_utils import (
    SUPPORTED_EXTENSIONS, FileParseError, UnsupportedFileError, normalize_upload
)


def step1_upload():
    st.header("Step 1 · Upload Data")
    st.markdown("**Step 1 of 3**")

    uploaded_file = st.file_uploader(
        "Drag & drop your data file here",
        type=[ext.lstrip(".") for ext in SUPPORTED_EXTENSIONS],
        help="Supported formats: CSV, Excel, JSON.",
    )

    if uploaded_file is None:
        st.info("👆 Please upload a CSV, Excel, or JSON file to get started!")
        st.markdown("### ✨ How it works")
        features = {
            "🧹 AI Cleaning": "Let the model clean your data automatically or follow your own instructions",
            "↩️ Review & Undo": "Restore any row the model removed, with full undo/redo",
            "🎯 Filters": "Narrow the cleaned data by any categorical column",
            "📊 AI Dashboard": "Describe the charts you want and get a dashboard over the filtered data",
        }
        for feature, desc in features.items():
            st.markdown(f"**{feature}**: {desc}")
        return

    try:
        csv_text = normalize_upload(uploaded_file.name, uploaded_file.getvalue())
    except UnsupportedFileError as e:
        st.error(str(e))
        return
    except FileParseError as e:
        st.error(str(e))
        st.info("Check the file format and try again.")
        return

    if not csv_text.strip():
        st.error("The uploaded file is empty.")
        return

    st.success(f"✅ Loaded: {uploaded_file.name}")
    if st.button("➡️ Continue to Cleaning", type="primary", use_container_width=True):
        st.session_state.wizard.file_uploaded(csv_text, uploaded_file.name)
        st.session_state.is_reviewing = False
        log_action(f"Uploaded dataset: {uploaded_file.name}")
        st.rerun()
