# Wizard progress sidebar
import streamlit as st

from ..wizard import STEP_NAMES, WizardStep


def sidebar_navigation():
    st.sidebar.header("🧹 DataClean & Viz AI")

    wizard = st.session_state.wizard
    for step in WizardStep:
        if step < wizard.step:
            marker = "✅"
        elif step == wizard.step:
            marker = "🔵"
        else:
            marker = "⚪"
        label = f"{marker} Step {int(step)} · {STEP_NAMES[step]}"
        if step == wizard.step:
            st.sidebar.markdown(f"**{label}**")
        else:
            st.sidebar.markdown(label)

    if wizard.file_name:
        st.sidebar.divider()
        st.sidebar.markdown("### 📊 Data Summary")
        st.sidebar.caption(wizard.file_name)

        history = st.session_state.history
        present = history.present
        if history.total_rows:
            st.sidebar.metric("Rows kept", f"{len(present.cleaned_data):,}")
            st.sidebar.metric("Rows removed", f"{len(present.removed_rows):,}")
            if present.cleaned_data:
                st.sidebar.metric("Columns", f"{len(present.cleaned_data[0]):,}")

    if st.session_state.action_log:
        st.sidebar.divider()
        with st.sidebar.expander("📝 Action Log", expanded=False):
            for line in reversed(st.session_state.action_log[-20:]):
                st.caption(line)
