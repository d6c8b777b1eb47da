# Main navigation file
import logging

import streamlit as st

from .config import settings
from .session_state import initialize_session_state
from .wizard import WizardStep

from .components.sidebar import sidebar_navigation

from .steps.step1_upload import step1_upload
from .steps.step2_clean import step2_clean
from .steps.step3_dashboard import step3_dashboard


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------
# Main App
# ---------------------------------------------------------------------
def main():
    st.set_page_config(
        page_title="DataClean & Viz AI",
        page_icon="🧹",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    configure_logging()
    initialize_session_state()

    sidebar_navigation()

    step = st.session_state.wizard.step
    if step == WizardStep.UPLOAD:
        step1_upload()
    elif step == WizardStep.CLEAN:
        step2_clean()
    elif step == WizardStep.DASHBOARD:
        step3_dashboard()


if __name__ == "__main__":
    main()
