# Session state manager
import streamlit as st

from .config import settings
from .utils.filter_utils import DashboardView
from .utils.history_utils import CleaningHistory
from .wizard import WizardState


def initialize_session_state():
    """Seed every session key the wizard reads."""
    defaults = {
        'wizard': WizardState,
        'history': CleaningHistory,
        'dashboard_view': lambda: DashboardView(
            page_size=settings.ROWS_PER_PAGE, max_unique=settings.MAX_FILTER_VALUES
        ),
        'dashboard_data_version': lambda: -1,
        'action_log': list,
        'cleaning_summary': str,
        'is_reviewing': bool,
        'processing': bool,
        'active_action': lambda: None,
        'pending_instructions': str,
        'error': str,
    }

    for key, factory in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = factory()


def reset_session_state():
    for key in ('wizard', 'history', 'dashboard_view', 'dashboard_data_version',
                'action_log', 'cleaning_summary', 'is_reviewing', 'processing',
                'active_action', 'pending_instructions', 'error'):
        if key in st.session_state:
            del st.session_state[key]
    initialize_session_state()
