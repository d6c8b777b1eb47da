"""
DataClean & Viz AI

A three-step Streamlit wizard: upload a tabular file, let Gemini clean it and
review (restore, undo, redo) the rows it removed, then filter the cleaned data
and ask Gemini for dashboard charts.

Structure:
- main.py: Main entry point and step dispatch
- session_state.py: Centralized session state management
- wizard.py: Wizard steps and the data carried between them
- services/: Gemini cleaning and chart-config calls
- utils/: History, filter, pagination, ingestion and report engines
- components/: Reusable UI components
- steps/: Individual step implementations (Step 1-3)
"""

__version__ = "1.0.0"

from .models import ChartConfig, ChangeLog, CleaningResults
from .wizard import WizardState, WizardStep

# Export engines
from .utils.history_utils import CleaningHistory, CleaningState, RemovedRow
from .utils.filter_utils import DashboardView, apply_filters, filterable_columns, unique_filter_values
from .utils.pagination_utils import Paginator, page_count, paginate
