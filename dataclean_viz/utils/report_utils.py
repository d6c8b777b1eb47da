# Cleaning report and export helpers
import json
from datetime import datetime
from typing import Any, Dict, List, Sequence

import pandas as pd

from ..models import DataRecord
from .history_utils import CleaningHistory


def generate_cleaning_report(history: CleaningHistory, summary: str, action_log: List[str]) -> Dict[str, Any]:
    present = history.present
    return {
        "timestamp": datetime.now().isoformat(),
        "total_rows": history.total_rows,
        "rows_kept": len(present.cleaned_data),
        "rows_removed": len(present.removed_rows),
        "rows_restored": history.restored_count,
        "ai_summary": summary,
        "removed_rows": [
            {"id": r.row_id, "reason": r.reason, "row": r.original_row}
            for r in present.removed_rows
        ],
        "history_depth": len(history.past),
        "total_actions": len(action_log),
        "recent_actions": action_log[-50:],
    }


def report_to_json(report: Dict[str, Any]) -> str:
    return json.dumps(report, indent=2, default=str)


def records_to_csv(records: Sequence[DataRecord]) -> str:
    if not records:
        return ""
    return pd.DataFrame.from_records(list(records)).to_csv(index=False)
