# History and undo/redo functions
import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, List, Tuple, Any, Iterable

import pandas as pd
import streamlit as st

from ..models import CleaningResults, DataRecord, RemovedRowPayload

# ---------------------------------------------------------------------
# Snapshot types
# ---------------------------------------------------------------------
_row_ids = itertools.count(1)


@dataclass(frozen=True)
class RemovedRow:
    """A row dropped by a cleaning run, with the model's justification."""

    row_id: int
    original_row: DataRecord
    reason: str


@dataclass(frozen=True)
class CleaningState:
    """One history snapshot: the kept rows and the rows still removed."""

    cleaned_data: Tuple[DataRecord, ...] = ()
    removed_rows: Tuple[RemovedRow, ...] = ()
    label: str = ""

    @property
    def row_count(self) -> int:
        return len(self.cleaned_data) + len(self.removed_rows)

    def find_removed(self, row_id: int) -> Optional[int]:
        for i, item in enumerate(self.removed_rows):
            if item.row_id == row_id:
                return i
        return None


def build_removed_rows(payloads: Iterable[RemovedRowPayload]) -> Tuple[RemovedRow, ...]:
    """Assign each removed row a durable id so restores never depend on list position."""
    return tuple(
        RemovedRow(row_id=next(_row_ids), original_row=dict(p.originalRow), reason=p.reason)
        for p in payloads
    )


def state_from_results(results: CleaningResults, label: str = "AI cleaning") -> CleaningState:
    return CleaningState(
        cleaned_data=tuple(dict(r) for r in results.cleanedData),
        removed_rows=build_removed_rows(results.changeLog.removedRows),
        label=label,
    )


# ---------------------------------------------------------------------
# History engine
# ---------------------------------------------------------------------
class CleaningHistory:
    """
    Linear undo/redo stack of CleaningState snapshots.

    ``past`` holds older states with the most recent last, ``future`` holds
    undone states with the most recently undone first. Any new edit drops the
    whole ``future``; branching history is not kept.
    """

    def __init__(self, state: Optional[CleaningState] = None):
        self.past: List[CleaningState] = []
        self.present: CleaningState = state or CleaningState()
        self.future: List[CleaningState] = []
        self.total_rows: int = self.present.row_count

    def initialize(self, state: CleaningState) -> None:
        self.past = []
        self.present = state
        self.future = []
        self.total_rows = state.row_count

    def apply_edit(self, new_state: CleaningState) -> None:
        self.past.append(self.present)
        self.present = new_state
        self.future = []

    def restore_row(self, row_id: int) -> Optional[RemovedRow]:
        """Move the removed row with ``row_id`` back to the end of the cleaned data."""
        index = self.present.find_removed(row_id)
        if index is None:
            return None
        return self._restore(index)

    def restore_row_at(self, index: int) -> Optional[RemovedRow]:
        if not 0 <= index < len(self.present.removed_rows):
            return None
        return self._restore(index)

    def _restore(self, index: int) -> RemovedRow:
        present = self.present
        row = present.removed_rows[index]
        self.apply_edit(CleaningState(
            cleaned_data=present.cleaned_data + (row.original_row,),
            removed_rows=present.removed_rows[:index] + present.removed_rows[index + 1:],
            label=f"Restored row #{row.row_id}",
        ))
        return row

    def undo(self) -> bool:
        if not self.past:
            return False
        self.future.insert(0, self.present)
        self.present = self.past.pop()
        return True

    def redo(self) -> bool:
        if not self.future:
            return False
        self.past.append(self.present)
        self.present = self.future.pop(0)
        return True

    def revert_to(self, position: int) -> int:
        """Undo until ``position`` in the timeline is the present. Returns the number of steps undone."""
        if not 0 <= position <= len(self.past):
            return 0
        steps = len(self.past) - position
        for _ in range(steps):
            self.undo()
        return steps

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    @property
    def restored_count(self) -> int:
        return self._initial_removed() - len(self.present.removed_rows)

    def _initial_removed(self) -> int:
        first = self.past[0] if self.past else self.present
        return len(first.removed_rows)

    def timeline(self) -> List[Dict[str, Any]]:
        entries = self.past + [self.present]
        return [
            {
                "position": i,
                "label": s.label,
                "rows": len(s.cleaned_data),
                "removed": len(s.removed_rows),
                "current": i == len(entries) - 1,
            }
            for i, s in enumerate(entries)
        ]


# ---------------------------------------------------------------------
# Session-level wrappers
# ---------------------------------------------------------------------
def _now_str() -> str:
    return datetime.now().strftime("%H:%M:%S")


def log_action(message: str) -> None:
    st.session_state.action_log.append(f"[{_now_str()}] {message}")


def get_history() -> CleaningHistory:
    return st.session_state.history


def init_history_on_clean(results: CleaningResults, label: str) -> None:
    """Start a fresh history for a completed cleaning run."""
    state = state_from_results(results, label)
    st.session_state.history.initialize(state)
    st.session_state.cleaning_summary = results.changeLog.summary
    log_action(
        f"{label}: kept {len(state.cleaned_data)} rows, removed {len(state.removed_rows)}"
    )


def restore_removed_row(row_id: int) -> None:
    row = get_history().restore_row(row_id)
    if row is None:
        st.warning("That row is no longer in the removed list.")
        return
    log_action(f"Restored row #{row.row_id} ({row.reason})")


def undo_last() -> None:
    history = get_history()
    label = history.present.label
    if not history.undo():
        st.warning("No more steps to undo.")
        return
    log_action(f"↩️ Undone: {label}")


def redo_next() -> None:
    history = get_history()
    if not history.redo():
        st.warning("Nothing to redo.")
        return
    log_action(f"↪️ Redone: {history.present.label}")


def revert_to_entry(position: int) -> None:
    history = get_history()
    steps = history.revert_to(position)
    if steps == 0:
        st.info("Already at the selected step.")
        return
    log_action(f"⏪ Reverted to step #{position}: {history.present.label} ({steps} steps)")


def render_history_controls() -> None:
    """Undo/redo buttons plus the applied-steps timeline."""
    history = get_history()

    c1, c2, _ = st.columns([1, 1, 4])
    with c1:
        if st.button("↩️ Undo", disabled=not history.can_undo, use_container_width=True, key="undo_btn"):
            undo_last()
            st.rerun()
    with c2:
        if st.button("↪️ Redo", disabled=not history.can_redo, use_container_width=True, key="redo_btn"):
            redo_next()
            st.rerun()

    timeline = history.timeline()
    if len(timeline) <= 1:
        return

    with st.expander("📝 Applied Steps Timeline", expanded=False):
        hist_df = pd.DataFrame([
            {
                "Step": f"#{t['position']}",
                "Action": t["label"],
                "Rows": t["rows"],
                "Removed": t["removed"],
                "Status": "👉" if t["current"] else "✅",
            }
            for t in timeline
        ])
        st.dataframe(hist_df, use_container_width=True, hide_index=True)

        options = [f"#{t['position']} - {t['label'][:30]}" for t in timeline]
        revert_to = st.selectbox("Revert to:", options, index=len(options) - 1, key="revert_select")
        if st.button("⏪ Revert to Selected Step", use_container_width=True, key="revert_btn"):
            position = int(revert_to.split('#')[1].split(' ')[0])
            revert_to_entry(position)
            st.rerun()
