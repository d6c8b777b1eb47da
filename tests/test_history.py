import re

import pytest
from dataclean_viz.models import RemovedRowPayload
from dataclean_viz.utils.history_utils import (
    CleaningHistory, CleaningState, build_removed_rows, get_history, init_history_on_clean,
    redo_next, restore_removed_row, revert_to_entry, state_from_results, undo_last
)


def make_history(n_kept=2, n_removed=3):
    kept = tuple({"id": i} for i in range(n_kept))
    removed = build_removed_rows(
        RemovedRowPayload(originalRow={"id": 100 + i}, reason=f"reason {i}") for i in range(n_removed)
    )
    history = CleaningHistory()
    history.initialize(CleaningState(cleaned_data=kept, removed_rows=removed, label="clean"))
    return history


def test_initialize_from_results_scenario(three_row_results):
    history = CleaningHistory()
    history.initialize(state_from_results(three_row_results))

    assert list(history.present.cleaned_data) == [{"id": 1, "val": "a"}, {"id": 3, "val": "b"}]
    assert len(history.present.removed_rows) == 1
    removed = history.present.removed_rows[0]
    assert removed.original_row == {"id": 2, "val": ""}
    assert removed.reason == "missing value in val"
    assert history.past == [] and history.future == []


def test_restore_appends_then_undo_redo(three_row_results):
    history = CleaningHistory()
    history.initialize(state_from_results(three_row_results))
    after_clean = history.present

    history.restore_row_at(0)
    assert [r["id"] for r in history.present.cleaned_data] == [1, 3, 2]
    assert history.present.removed_rows == ()

    assert history.undo()
    assert history.present == after_clean

    assert history.redo()
    assert [r["id"] for r in history.present.cleaned_data] == [1, 3, 2]


def test_restore_by_id_picks_the_right_row():
    history = make_history()
    target = history.present.removed_rows[1]

    restored = history.restore_row(target.row_id)

    assert restored == target
    assert history.present.cleaned_data[-1] == target.original_row
    assert target.row_id not in [r.row_id for r in history.present.removed_rows]


def test_row_ids_are_unique_across_runs():
    first = build_removed_rows([RemovedRowPayload(originalRow={"a": 1}, reason="x")])
    second = build_removed_rows([RemovedRowPayload(originalRow={"a": 1}, reason="x")])
    assert first[0].row_id != second[0].row_id


def test_row_count_is_conserved_across_edits():
    history = make_history(n_kept=4, n_removed=5)
    total = history.total_rows
    assert total == 9

    for _ in range(3):
        history.restore_row(history.present.removed_rows[0].row_id)
        assert len(history.present.cleaned_data) + len(history.present.removed_rows) == total
    history.undo()
    assert history.present.row_count == total
    history.restore_row_at(1)
    assert history.present.row_count == total


@pytest.mark.parametrize("depth", [1, 2, 4])
def test_undo_then_redo_is_identity(depth):
    history = make_history(n_removed=5)
    for _ in range(depth):
        history.restore_row_at(0)
    before = history.present

    history.undo()
    history.redo()

    assert history.present == before


def test_edit_after_undo_discards_future():
    history = make_history()
    history.restore_row_at(0)
    history.restore_row_at(0)
    history.undo()
    history.undo()
    assert len(history.future) == 2

    history.restore_row_at(1)

    assert history.future == []
    assert not history.redo()
    assert len(history.past) == 1


def test_undo_redo_on_empty_stacks_are_noops():
    history = make_history()
    present = history.present

    assert not history.undo()
    assert not history.redo()
    assert history.present == present
    assert not history.can_undo and not history.can_redo


def test_invalid_restore_is_noop():
    history = make_history()
    present = history.present

    assert history.restore_row_at(3) is None
    assert history.restore_row_at(-1) is None
    assert history.restore_row(999999) is None
    assert history.present == present
    assert history.past == []


def test_initialize_discards_previous_history():
    history = make_history()
    history.restore_row_at(0)
    history.undo()

    history.initialize(CleaningState(cleaned_data=({"id": "x"},), label="second run"))

    assert history.past == [] and history.future == []
    assert history.total_rows == 1


def test_revert_to_walks_back_and_redo_walks_forward():
    history = make_history()
    history.restore_row_at(0)
    history.restore_row_at(0)
    history.restore_row_at(0)
    last = history.present

    assert history.revert_to(1) == 2
    assert len(history.past) == 1
    assert history.timeline()[-1]["current"]

    history.redo()
    history.redo()
    assert history.present == last
    assert history.revert_to(99) == 0


def test_restored_count_tracks_present():
    history = make_history(n_removed=3)
    history.restore_row_at(0)
    history.restore_row_at(0)
    assert history.restored_count == 2
    history.undo()
    assert history.restored_count == 1


def test_undo_redo_revert_write_timestamped_log_entries(fake_st, three_row_results):
    st = fake_st()
    st.session_state.history = CleaningHistory()
    init_history_on_clean(three_row_results, "Auto-clean")
    restore_removed_row(get_history().present.removed_rows[0].row_id)

    undo_last()
    redo_next()
    revert_to_entry(0)

    log = st.session_state.action_log
    assert all(re.match(r"^\[\d\d:\d\d:\d\d\] ", line) for line in log)
    assert "↩️ Undone: Restored row" in log[-3]
    assert "↪️ Redone: Restored row" in log[-2]
    assert "⏪ Reverted to step #0: Auto-clean (1 steps)" in log[-1]
    assert st.session_state.cleaning_summary == "Removed 1 row with a missing value."


def test_undo_with_nothing_to_undo_warns_without_logging(fake_st):
    st = fake_st()
    st.session_state.history = CleaningHistory()

    undo_last()

    assert st.session_state.action_log == []
    assert st.warnings == ["No more steps to undo."]
