# Dashboard filters: filterable columns, value domains and the filtered view
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..models import DataRecord, Scalar
from .pagination_utils import Paginator

FilterSelection = Dict[str, List[Scalar]]


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and np.isnan(value))


def filterable_columns(records: Sequence[DataRecord], max_unique: int = 50) -> List[str]:
    """
    Columns offered as filters.

    A column qualifies when its value in the first record is a string and it
    takes more than one but at most ``max_unique`` distinct values across the
    dataset. This is a heuristic for "categorical", not type inference.
    """
    if not records:
        return []
    first = records[0]
    df = pd.DataFrame.from_records(list(records))
    columns = []
    for col in first.keys():
        if not isinstance(first[col], str):
            continue
        n_unique = df[col].nunique(dropna=False)
        if 1 < n_unique <= max_unique:
            columns.append(col)
    return columns


def unique_filter_values(records: Sequence[DataRecord], columns: Sequence[str]) -> Dict[str, List[Scalar]]:
    values: Dict[str, List[Scalar]] = {}
    for col in columns:
        present = {row[col] for row in records if not _is_missing(row.get(col))}
        try:
            values[col] = sorted(present)
        except TypeError:
            # mixed str/number column
            values[col] = sorted(present, key=str)
    return values


def active_filters(selection: FilterSelection) -> Dict[str, List[Scalar]]:
    return {col: list(vals) for col, vals in selection.items() if vals}


def apply_filters(records: Sequence[DataRecord], selection: FilterSelection) -> List[DataRecord]:
    """Rows matching every non-empty column selection, in their original order."""
    active = active_filters(selection)
    if not active or not records:
        return list(records)

    df = pd.DataFrame.from_records(list(records))
    mask = np.ones(len(df), dtype=bool)
    for col, allowed in active.items():
        if col not in df.columns:
            return []
        mask &= df[col].isin(allowed).to_numpy()
    return [records[i] for i in np.flatnonzero(mask)]


class DashboardView:
    """
    Derived, read-only view of the cleaned dataset.

    Changing either the base dataset or the filter selection recomputes the
    filtered rows and sends the paginator back to the first page.
    """

    def __init__(self, records: Optional[Sequence[DataRecord]] = None, page_size: int = 10, max_unique: int = 50):
        self.max_unique = max_unique
        self.paginator = Paginator(page_size)
        self.selection: FilterSelection = {}
        self.records: List[DataRecord] = []
        self.columns: List[str] = []
        self.filter_values: Dict[str, List[Scalar]] = {}
        self.filtered: List[DataRecord] = []
        self.set_dataset(records or [])

    def set_dataset(self, records: Sequence[DataRecord]) -> None:
        self.records = list(records)
        self.columns = filterable_columns(self.records, self.max_unique)
        self.filter_values = unique_filter_values(self.records, self.columns)
        self.selection = {c: v for c, v in self.selection.items() if c in self.columns}
        self._recompute()

    def set_selection(self, column: str, values: Sequence[Scalar]) -> None:
        if list(values) == self.selection.get(column, []):
            return
        self.selection = {**self.selection, column: list(values)}
        self._recompute()

    def clear_filters(self) -> None:
        self.selection = {}
        self._recompute()

    def _recompute(self) -> None:
        self.filtered = apply_filters(self.records, self.selection)
        self.paginator.bind(len(self.filtered))

    @property
    def headers(self) -> List[str]:
        return list(self.records[0].keys()) if self.records else []

    @property
    def page_rows(self) -> List[DataRecord]:
        return list(self.paginator.slice(self.filtered))
