# filters.py
"""
Per-column "text contains" filters for the order table.

A filter request is a sparse mapping of column name -> free text (usually
straight from a form). It is never merged with a previous request: applying
always removes the active filter first and installs the new criteria from
scratch, so an empty request simply clears the table.

Sinks (a Google Sheet, an in-memory DataFrame) implement `TabularSink`.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol, Sequence

import pandas as pd

from schema import COLUMNS

# header + at least one data row
MIN_ROWS_TO_FILTER = 2


class TabularSink(Protocol):
    def row_count(self) -> int:
        """Rows currently in the table, header included."""

    def write_table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        ...

    def remove_filter(self) -> None:
        ...

    def set_text_filters(self, criteria: Mapping[int, str], row_count: int) -> None:
        """Install one "text contains" criterion per column index over the first `row_count` rows."""


@dataclass(frozen=True)
class FilterPlan:
    criteria: Dict[int, str] = field(default_factory=dict)
    applied: int = 0


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def build_filter_spec(candidate: Optional[Mapping], columns: Sequence[str] = COLUMNS) -> Dict[str, str]:
    """Known columns with a non-blank value, trimmed, in column order."""
    candidate = candidate or {}
    spec = {}
    for col in columns:
        text = _clean(candidate.get(col))
        if text:
            spec[col] = text
    return spec


def build_filter_plan(candidate: Optional[Mapping], columns: Sequence[str], row_count: int) -> FilterPlan:
    if row_count < MIN_ROWS_TO_FILTER:
        return FilterPlan()
    spec = build_filter_spec(candidate, columns)
    criteria = {idx: spec[col] for idx, col in enumerate(columns) if col in spec}
    return FilterPlan(criteria=criteria, applied=len(criteria))


def clear_filters(sink: TabularSink) -> None:
    sink.remove_filter()


def apply_filters(sink: TabularSink, candidate: Optional[Mapping], columns: Sequence[str] = COLUMNS) -> int:
    """
    Replace whatever filter the sink has with `candidate`.
    Returns the number of columns that got a criterion (0 clears the table).
    """
    sink.remove_filter()
    row_count = sink.row_count()
    plan = build_filter_plan(candidate, columns, row_count)
    if plan.criteria:
        sink.set_text_filters(plan.criteria, row_count)
    return plan.applied


def filter_frame(df: pd.DataFrame, criteria: Mapping[int, str], columns: Sequence[str] = COLUMNS) -> pd.DataFrame:
    """Rows whose cells contain every criterion text (case-insensitive, literal)."""
    if df is None or df.empty or not criteria:
        return df
    mask = pd.Series(True, index=df.index)
    for idx, text in criteria.items():
        col = columns[idx]
        if col not in df.columns:
            continue
        mask &= df[col].astype(str).str.contains(text, case=False, na=False, regex=False)
    return df[mask]


class FrameSink:
    """In-memory table backed by a DataFrame; used by the dashboard and tests."""

    def __init__(self, columns: Sequence[str] = COLUMNS):
        self.columns = list(columns)
        self.df: Optional[pd.DataFrame] = None
        self.criteria: Dict[int, str] = {}

    def row_count(self) -> int:
        if self.df is None:
            return 0
        return len(self.df) + 1

    def write_table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.columns = list(header)
        self.df = pd.DataFrame([list(r) for r in rows], columns=self.columns)
        self.criteria = {}

    def remove_filter(self) -> None:
        self.criteria = {}

    def set_text_filters(self, criteria: Mapping[int, str], row_count: int) -> None:
        self.criteria = dict(criteria)

    @property
    def is_filtered(self) -> bool:
        return bool(self.criteria)

    def view(self) -> pd.DataFrame:
        if self.df is None:
            return pd.DataFrame(columns=self.columns)
        return filter_frame(self.df, self.criteria, self.columns)
