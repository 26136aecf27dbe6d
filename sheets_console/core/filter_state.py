from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from sheets_console.core.search import ALL

DEFAULT_VISIBLE_FILTERS = 3


@dataclass
class FilterState:
    """
    Represents the current search selection for one dataset.

    Fields:

    - dataset_id: the dataset these filters belong to
    - free_text: substring typed into the search box
    - column_filters: column -> selected value; ALL means unconstrained
    - visible_filters: ordered columns currently shown as filter dropdowns
    - columns: every column of the dataset, in order

    Hiding a column's dropdown keeps its selected value in column_filters,
    so the constraint still applies.
    """

    dataset_id: str = ""
    free_text: str = ""
    column_filters: Dict[str, Any] = field(default_factory=dict)
    visible_filters: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    n_default: int = DEFAULT_VISIBLE_FILTERS

    @classmethod
    def for_columns(
            cls,
            dataset_id: str,
            columns: Sequence[str],
            n_visible: int = DEFAULT_VISIBLE_FILTERS,
    ) -> FilterState:
        """Fresh state for a newly active dataset."""
        cols = list(columns)
        return cls(
            dataset_id=dataset_id,
            columns=cols,
            visible_filters=cols[:n_visible],
            n_default=n_visible,
        )

    @property
    def default_visible(self) -> List[str]:
        return self.columns[:self.n_default]

    @property
    def extra_columns(self) -> List[str]:
        """Columns that can be toggled in the 'Add Filters' picker."""
        return self.columns[self.n_default:]

    def set_filter(self, column: str, value: Any) -> None:
        self.column_filters[column] = ALL if value is None else value

    def toggle_column(self, column: str) -> None:
        if column not in self.extra_columns:
            raise KeyError(f"Column '{column}' is not a toggleable filter")
        if column in self.visible_filters:
            self.visible_filters = [c for c in self.visible_filters if c != column]
        else:
            self.visible_filters = self.visible_filters + [column]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        data = data or {}
        return cls(
            dataset_id=data.get("dataset_id", ""),
            free_text=data.get("free_text") or "",
            column_filters=dict(data.get("column_filters") or {}),
            visible_filters=list(data.get("visible_filters") or []),
            columns=list(data.get("columns") or []),
            n_default=int(data.get("n_default", DEFAULT_VISIBLE_FILTERS)),
        )
