from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from sheets_console.core.models import DatasetSummary

Row = Dict[str, Any]


@dataclass
class Dataset:
    """
    An unlocked dataset: the summary it was selected from plus its rows.

    - columns: key order of the first row (empty when there are no rows)
    - rows: original order is preserved everywhere
    """
    summary: DatasetSummary
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.summary.id

    @property
    def name(self) -> str:
        return self.summary.name

    @property
    def department(self) -> str:
        return self.summary.department

    @classmethod
    def from_rows(cls, summary: DatasetSummary, rows: Sequence[Mapping[str, Any]]) -> Dataset:
        records = [dict(r) for r in rows]
        columns = list(records[0].keys()) if records else []
        return cls(summary=summary, columns=columns, rows=records)

    def to_frame(self, rows: Optional[Sequence[Row]] = None) -> pd.DataFrame:
        """Tabular view of `rows` (defaults to every row) in column order."""
        records = self.rows if rows is None else list(rows)
        # object dtype keeps integers intact when some rows lack a value
        return pd.DataFrame(records, columns=self.columns, dtype=object)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "columns": list(self.columns),
            "rows": list(self.rows),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Dataset:
        s = data.get("summary") or {}
        summary = DatasetSummary(
            id=str(s.get("id", "")),
            sheet_id=str(s.get("sheet_id", "")),
            name=s.get("name", ""),
            department=s.get("department", ""),
        )
        return cls(
            summary=summary,
            columns=list(data.get("columns", [])),
            rows=[dict(r) for r in data.get("rows", [])],
        )
