from __future__ import annotations

import itertools
import logging
from typing import Dict, List, Optional

from sheets_console.core.dataset import Dataset
from sheets_console.core.exceptions import (
    ApiError,
    IncorrectPasswordError,
    StaleResponseError,
)
from sheets_console.core.models import DatasetSummary
from sheets_console.services.api_client import ApiClient

logger = logging.getLogger(__name__)


class DatasetDirectory:
    """
    Lists datasets by department and tracks the one unlocked dataset.

    Selecting a dataset bumps a request tag. An unlock whose tag no longer
    matches the current selection when its response arrives is discarded,
    so a slow response for an old dataset never overwrites a newer one.
    """

    def __init__(self, api: ApiClient, *, placeholder_name: str = "Sheet1"):
        self.api = api
        self.placeholder_name = placeholder_name
        self.by_department: Dict[str, List[DatasetSummary]] = {}
        self.selected: Optional[DatasetSummary] = None
        self.unlocked: Optional[Dataset] = None
        self._tags = itertools.count(1)
        self._current_tag = 0

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def list_datasets(self) -> Dict[str, List[DatasetSummary]]:
        """
        Fetch all sheets and group them by department. A failed fetch is
        logged and leaves the directory empty.
        """
        try:
            sheets = self.api.list_sheets()
        except ApiError as e:
            logger.error("Failed to list datasets", extra={"error": str(e)})
            self.by_department = {}
            return self.by_department

        grouped: Dict[str, List[DatasetSummary]] = {}
        for raw in sheets:
            summary = DatasetSummary.from_dict(raw)
            if summary.name == self.placeholder_name:
                continue
            grouped.setdefault(summary.department, []).append(summary)

        self.by_department = grouped
        logger.info(
            "Datasets listed",
            extra={"n_departments": len(grouped), "n_datasets": sum(len(v) for v in grouped.values())},
        )
        return grouped

    def find(self, dataset_id: str) -> Optional[DatasetSummary]:
        for summaries in self.by_department.values():
            for s in summaries:
                if s.id == dataset_id:
                    return s
        return None

    # ------------------------------------------------------------------
    # Selection / unlock
    # ------------------------------------------------------------------
    def select(self, summary: Optional[DatasetSummary]) -> int:
        """Make `summary` current; drops any unlocked rows. Returns the new tag."""
        self.selected = summary
        self.unlocked = None
        self._current_tag = next(self._tags)
        return self._current_tag

    def is_unlocked(self, dataset_id: str) -> bool:
        return self.unlocked is not None and self.unlocked.id == dataset_id

    def unlock(self, summary: DatasetSummary, candidate_password: str) -> Dataset:
        """
        Verify the password server-side, then load the rows.

        :raises IncorrectPasswordError: the server rejected the password
        :raises StaleResponseError: another dataset was selected meanwhile
        :raises ApiError: the server could not be reached, or rows could not be fetched
        """
        if self.selected is None or self.selected.id != summary.id:
            self.select(summary)
        tag = self._current_tag

        try:
            self.api.confirm_password(summary.sheet_id, candidate_password)
        except ApiError as e:
            if e.status is None:
                # no response at all; not a verdict on the password
                raise
            logger.info("Dataset password rejected", extra={"dataset": summary.name, "status": e.status})
            raise IncorrectPasswordError("Incorrect password.") from e
        self._check_current(summary, tag)

        rows = self.api.fetch_rows(summary.sheet_id)
        self._check_current(summary, tag)

        dataset = Dataset.from_rows(summary, rows)
        self.unlocked = dataset
        logger.info(
            "Dataset unlocked",
            extra={"dataset": summary.name, "n_rows": len(dataset.rows), "n_columns": len(dataset.columns)},
        )
        return dataset

    def _check_current(self, summary: DatasetSummary, tag: int) -> None:
        if tag != self._current_tag or self.selected is None or self.selected.id != summary.id:
            logger.info("Discarding stale dataset response", extra={"dataset": summary.name, "tag": tag})
            raise StaleResponseError(f"Response for '{summary.name}' arrived after selection changed")
