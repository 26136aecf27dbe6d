"""
Row filtering for the search page.

Rows are plain mappings from column name to a scalar (str, number or None).
Everything here is recomputed from scratch on each keystroke; at the
expected sizes (hundreds to low thousands of rows) no indexing is needed.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

ALL = "All"
NOT_AVAILABLE = "N/A"


def normalise_value(value: Any) -> Any:
    """Missing values compare and display as NOT_AVAILABLE."""
    return NOT_AVAILABLE if value is None else value


def value_key(value: Any) -> Tuple[str, Any]:
    """
    Identity used for filter choices and matching. Booleans never equal
    numbers; ints and floats share one numeric kind, so 1 and 1.0 are the
    same choice.
    """
    if isinstance(value, bool):
        return "bool", value
    if isinstance(value, (int, float)):
        return "number", value
    if isinstance(value, (list, dict)):
        # unhashable cell values
        return type(value).__name__, repr(value)
    return type(value).__name__, value


def distinct_values(rows: Sequence[Mapping[str, Any]], column: str) -> List[Any]:
    """
    Filter choices for `column`: ALL, then each distinct normalised value in
    order of first occurrence.
    """
    seen: Dict[Tuple[str, Any], Any] = {}
    for row in rows:
        value = normalise_value(row.get(column))
        seen.setdefault(value_key(value), value)
    return [ALL] + [v for v in seen.values() if v != ALL]


def active_constraints(filters: Mapping[str, Any]) -> Dict[str, Any]:
    return {col: val for col, val in (filters or {}).items() if val != ALL and val is not None}


def matches_free_text(row: Mapping[str, Any], query: str) -> bool:
    needle = (query or "").lower()
    if not needle:
        return True
    return any(
        needle in str(value).lower()
        for value in row.values()
        if value is not None
    )


def matches_constraints(row: Mapping[str, Any], constraints: Mapping[str, Any]) -> bool:
    return all(
        value_key(normalise_value(row.get(col))) == value_key(val)
        for col, val in constraints.items()
    )


def apply_filters(
        rows: Sequence[Mapping[str, Any]],
        filters: Mapping[str, Any],
        free_text: str = "",
) -> List[Mapping[str, Any]]:
    """
    Visible subset of `rows`, in original order.

    With no active column constraint the result is exactly the free-text
    matches; otherwise a row must satisfy every constraint AND the free text.
    """
    constraints = active_constraints(filters)

    result = []
    for row in rows:
        text_ok = matches_free_text(row, free_text)
        if not constraints:
            if text_ok:
                result.append(row)
            continue
        if matches_constraints(row, constraints) and text_ok:
            result.append(row)
    return result
