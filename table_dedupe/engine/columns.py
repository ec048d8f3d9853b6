"""Parse and validate the caller's dedupe column list."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import ColumnSet, ValidationResult

NO_COLUMNS = "no columns specified"
MISSING_COLUMNS = "columns do not exist"


def parse_columns(raw: Optional[str], delimiter: str = ",") -> List[str]:
    """Split ``raw`` on ``delimiter``, trimming blanks and repeated names."""
    if not raw:
        return []
    parts = [part.strip() for part in raw.split(delimiter) if part.strip()]
    seen: Dict[str, str] = {}
    for part in parts:
        seen.setdefault(part.lower(), part)
    return list(seen.values())


def validate_columns(requested: Iterable[str], actual: Iterable[str]) -> ValidationResult:
    """Check ``requested`` against the table's real columns.

    DuckDB resolves identifiers case-insensitively, so matching does too; the
    returned ColumnSet carries the catalog's spelling of each name. Missing
    names are reported sorted, as the caller typed them.
    """
    requested = list(requested)
    if not requested:
        return ValidationResult.invalid(NO_COLUMNS)

    by_lower = {name.lower(): name for name in actual}
    missing = sorted({name for name in requested if name.lower() not in by_lower})
    if missing:
        return ValidationResult.invalid(MISSING_COLUMNS, missing)

    resolved = list(dict.fromkeys(by_lower[name.lower()] for name in requested))
    return ValidationResult.valid(ColumnSet(tuple(resolved)))


__all__ = ["MISSING_COLUMNS", "NO_COLUMNS", "parse_columns", "validate_columns"]
