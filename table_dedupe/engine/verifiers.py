"""Boolean verifiers for deduplication post-conditions."""
from __future__ import annotations

from .models import DuplicateReport


def verify_no_duplicates(report: DuplicateReport) -> bool:
    """Return True when no row ranks above first in its group."""
    return report.total_duplicate_rows == 0


def verify_deleted_count(expected: int, deleted: int) -> bool:
    """Return True when the delete removed exactly the probed duplicates."""
    return expected == deleted


__all__ = ["verify_no_duplicates", "verify_deleted_count"]
