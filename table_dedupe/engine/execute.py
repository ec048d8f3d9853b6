"""Transactional delete-and-verify of duplicate rows.

The executor only ever opens one transaction. Inside it, every row ranked
above first in its group is removed by a single DELETE, the ranking is run
again, and the transaction commits only if no duplicate remains and the
delete removed exactly the number of rows the probe reported. Any other
path rolls back, leaving the table as it was.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

import duckdb

from . import detect, verifiers
from .errors import DedupCancelled, ExecutionError, IntegrityViolationError
from .models import ColumnSet, DedupOutcome, DuplicateReport, TargetRef

LOGGER = logging.getLogger(__name__)


def delete_query(target: TargetRef, columns: ColumnSet) -> str:
    ranked = detect.ranking_query(target, columns)
    return (
        f"DELETE FROM {target.qualified_name} "
        f"WHERE rowid IN (SELECT {detect.ROW_KEY} FROM ({ranked}) AS ranked "
        f"WHERE {detect.RANK_COLUMN} > 1)"
    )


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise DedupCancelled()


def _rollback(conn: duckdb.DuckDBPyConnection, target: TargetRef) -> None:
    try:
        conn.rollback()
    except duckdb.Error as exc:
        # A failed COMMIT has already discarded the transaction.
        LOGGER.warning("Rollback on %s reported: %s", target.display_name, exc)
    else:
        LOGGER.warning("Rolled back deduplication of %s", target.display_name)


def _delete(conn: duckdb.DuckDBPyConnection, target: TargetRef, columns: ColumnSet) -> int:
    try:
        row = conn.execute(delete_query(target, columns)).fetchone()
    except duckdb.InterruptException as exc:
        raise DedupCancelled() from exc
    except duckdb.Error as exc:
        LOGGER.error("Delete failed on %s: %s", target.display_name, exc)
        raise ExecutionError(f"Unable to delete records from table {target.display_name}.") from exc
    return int(row[0]) if row else 0


def _verify(
    conn: duckdb.DuckDBPyConnection,
    target: TargetRef,
    columns: ColumnSet,
    expected: int,
    deleted: int,
) -> None:
    try:
        remaining = detect.count_duplicates(conn, target, columns)
    except duckdb.InterruptException as exc:
        raise DedupCancelled() from exc
    if not verifiers.verify_no_duplicates(remaining):
        raise IntegrityViolationError(
            f"{remaining.total_duplicate_rows} duplicate records remain in {target.display_name} "
            "after deletion; changes rolled back."
        )
    if not verifiers.verify_deleted_count(expected, deleted):
        raise IntegrityViolationError(
            f"Deleted {deleted} records from {target.display_name} but {expected} duplicates "
            "were found; changes rolled back."
        )


def _commit(conn: duckdb.DuckDBPyConnection, target: TargetRef) -> None:
    try:
        conn.commit()
    except duckdb.Error as exc:
        LOGGER.error("Commit failed on %s: %s", target.display_name, exc)
        raise ExecutionError(f"Unable to delete records from table {target.display_name}.") from exc


def execute(
    conn: duckdb.DuckDBPyConnection,
    target: TargetRef,
    columns: ColumnSet,
    report: DuplicateReport,
    cancel: Optional[threading.Event] = None,
) -> DedupOutcome:
    """Delete the duplicates described by ``report``.

    Returns a ``noop`` outcome without opening a transaction when the report
    is empty. Raises a :class:`DedupError` after rolling back on any failure.
    """
    if not report.has_duplicates:
        LOGGER.info("No duplicates in %s; nothing to delete", target.display_name)
        return DedupOutcome.noop()

    _check_cancel(cancel)
    try:
        conn.begin()
    except duckdb.Error as exc:
        raise ExecutionError(f"Unable to open a transaction on {target.display_name}: {exc}") from exc
    try:
        _check_cancel(cancel)
        deleted = _delete(conn, target, columns)
        _check_cancel(cancel)
        _verify(conn, target, columns, report.total_duplicate_rows, deleted)
        _check_cancel(cancel)
        _commit(conn, target)
    except BaseException:
        # Any exception, KeyboardInterrupt included, discards the uncommitted delete.
        _rollback(conn, target)
        raise

    metrics = {
        "table": target.display_name,
        "columns": list(columns),
        "deleted": deleted,
    }
    LOGGER.info("Deduplication committed: %s", metrics)
    return DedupOutcome.success(
        deleted,
        f"{deleted:,} records have been deleted from {target.display_name} "
        f"based on columns {columns.display()}.",
    )


__all__ = ["delete_query", "execute"]
