"""Duplicate detection probes.

Rows are partitioned by the dedupe columns and ranked with ``ROW_NUMBER()``.
Within a partition the ordering is the key columns followed by ``rowid``, so
rank 1 (the survivor) is always the earliest stored row of its group. Any
row ranked above 1 is a duplicate.
"""
from __future__ import annotations

import logging

import duckdb
import pandas as pd

from .errors import ExecutionError
from .models import ColumnSet, DuplicateReport, TargetRef

LOGGER = logging.getLogger(__name__)

RANK_COLUMN = "duplicate_rank"
ROW_KEY = "row_key"


def ranking_query(target: TargetRef, columns: ColumnSet) -> str:
    """Sub-select yielding ``row_key`` and ``duplicate_rank`` for every row.

    Only names already checked against the catalog may reach this function;
    they are quoted as identifiers, never bound as values.
    """
    cols = columns.quoted()
    return (
        f"SELECT rowid AS {ROW_KEY}, "
        f"ROW_NUMBER() OVER (PARTITION BY {cols} ORDER BY {cols}, rowid) AS {RANK_COLUMN} "
        f"FROM {target.qualified_name}"
    )


def count_query(target: TargetRef, columns: ColumnSet) -> str:
    return f"SELECT COUNT(*) FROM ({ranking_query(target, columns)}) AS ranked WHERE {RANK_COLUMN} > 1"


def count_duplicates(conn: duckdb.DuckDBPyConnection, target: TargetRef, columns: ColumnSet) -> DuplicateReport:
    """Count rows that are not the first occurrence of their key. Read-only."""
    try:
        row = conn.execute(count_query(target, columns)).fetchone()
    except duckdb.InterruptException:
        raise
    except duckdb.Error as exc:
        LOGGER.error("Duplicate probe failed for %s: %s", target.display_name, exc)
        raise ExecutionError(f"Unable to analyze table {target.display_name}: {exc}") from exc
    report = DuplicateReport(total_duplicate_rows=int(row[0]) if row else 0)
    LOGGER.info(
        "Duplicate probe complete: %s",
        {"table": target.display_name, "columns": list(columns), "duplicates": report.total_duplicate_rows},
    )
    return report


def duplicate_groups(
    conn: duckdb.DuckDBPyConnection,
    target: TargetRef,
    columns: ColumnSet,
    limit: int = 20,
) -> pd.DataFrame:
    """Return the duplicated key combinations with their copy counts."""
    cols = columns.quoted()
    query = f"""
        SELECT {cols}, COUNT(*) AS copies
        FROM {target.qualified_name}
        GROUP BY {cols}
        HAVING COUNT(*) > 1
        ORDER BY copies DESC, {cols}
        LIMIT ?
    """
    try:
        return conn.execute(query, [int(limit)]).df()
    except duckdb.Error as exc:
        raise ExecutionError(f"Unable to analyze table {target.display_name}: {exc}") from exc


__all__ = ["RANK_COLUMN", "count_duplicates", "count_query", "duplicate_groups", "ranking_query"]
