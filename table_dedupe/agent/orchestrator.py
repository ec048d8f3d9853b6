"""Public entry point sequencing validation, probing and deletion."""
from __future__ import annotations

import logging
import threading
from typing import Optional, Tuple

import duckdb

from ..engine import catalog, columns as column_rules, detect, execute
from ..engine.errors import (
    ConfigError,
    DedupCancelled,
    DedupError,
    NotFoundError,
    SchemaMismatchError,
)
from ..engine.models import ColumnSet, DedupOutcome, TargetRef

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMA = "main"


def _require_inputs(table: Optional[str], raw_columns: Optional[str]) -> Tuple[str, list]:
    if not table or not table.strip():
        raise ConfigError("Table name not specified.")
    requested = column_rules.parse_columns(raw_columns)
    if not requested:
        raise ConfigError("Column list is empty or not specified.")
    return table.strip(), requested


def _resolve_target(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    database: Optional[str],
    schema: Optional[str],
    default_database: Optional[str],
) -> TargetRef:
    database = database or default_database or catalog.current_database(conn)
    schema = schema or DEFAULT_SCHEMA

    # Each check presumes the previous one passed. Names are matched without
    # regard to case and carried forward in the catalog's spelling.
    found_database = catalog.find_database(conn, database)
    if found_database is None:
        raise NotFoundError(f"Database [{database}] does not exist.")
    found_schema = catalog.find_schema(conn, found_database, schema)
    if found_schema is None:
        raise NotFoundError(f"Schema [{schema}] does not exist in database [{found_database}].")
    found_table = catalog.find_table(conn, found_database, found_schema, table)
    if found_table is None:
        raise NotFoundError(
            f"Table [{table}] does not exist in schema [{found_schema}] "
            f"in database [{found_database}]."
        )
    return TargetRef(database=found_database, schema=found_schema, table=found_table)


def _validate_columns(conn: duckdb.DuckDBPyConnection, target: TargetRef, requested: list) -> ColumnSet:
    actual = catalog.list_columns(conn, target.database, target.schema, target.table)
    if any(name.lower() == "rowid" for name in actual):
        # Survivors are chosen by the rowid pseudo-column, which such a column hides.
        raise ConfigError(
            f"Table {target.display_name} has a column named rowid and cannot be deduplicated."
        )
    result = column_rules.validate_columns(requested, actual)
    if not result.ok:
        if not result.offending_columns:
            raise ConfigError("Column list is empty or not specified.")
        raise SchemaMismatchError(
            f"The following columns do not exist in table {target.display_name}: "
            + ",".join(result.offending_columns),
            result.offending_columns,
        )
    return result.columns


def validate(
    conn: duckdb.DuckDBPyConnection,
    table: Optional[str],
    columns: Optional[str],
    database: Optional[str] = None,
    schema: Optional[str] = None,
    default_database: Optional[str] = None,
) -> Tuple[TargetRef, ColumnSet]:
    """Resolve and check the target and its columns, raising on the first failure."""
    table_name, requested = _require_inputs(table, columns)
    target = _resolve_target(conn, table_name, database, schema, default_database)
    return target, _validate_columns(conn, target, requested)


def run(
    conn: duckdb.DuckDBPyConnection,
    table: Optional[str],
    columns: Optional[str],
    database: Optional[str] = None,
    schema: Optional[str] = None,
    *,
    default_database: Optional[str] = None,
    dry_run: bool = False,
    cancel: Optional[threading.Event] = None,
) -> DedupOutcome:
    """Deduplicate ``table`` on the comma separated ``columns``.

    ``database`` falls back to ``default_database`` and then to the
    connection's current database; ``schema`` falls back to ``main``. With
    ``dry_run`` the duplicates are counted but nothing is deleted.
    """
    try:
        target, column_set = validate(conn, table, columns, database, schema, default_database)
        try:
            report = detect.count_duplicates(conn, target, column_set)
        except duckdb.InterruptException as exc:
            raise DedupCancelled() from exc
        if dry_run:
            outcome = DedupOutcome.probe(
                report.total_duplicate_rows,
                f"{report.total_duplicate_rows:,} duplicate records found in {target.display_name} "
                f"based on columns {column_set.display()}.",
            )
        else:
            outcome = execute.execute(conn, target, column_set, report, cancel=cancel)
    except SchemaMismatchError as exc:
        outcome = DedupOutcome.failure(exc.reason, exc.message, exc.columns)
    except DedupError as exc:
        outcome = DedupOutcome.failure(exc.reason, exc.message)

    log = LOGGER.info if outcome.ok else LOGGER.warning
    log("Deduplication outcome: %s", {"kind": outcome.kind, "status": outcome.status_code, "message": outcome.message})
    return outcome


def deduplicate(
    conn: duckdb.DuckDBPyConnection,
    table: Optional[str],
    columns: Optional[str],
    database: Optional[str] = None,
    schema: Optional[str] = None,
    **kwargs,
) -> Tuple[int, str]:
    """Return ``(status_code, message)``; 0 on success or no-op, 1 on failure."""
    try:
        outcome = run(conn, table, columns, database, schema, **kwargs)
    except duckdb.Error as exc:
        LOGGER.exception("Unexpected store failure: %s", exc)
        return 1, f"Deduplication failed: {exc}"
    return outcome.status_code, outcome.message


__all__ = ["DEFAULT_SCHEMA", "deduplicate", "run", "validate"]
