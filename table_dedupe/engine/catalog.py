"""Read-only metadata lookups against the DuckDB catalog.

Every lookup names its target database explicitly, so a table living in an
attached database is inspected through that database's own registry rather
than through whichever database the connection currently uses.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

import duckdb

from .errors import CatalogUnavailable

LOGGER = logging.getLogger(__name__)


def _scalar(conn: duckdb.DuckDBPyConnection, query: str, params: Sequence[object] = ()) -> object:
    try:
        row = conn.execute(query, list(params)).fetchone()
    except duckdb.Error as exc:
        LOGGER.error("Catalog lookup failed: %s", exc)
        raise CatalogUnavailable(f"Metadata catalog is unavailable: {exc}") from exc
    return row[0] if row else None


def current_database(conn: duckdb.DuckDBPyConnection) -> str:
    return str(_scalar(conn, "SELECT current_database()"))


def find_database(conn: duckdb.DuckDBPyConnection, name: str) -> Optional[str]:
    """Return the catalog's spelling of database ``name``, or None."""
    found = _scalar(
        conn,
        """
        SELECT database_name
        FROM duckdb_databases()
        WHERE lower(database_name) = lower(?)
        ORDER BY database_name
        LIMIT 1
        """,
        [name],
    )
    return None if found is None else str(found)


def find_schema(conn: duckdb.DuckDBPyConnection, database: str, name: str) -> Optional[str]:
    found = _scalar(
        conn,
        """
        SELECT schema_name
        FROM information_schema.schemata
        WHERE catalog_name = ? AND lower(schema_name) = lower(?)
        ORDER BY schema_name
        LIMIT 1
        """,
        [database, name],
    )
    return None if found is None else str(found)


def find_table(conn: duckdb.DuckDBPyConnection, database: str, schema: str, name: str) -> Optional[str]:
    """Return the stored name of a base table; views do not qualify."""
    found = _scalar(
        conn,
        """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_catalog = ?
          AND table_schema = ?
          AND lower(table_name) = lower(?)
          AND table_type = 'BASE TABLE'
        ORDER BY table_name
        LIMIT 1
        """,
        [database, schema, name],
    )
    return None if found is None else str(found)


def database_exists(conn: duckdb.DuckDBPyConnection, name: str) -> bool:
    return find_database(conn, name) is not None


def schema_exists(conn: duckdb.DuckDBPyConnection, database: str, name: str) -> bool:
    return find_schema(conn, database, name) is not None


def table_exists(conn: duckdb.DuckDBPyConnection, database: str, schema: str, name: str) -> bool:
    return find_table(conn, database, schema, name) is not None


def list_columns(conn: duckdb.DuckDBPyConnection, database: str, schema: str, table: str) -> Set[str]:
    query = """
        SELECT column_name
        FROM information_schema.columns
        WHERE table_catalog = ? AND table_schema = ? AND table_name = ?
        ORDER BY ordinal_position
    """
    try:
        rows: List[tuple] = conn.execute(query, [database, schema, table]).fetchall()
    except duckdb.Error as exc:
        LOGGER.error("Column lookup failed: %s", exc)
        raise CatalogUnavailable(f"Metadata catalog is unavailable: {exc}") from exc
    return {str(row[0]) for row in rows}


__all__ = [
    "current_database",
    "database_exists",
    "find_database",
    "find_schema",
    "find_table",
    "list_columns",
    "schema_exists",
    "table_exists",
]
