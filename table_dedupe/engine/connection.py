"""Open DuckDB connections from ``duckdb://`` URLs."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

import duckdb
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .models import quote_identifier

LOGGER = logging.getLogger(__name__)

MEMORY = ":memory:"


def _is_duckdb(url: str) -> bool:
    return url.startswith("duckdb://")


def _duckdb_path(url: str) -> str:
    return url.replace("duckdb://", "", 1)


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def parse_attach(values: Optional[list[str]]) -> Dict[str, str]:
    """Turn ``NAME=PATH`` strings into an attach mapping."""
    attach: Dict[str, str] = {}
    for value in values or []:
        name, sep, path = value.partition("=")
        if not sep or not name.strip() or not path.strip():
            raise ValueError(f"Attach spec must look like NAME=PATH, got {value!r}")
        attach[name.strip()] = path.strip()
    return attach


@retry(
    reraise=True,
    retry=retry_if_exception_type(duckdb.IOException),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    stop=stop_after_attempt(3),
)
def _open(path: str) -> duckdb.DuckDBPyConnection:
    # Another process holding the file lock surfaces as IOException.
    return duckdb.connect(path)


def attach(conn: duckdb.DuckDBPyConnection, name: str, path: str) -> None:
    if path != MEMORY:
        _ensure_parent(Path(path))
    conn.execute(f"ATTACH {_sql_literal(path)} AS {quote_identifier(name)}")
    LOGGER.debug("Attached %s as %s", path, name)


def connect(url: str, attachments: Optional[Mapping[str, str]] = None) -> duckdb.DuckDBPyConnection:
    """Open ``url`` and attach any extra databases under their given names."""
    if not _is_duckdb(url):
        raise ValueError(f"Unsupported db_url: {url}")
    path = _duckdb_path(url) or MEMORY
    if path != MEMORY:
        _ensure_parent(Path(path))
    conn = _open(path)
    try:
        for name, extra in (attachments or {}).items():
            attach(conn, name, extra)
    except duckdb.Error:
        conn.close()
        raise
    LOGGER.info("Connected: %s", {"db_url": url, "attached": sorted((attachments or {}).keys())})
    return conn


__all__ = ["MEMORY", "attach", "connect", "parse_attach"]
