"""Run one or more deduplication jobs against a DuckDB database."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import duckdb
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..engine import catalog, connection, detect
from ..engine.errors import DedupError
from ..engine.models import DedupOutcome
from . import orchestrator

LOGGER = logging.getLogger(__name__)
console = Console()


@dataclass
class JobSpec:
    """One table to deduplicate."""

    table: str
    columns: str
    database: Optional[str] = None
    schema: Optional[str] = None


@dataclass
class RunConfig:
    """Arguments required to execute a batch of jobs once."""

    db_url: str
    jobs: List[JobSpec]
    attach: Dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    show_groups: int = 0


def _parse_columns_field(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return "" if value is None else str(value)


def load_config(path: str) -> RunConfig:
    """Load a YAML job file.

    Expected layout::

        db_url: duckdb://data/warehouse.duckdb
        attach:
          staging: data/staging.duckdb
        jobs:
          - table: PhoneModels
            columns: DeviceName,RAM,Price
    """
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(path)
    with src.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    if any(not isinstance(job, dict) for job in payload.get("jobs") or []):
        raise ValueError(f"{path}: every job must be a mapping")

    db_url = payload.get("db_url")
    if not db_url:
        raise ValueError(f"{path}: db_url is required")
    jobs = [
        JobSpec(
            table=str(job.get("table") or ""),
            columns=_parse_columns_field(job.get("columns")),
            database=job.get("database"),
            schema=job.get("schema"),
        )
        for job in payload.get("jobs") or []
    ]
    if not jobs:
        raise ValueError(f"{path}: at least one job is required")
    attach = {str(name): str(extra) for name, extra in (payload.get("attach") or {}).items()}
    return RunConfig(
        db_url=str(db_url),
        jobs=jobs,
        attach=attach,
        dry_run=bool(payload.get("dry_run", False)),
    )


def _log_banner(config: RunConfig) -> None:
    mode = "[yellow]probe only[/yellow]" if config.dry_run else "[red]delete duplicates[/red]"
    panel = Panel(
        f"Database: [bold]{escape(config.db_url)}[/bold]\n"
        f"Jobs: [cyan]{len(config.jobs)}[/cyan]  Mode: {mode}",
        title="Table Dedupe",
        style="bold blue",
    )
    console.print(panel)


def _log_outcome(job: JobSpec, outcome: DedupOutcome) -> None:
    table = Table(title=escape(f"{job.table} ({job.columns})"), title_style="bold")
    table.add_column("Metric", style="dim")
    table.add_column("Value")
    table.add_row("outcome", outcome.kind)
    table.add_row("duplicates", str(outcome.duplicate_count))
    table.add_row("deleted", str(outcome.deleted_count))
    table.add_row("message", escape(outcome.message))
    status = "✅ pass" if outcome.ok else "❌ fail"
    table.add_row("status", status)
    console.print(table)


def _log_groups(conn: duckdb.DuckDBPyConnection, job: JobSpec, limit: int, default_database: str) -> None:
    """Preview duplicated key combinations for a job that probed cleanly."""
    target, column_set = orchestrator.validate(
        conn, job.table, job.columns, job.database, job.schema, default_database
    )
    groups = detect.duplicate_groups(conn, target, column_set, limit=limit)
    if groups.empty:
        return
    table = Table(title=escape(f"Duplicate groups in {target.display_name}"), title_style="bold")
    for name in groups.columns:
        table.add_column(escape(str(name)))
    for _, row in groups.iterrows():
        table.add_row(*[escape(str(value)) for value in row.tolist()])
    console.print(table)


def _log_summary(results: List[tuple[JobSpec, DedupOutcome]]) -> None:
    summary = Table(title="Dedupe Summary", title_style="bold green")
    summary.add_column("Table", style="bold")
    summary.add_column("Outcome")
    summary.add_column("Deleted")
    summary.add_column("Status")
    for job, outcome in results:
        summary.add_row(escape(job.table), outcome.kind, str(outcome.deleted_count), str(outcome.status_code))
    console.print(summary)


def run_jobs(config: RunConfig, conn: Optional[duckdb.DuckDBPyConnection] = None) -> int:
    """Run every job in order; return 1 if any of them failed."""
    _log_banner(config)
    owns_conn = conn is None
    if conn is None:
        try:
            conn = connection.connect(config.db_url, config.attach)
        except duckdb.Error as exc:
            LOGGER.error("Unable to open %s: %s", config.db_url, exc)
            return 1

    results: List[tuple[JobSpec, DedupOutcome]] = []
    try:
        default_database = catalog.current_database(conn)
        for job in config.jobs:
            outcome = orchestrator.run(
                conn,
                job.table,
                job.columns,
                job.database,
                job.schema,
                default_database=default_database,
                dry_run=config.dry_run,
            )
            _log_outcome(job, outcome)
            if config.dry_run and config.show_groups and outcome.duplicate_count:
                _log_groups(conn, job, config.show_groups, default_database)
            results.append((job, outcome))
    except DedupError as exc:
        LOGGER.error("Batch aborted: %s", exc.message)
        return 1
    finally:
        if owns_conn:
            conn.close()

    _log_summary(results)
    return 0 if all(outcome.ok for _, outcome in results) else 1


__all__ = ["JobSpec", "RunConfig", "load_config", "run_jobs"]
