"""Command-line interface for the table deduplication engine."""
from __future__ import annotations

import argparse
import logging

import yaml

from .agent.loop import JobSpec, RunConfig, load_config, run_jobs
from .engine.connection import parse_attach

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db", type=str, required=True, help="Database URL, e.g. duckdb://data/app.duckdb")
    parser.add_argument("--database", type=str, help="Database holding the table (defaults to the connected one)")
    parser.add_argument("--schema", type=str, help="Schema holding the table (defaults to main)")
    parser.add_argument("--table", type=str, required=True)
    parser.add_argument("--columns", type=str, required=True, help="Comma-separated columns defining duplicates")
    parser.add_argument(
        "--attach",
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Attach another DuckDB file under NAME; may be repeated",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remove duplicate rows from a table")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Delete duplicate rows")
    _add_target_args(run_parser)

    probe_parser = subparsers.add_parser("probe", help="Count duplicate rows without deleting")
    _add_target_args(probe_parser)
    probe_parser.add_argument("--show-groups", type=int, default=0, help="Preview up to N duplicated keys")

    batch_parser = subparsers.add_parser("batch", help="Run the jobs listed in a YAML file")
    batch_parser.add_argument("config", type=str)
    batch_parser.add_argument("--dry-run", action="store_true")

    return parser


def _parse_target_args(args: argparse.Namespace) -> RunConfig:
    job = JobSpec(table=args.table, columns=args.columns, database=args.database, schema=args.schema)
    return RunConfig(
        db_url=args.db,
        jobs=[job],
        attach=parse_attach(args.attach),
        dry_run=args.command == "probe",
        show_groups=getattr(args, "show_groups", 0),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "batch":
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            parser.error(f"job file not found: {args.config}")
        except (ValueError, yaml.YAMLError) as exc:
            parser.error(f"invalid job file: {exc}")
        if args.dry_run:
            config.dry_run = True
    else:
        try:
            config = _parse_target_args(args)
        except ValueError as exc:
            parser.error(str(exc))

    return run_jobs(config)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
