"""Seed the PhoneModels sample table and optionally deduplicate it.

The table starts with five distinct phones, then receives fifteen repeats
(including a new model inserted twice), giving twenty rows over six distinct
``(DeviceName, RAM, Price)`` combinations.
"""

from __future__ import annotations

import argparse
from typing import List, Sequence, Tuple

import duckdb
import pandas as pd

from ..agent import orchestrator
from ..engine import connection
from ..engine.models import TargetRef

TABLE = "PhoneModels"
DEDUPE_COLUMNS = "DeviceName,RAM,Price"

Phone = Tuple[str, int, float]

ORIGINAL_ROWS: List[Phone] = [
    ("iPhone 6", 16, 299.00),
    ("Samsung Galaxy 3", 32, 199.99),
    ("BlackBerry Bold", 8, 495.90),
    ("iPhone 12 Mini", 64, 699.00),
    ("Nokia 1100", 4, 89.95),
]

REPEATED_ROWS: List[Phone] = [
    ("iPhone 6", 16, 299.00),
    ("Samsung Galaxy 3", 32, 199.99),
    ("iPhone 12 Mini", 64, 699.00),
    ("Nokia 1100", 4, 89.95),
    ("iPhone 6", 16, 299.00),
    ("Samsung Galaxy 3", 32, 199.99),
    ("BlackBerry Bold", 8, 495.90),
    ("iPhone 12", 64, 799.00),
    ("Nokia 1100", 4, 89.95),
    ("iPhone 6", 16, 299.00),
    ("Samsung Galaxy 3", 32, 199.99),
    ("BlackBerry Bold", 8, 495.90),
    ("iPhone 12", 64, 799.00),
    ("Nokia 1100", 4, 89.95),
    ("iPhone 6", 16, 299.00),
]


def _frame(rows: Sequence[Phone], first_id: int) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=["DeviceName", "RAM", "Price"])
    df.insert(0, "PhoneID", range(first_id, first_id + len(rows)))
    return df


def seed(conn: duckdb.DuckDBPyConnection, database: str | None = None, schema: str = "main") -> TargetRef:
    """(Re)create PhoneModels and load all twenty sample rows, PhoneID 1..20."""
    database = database or str(conn.execute("SELECT current_database()").fetchone()[0])
    target = TargetRef(database=database, schema=schema, table=TABLE)

    conn.execute(f"DROP TABLE IF EXISTS {target.qualified_name}")
    conn.execute(
        f"""
        CREATE TABLE {target.qualified_name} (
            PhoneID INTEGER NOT NULL,
            DeviceName VARCHAR,
            RAM INTEGER,
            Price DECIMAL(10, 2)
        )
        """
    )
    next_id = 1
    for batch in (ORIGINAL_ROWS, REPEATED_ROWS):
        conn.register("phone_stage", _frame(batch, next_id))
        conn.execute(
            f"INSERT INTO {target.qualified_name} (PhoneID, DeviceName, RAM, Price) "
            "SELECT PhoneID, DeviceName, RAM, Price FROM phone_stage"
        )
        conn.unregister("phone_stage")
        next_id += len(batch)
    return target


def snapshot(conn: duckdb.DuckDBPyConnection, target: TargetRef) -> pd.DataFrame:
    return conn.execute(
        f"SELECT * FROM {target.qualified_name} ORDER BY DeviceName, RAM, Price, PhoneID"
    ).df()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the PhoneModels sample table")
    parser.add_argument("--db", type=str, default="duckdb://:memory:", help="Database URL")
    parser.add_argument("--dedupe", action="store_true", help="Deduplicate the table after seeding")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    conn = connection.connect(args.db)
    try:
        target = seed(conn)
        print(snapshot(conn, target).to_string(index=False))
        if not args.dedupe:
            return 0
        status, message = orchestrator.deduplicate(conn, TABLE, DEDUPE_COLUMNS)
        print(message)
        print(snapshot(conn, target).to_string(index=False))
        return status
    finally:
        conn.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
