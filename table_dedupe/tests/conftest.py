import duckdb
import pytest

from table_dedupe.tools import phone_models


@pytest.fixture
def conn():
    connection = duckdb.connect(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def phones(conn):
    return phone_models.seed(conn)


@pytest.fixture
def row_count(conn):
    def _count(target) -> int:
        return conn.execute(f"SELECT COUNT(*) FROM {target.qualified_name}").fetchone()[0]

    return _count


@pytest.fixture
def table_rows(conn):
    def _rows(target) -> list:
        return conn.execute(f"SELECT * FROM {target.qualified_name} ORDER BY ALL").fetchall()

    return _rows
