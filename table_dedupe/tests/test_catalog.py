import duckdb
import pytest

from table_dedupe.engine import catalog, connection
from table_dedupe.engine.errors import CatalogUnavailable


@pytest.fixture
def other(conn):
    connection.attach(conn, "other", connection.MEMORY)
    conn.execute("CREATE SCHEMA other.sales")
    conn.execute("CREATE TABLE other.sales.orders (OrderID INTEGER, City VARCHAR, PostalCode VARCHAR)")
    conn.execute("CREATE VIEW other.sales.order_cities AS SELECT City FROM other.sales.orders")
    return conn


def test_current_database(conn):
    assert catalog.current_database(conn) == "memory"


def test_database_exists(other):
    assert catalog.database_exists(other, "memory")
    assert catalog.database_exists(other, "other")
    assert not catalog.database_exists(other, "missing")


def test_schema_lookup_is_scoped_to_database(other):
    assert catalog.schema_exists(other, "other", "sales")
    assert catalog.schema_exists(other, "memory", "main")
    assert not catalog.schema_exists(other, "memory", "sales")


def test_table_exists_excludes_views(other):
    assert catalog.table_exists(other, "other", "sales", "orders")
    assert not catalog.table_exists(other, "other", "sales", "order_cities")
    assert not catalog.table_exists(other, "memory", "sales", "orders")


def test_list_columns(other):
    assert catalog.list_columns(other, "other", "sales", "orders") == {"OrderID", "City", "PostalCode"}
    assert catalog.list_columns(other, "other", "sales", "nope") == set()


def test_closed_connection_is_catalog_unavailable():
    closed = duckdb.connect(":memory:")
    closed.close()
    with pytest.raises(CatalogUnavailable):
        catalog.database_exists(closed, "memory")


def test_find_returns_catalog_spelling(other):
    assert catalog.find_database(other, "OTHER") == "other"
    assert catalog.find_schema(other, "other", "Sales") == "sales"
    assert catalog.find_table(other, "other", "sales", "ORDERS") == "orders"
    assert catalog.find_table(other, "other", "sales", "ORDER_CITIES") is None
    assert catalog.find_database(other, "missing") is None
