from table_dedupe.engine import detect
from table_dedupe.engine.models import ColumnSet, TargetRef

PHONE_COLUMNS = ColumnSet(("DeviceName", "RAM", "Price"))


def test_count_duplicates_phone_models(conn, phones, row_count):
    report = detect.count_duplicates(conn, phones, PHONE_COLUMNS)
    assert report.total_duplicate_rows == 14
    assert report.has_duplicates
    assert row_count(phones) == 20


def test_column_order_does_not_change_groups(conn, phones):
    reordered = ColumnSet(("Price", "DeviceName", "RAM"))
    assert detect.count_duplicates(conn, phones, reordered).total_duplicate_rows == 14


def test_empty_and_unique_tables_report_zero(conn):
    conn.execute("CREATE TABLE empty_t (a INTEGER)")
    conn.execute("CREATE TABLE unique_t (a INTEGER)")
    conn.execute("INSERT INTO unique_t VALUES (1), (2), (3)")
    columns = ColumnSet(("a",))
    assert detect.count_duplicates(conn, TargetRef("memory", "main", "empty_t"), columns).total_duplicate_rows == 0
    assert detect.count_duplicates(conn, TargetRef("memory", "main", "unique_t"), columns).total_duplicate_rows == 0


def test_nulls_group_together(conn):
    conn.execute("CREATE TABLE t (a INTEGER, b VARCHAR)")
    conn.execute("INSERT INTO t VALUES (NULL, 'x'), (NULL, 'x'), (1, NULL)")
    report = detect.count_duplicates(conn, TargetRef("memory", "main", "t"), ColumnSet(("a", "b")))
    assert report.total_duplicate_rows == 1


def test_awkward_identifiers_are_quoted(conn):
    conn.execute('CREATE TABLE "odd ""name""" ("first col" INTEGER, "select" INTEGER)')
    conn.execute('INSERT INTO "odd ""name""" VALUES (1, 1), (1, 1)')
    target = TargetRef("memory", "main", 'odd "name"')
    report = detect.count_duplicates(conn, target, ColumnSet(("first col", "select")))
    assert report.total_duplicate_rows == 1
    assert '"odd ""name"""' in detect.count_query(target, ColumnSet(("first col",)))


def test_probe_does_not_mutate(conn, phones, table_rows):
    before = table_rows(phones)
    detect.count_duplicates(conn, phones, PHONE_COLUMNS)
    assert table_rows(phones) == before


def test_duplicate_groups_preview(conn, phones):
    groups = detect.duplicate_groups(conn, phones, PHONE_COLUMNS, limit=10)
    assert list(groups.columns) == ["DeviceName", "RAM", "Price", "copies"]
    assert len(groups) == 6
    assert groups.iloc[0]["DeviceName"] == "iPhone 6"
    assert int(groups.iloc[0]["copies"]) == 5
    assert int(groups["copies"].sum()) == 20
