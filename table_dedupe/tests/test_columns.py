from table_dedupe.engine import columns


def test_parse_trims_and_drops_empty_tokens():
    assert columns.parse_columns(" City , PostalCode,, ,") == ["City", "PostalCode"]


def test_parse_keeps_first_spelling_of_repeats():
    assert columns.parse_columns("City,city,CITY,Zip") == ["City", "Zip"]


def test_parse_empty_inputs():
    assert columns.parse_columns("") == []
    assert columns.parse_columns(None) == []
    assert columns.parse_columns(" , ,") == []


def test_parse_custom_delimiter():
    assert columns.parse_columns("a|b", delimiter="|") == ["a", "b"]


def test_validate_empty_request():
    result = columns.validate_columns([], {"City"})
    assert not result.ok
    assert result.reason == columns.NO_COLUMNS


def test_validate_reports_only_unknown_columns():
    result = columns.validate_columns(["City", "FakeCol"], {"City"})
    assert not result.ok
    assert result.reason == columns.MISSING_COLUMNS
    assert result.offending_columns == ("FakeCol",)


def test_validate_missing_columns_are_sorted():
    result = columns.validate_columns(["Zeta", "City", "Alpha"], {"City"})
    assert result.offending_columns == ("Alpha", "Zeta")


def test_validate_resolves_catalog_spelling():
    result = columns.validate_columns(["devicename", "RAM"], {"DeviceName", "RAM", "Price"})
    assert result.ok
    assert result.columns.names == ("DeviceName", "RAM")
