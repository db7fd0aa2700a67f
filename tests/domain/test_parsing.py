from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from masterdata.domain.headers import ColumnPositions
from masterdata.domain.parsing import (
    ParsedRow,
    RecordParser,
    RowError,
    Skipped,
    parse_date,
    parse_decimal,
    parse_int,
    parse_text,
)
from tests.helpers.registry import make_row

COLUMNS = ColumnPositions(
    gsrn=0,
    original_connection_date=1,
    decommissioning_date=2,
    capacity_kw=3,
    rotor_diameter_m=4,
    hub_height_m=5,
    manufacturer=6,
    type_designation=7,
    local_authority=8,
    location_type=9,
    cadastral_no=10,
    cadastral_district=11,
    coordinate_x=12,
    coordinate_y=13,
    coordinate_origin=14,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2.000 kW", 2000),
        ("1 650", 1650),
        ("-5", -5),
        (850, 850),
        (600.0, 600),
        (1650.7, 1650),
        ("1650.7", 16507),
        ("", None),
        (None, None),
        ("n/a", None),
        ("5-5", None),
    ],
)
def test_parse_int(raw: object, expected: int | None) -> None:
    assert parse_int(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1.234,56", Decimal("1234.56")),
        ("1234,56", Decimal("1234.56")),
        ("12.5", Decimal("12.5")),
        ("80", Decimal(80)),
        (41.5, Decimal("41.5")),
        ("abc", None),
        ("", None),
        ("NaN", None),
    ],
)
def test_parse_decimal(raw: object, expected: Decimal | None) -> None:
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (datetime(1999, 12, 31, 0, 0), date(1999, 12, 31)),
        (date(2001, 5, 4), date(2001, 5, 4)),
        ("2003-02-01", date(2003, 2, 1)),
        ("01-02-2003", date(2003, 2, 1)),
        ("01.02.2003", date(2003, 2, 1)),
        ("not a date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date_day_first(raw: object, expected: date | None) -> None:
    assert parse_date(raw) == expected


def test_parse_date_month_first() -> None:
    assert parse_date("01/02/2003", day_first=False) == date(2003, 1, 2)


def test_parse_text_trims_and_blanks_to_none() -> None:
    assert parse_text("  Vestas ") == "Vestas"
    assert parse_text("   ") is None


def test_parses_full_row() -> None:
    parser = RecordParser(COLUMNS)

    outcome = parser.parse(make_row(" 570714700000000001 "), row_number=2)

    assert isinstance(outcome, ParsedRow)
    assert outcome.gsrn == "570714700000000001"
    values = outcome.values
    assert values.original_connection_date == date(2003, 2, 1)
    assert values.decommissioning_date is None
    assert values.capacity_kw == 2000
    assert values.rotor_diameter_m == Decimal("80.5")
    assert values.hub_height_m == Decimal(60)
    assert values.cadastral_no == "12a"
    assert values.coordinate_x == Decimal("447123.45")
    assert values.coordinate_y == Decimal("6212345.67")


@pytest.mark.parametrize("gsrn", [None, "", "   ", "57071A", "12 34", "１２３"])
def test_invalid_identifiers_are_skipped(gsrn: object) -> None:
    outcome = RecordParser(COLUMNS).parse(make_row(gsrn), row_number=9)

    assert outcome == Skipped(9, "invalid identifier")


def test_numeric_identifier_cell_is_accepted() -> None:
    outcome = RecordParser(COLUMNS).parse(make_row(570714700000000001), row_number=3)

    assert isinstance(outcome, ParsedRow)
    assert outcome.gsrn == "570714700000000001"


def test_first_occurrence_of_identifier_wins() -> None:
    parser = RecordParser(COLUMNS)

    first = parser.parse(make_row("111", manufacturer="First"), row_number=2)
    second = parser.parse(make_row("111", manufacturer="Second"), row_number=3)

    assert isinstance(first, ParsedRow)
    assert first.values.manufacturer == "First"
    assert second == Skipped(3, "duplicate identifier")


def test_missing_columns_leave_fields_absent() -> None:
    parser = RecordParser(ColumnPositions(gsrn=0, manufacturer=1))

    outcome = parser.parse(("222", "Siemens"), row_number=4)

    assert isinstance(outcome, ParsedRow)
    assert outcome.values.manufacturer == "Siemens"
    assert outcome.values.capacity_kw is None
    assert outcome.values.original_connection_date is None


def test_short_row_is_padded_with_blanks() -> None:
    outcome = RecordParser(COLUMNS).parse(("333", "2010-06-01"), row_number=5)

    assert isinstance(outcome, ParsedRow)
    assert outcome.values.original_connection_date == date(2010, 6, 1)
    assert outcome.values.coordinate_origin is None


def test_unexpected_failure_becomes_row_error() -> None:
    class Exploding:
        def __str__(self) -> str:
            raise RuntimeError("cell exploded")

    outcome = RecordParser(COLUMNS).parse(make_row("444", manufacturer=Exploding()), row_number=12)

    assert isinstance(outcome, RowError)
    assert outcome.render() == "Row 12: cell exploded"
