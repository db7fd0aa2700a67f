from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

import pytest

from masterdata.domain.headers import (
    ColumnPositions,
    HeaderResolver,
    build_synonym_index,
    cell_text,
    header_cells,
)
from tests.helpers.registry import HEADER_ROW, make_grid, make_row

if TYPE_CHECKING:
    from collections.abc import Mapping


@pytest.fixture
def resolver(header_synonyms: Mapping[str, tuple[str, ...]]) -> HeaderResolver:
    return HeaderResolver(header_synonyms)


def test_locates_header_below_title_rows(resolver: HeaderResolver) -> None:
    grid = make_grid([make_row("570714700000000001")], preamble=7)

    assert resolver.locate_header_row(grid) == 7


def test_anchor_match_is_case_insensitive_substring(resolver: HeaderResolver) -> None:
    grid = [("Oversigt",), (None, "  MØLLENUMMER (gsrn) - unik  ")]

    assert resolver.locate_header_row(grid) == 1


def test_header_outside_scan_window_is_not_found(
    header_synonyms: Mapping[str, tuple[str, ...]],
) -> None:
    resolver = HeaderResolver(header_synonyms, scan_rows=5)
    grid = make_grid([], preamble=5)

    assert resolver.locate_header_row(grid) is None
    assert resolver.resolve(grid) is None


def test_resolves_every_danish_column(resolver: HeaderResolver) -> None:
    layout = resolver.resolve(make_grid([], preamble=2))

    assert layout is not None
    assert layout.row_index == 2
    assert layout.columns == ColumnPositions(
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


def test_resolves_english_headers_and_ignores_unknown(resolver: HeaderResolver) -> None:
    columns = resolver.resolve_columns(
        {0: "  gsrn ", 2: "Capacity (kW)", 3: "Colour", 5: "MANUFACTURER"}
    )

    assert columns.gsrn == 0
    assert columns.capacity_kw == 2
    assert columns.manufacturer == 5
    assert columns.hub_height_m is None


def test_later_duplicate_header_wins(resolver: HeaderResolver) -> None:
    columns = resolver.resolve_columns({1: "Fabrikat", 4: "Manufacturer"})

    assert columns.manufacturer == 4


def test_multiline_header_variant(resolver: HeaderResolver) -> None:
    columns = resolver.resolve_columns({0: "Kapacitet\n(kW)", 1: HEADER_ROW[12]})

    assert columns.capacity_kw == 0
    assert columns.coordinate_x == 1


def test_header_cells_skip_blanks() -> None:
    assert header_cells(["GSRN", None, "  ", "Fabrikat", 2024]) == {
        0: "GSRN",
        3: "Fabrikat",
        4: "2024",
    }


def test_unknown_field_in_synonym_table_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown registry field"):
        build_synonym_index({"colour": ["Farve"]})


def test_header_claimed_by_two_fields_is_rejected() -> None:
    with pytest.raises(ValueError, match="maps to both"):
        build_synonym_index({"manufacturer": ["Model"], "type_designation": ["model"]})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("  text ", "text"),
        (2000.0, "2000"),
        (12.5, "12.5"),
        (datetime(2003, 2, 1), "2003-02-01"),
        (date(2003, 2, 1), "2003-02-01"),
    ],
)
def test_cell_text(value: object, expected: str) -> None:
    assert cell_text(value) == expected
