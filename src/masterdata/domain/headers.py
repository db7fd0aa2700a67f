"""Locate the header row of a registry sheet and map its columns to fields."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

Cell: TypeAlias = object
Row: TypeAlias = "Sequence[Cell]"
Grid: TypeAlias = "Sequence[Row]"

DEFAULT_ANCHOR: Final[str] = "Møllenummer (GSRN)"
DEFAULT_SCAN_ROWS: Final[int] = 20


@dataclass(frozen=True, slots=True)
class ColumnPositions:
    """Zero-based column index per canonical field; ``None`` when the sheet lacks it."""

    gsrn: int | None = None
    original_connection_date: int | None = None
    decommissioning_date: int | None = None
    capacity_kw: int | None = None
    rotor_diameter_m: int | None = None
    hub_height_m: int | None = None
    manufacturer: int | None = None
    type_designation: int | None = None
    local_authority: int | None = None
    location_type: int | None = None
    cadastral_district: int | None = None
    cadastral_no: int | None = None
    coordinate_x: int | None = None
    coordinate_y: int | None = None
    coordinate_origin: int | None = None


CANONICAL_FIELDS: Final[frozenset[str]] = frozenset(f.name for f in fields(ColumnPositions))


@dataclass(frozen=True, slots=True)
class HeaderLayout:
    """Where the header sits and what its columns mean."""

    row_index: int
    headers: Mapping[int, str]
    columns: ColumnPositions


def cell_text(value: Cell) -> str:
    """Render a cell the way a spreadsheet would display it, trimmed."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_header(text: str) -> str:
    return text.strip().casefold()


def build_synonym_index(synonyms: Mapping[str, Sequence[str]]) -> Mapping[str, str]:
    """Invert ``{field: headers}`` into ``{normalized header: field}``.

    Raises ``ValueError`` for unknown field names or a header claimed by two fields.
    """

    index: dict[str, str] = {}
    for field_name, headers in synonyms.items():
        if field_name not in CANONICAL_FIELDS:
            raise ValueError(f"Unknown registry field in synonym table: {field_name!r}")
        for header in headers:
            key = normalize_header(header)
            owner = index.get(key)
            if owner is not None and owner != field_name:
                raise ValueError(
                    f"Header {header!r} maps to both {owner!r} and {field_name!r}"
                )
            index[key] = field_name
    return MappingProxyType(index)


class HeaderResolver:
    """Finds the header row by an anchor label and resolves synonyms to fields."""

    def __init__(
        self,
        synonyms: Mapping[str, Sequence[str]],
        *,
        anchor: str = DEFAULT_ANCHOR,
        scan_rows: int = DEFAULT_SCAN_ROWS,
    ) -> None:
        self._index = build_synonym_index(synonyms)
        self.anchor = anchor
        self._anchor = anchor.casefold()
        self._scan_rows = scan_rows

    def locate_header_row(self, grid: Grid) -> int | None:
        """Return the zero-based index of the first row holding the anchor label."""

        for row_index, row in enumerate(grid[: self._scan_rows]):
            if any(self._anchor in cell_text(cell).casefold() for cell in row):
                return row_index
        return None

    def resolve(self, grid: Grid) -> HeaderLayout | None:
        row_index = self.locate_header_row(grid)
        if row_index is None:
            return None
        headers = header_cells(grid[row_index])
        return HeaderLayout(
            row_index=row_index,
            headers=headers,
            columns=self.resolve_columns(headers),
        )

    def resolve_columns(self, headers: Mapping[int, str]) -> ColumnPositions:
        """Map raw header texts to column positions.

        Unknown headers are skipped. When two columns resolve to the same field the
        later column wins.
        """

        positions: dict[str, int] = {}
        for column, raw in headers.items():
            field_name = self._index.get(normalize_header(raw))
            if field_name is not None:
                positions[field_name] = column
        return ColumnPositions(**positions)


def header_cells(row: Row) -> dict[int, str]:
    """Map column index to raw header text for every non-blank cell."""

    headers: dict[int, str] = {}
    for column, cell in enumerate(row):
        if isinstance(cell, str):
            if cell.strip():
                headers[column] = cell
        elif cell is not None:
            headers[column] = cell_text(cell)
    return headers
