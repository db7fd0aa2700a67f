"""Turn raw registry rows into typed field values.

Every value parser is total: blank or unparsable input yields ``None`` instead of
raising, so a single odd cell never costs the whole row.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final, TypeAlias

from dateutil import parser as date_parser

from masterdata.domain.headers import cell_text
from masterdata.domain.model import RegistryFields

if TYPE_CHECKING:
    from masterdata.domain.headers import Cell, ColumnPositions, Row

_NON_INTEGER_CHARS: Final = re.compile(r"[^0-9-]")
_INTEGER: Final = re.compile(r"-?[0-9]+")


def parse_text(value: Cell) -> str | None:
    text = cell_text(value)
    return text or None


def parse_int(value: Cell) -> int | None:
    """Parse an integer column.

    Text keeps digits and minus signs only, since a dot in registry text is a
    thousands separator: ``"2.000 kW"`` becomes 2000 and ``"1650.7"`` becomes 16507.
    Native numeric cells carry no separators and are truncated toward zero, so a
    1650.7 cell becomes 1650.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    cleaned = _NON_INTEGER_CHARS.sub("", cell_text(value))
    if not _INTEGER.fullmatch(cleaned):
        return None
    return int(cleaned)


def parse_decimal(value: Cell) -> Decimal | None:
    """Parse with comma as the decimal separator.

    When a comma is present any dots are thousands separators: ``"1.234,56"`` and
    ``"1234,56"`` both give ``Decimal("1234.56")``. Without a comma the text is read
    as-is, so ``"12.5"`` stays 12.5.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    text = cell_text(value).replace(" ", "")
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_date(value: Cell, *, day_first: bool = True) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = cell_text(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date_parser.parse(text, dayfirst=day_first).date()
    except (ValueError, OverflowError):
        return None


def is_valid_gsrn(value: str | None) -> bool:
    return value is not None and value.isascii() and value.isdigit()


@dataclass(frozen=True, slots=True)
class ParsedRow:
    row_number: int
    gsrn: str
    values: RegistryFields


@dataclass(frozen=True, slots=True)
class Skipped:
    row_number: int
    reason: str


@dataclass(frozen=True, slots=True)
class RowError:
    row_number: int
    message: str

    def render(self) -> str:
        return f"Row {self.row_number}: {self.message}"


RowOutcome: TypeAlias = "ParsedRow | Skipped | RowError"


class RecordParser:
    """Parse data rows against resolved column positions.

    The parser owns the batch's identifier set: the first row carrying a GSRN wins
    and later rows with the same GSRN come back as ``Skipped``.
    """

    def __init__(self, columns: ColumnPositions, *, day_first: bool = True) -> None:
        self._columns = columns
        self._day_first = day_first
        self._seen: set[str] = set()

    def parse(self, row: Row, *, row_number: int) -> RowOutcome:
        gsrn = parse_text(self._cell(row, self._columns.gsrn))
        if gsrn is None or not is_valid_gsrn(gsrn):
            return Skipped(row_number, "invalid identifier")
        if gsrn in self._seen:
            return Skipped(row_number, "duplicate identifier")
        self._seen.add(gsrn)

        try:
            values = self._parse_values(row)
        except Exception as exc:  # noqa: BLE001
            return RowError(row_number, str(exc))

        return ParsedRow(row_number=row_number, gsrn=gsrn, values=values)

    def forget(self, gsrn: str) -> None:
        """Let a later row supply ``gsrn`` again after its first row was not stored."""

        self._seen.discard(gsrn)

    def _parse_values(self, row: Row) -> RegistryFields:
        c = self._columns
        return RegistryFields(
            original_connection_date=self._date(row, c.original_connection_date),
            decommissioning_date=self._date(row, c.decommissioning_date),
            capacity_kw=parse_int(self._cell(row, c.capacity_kw)),
            rotor_diameter_m=parse_decimal(self._cell(row, c.rotor_diameter_m)),
            hub_height_m=parse_decimal(self._cell(row, c.hub_height_m)),
            manufacturer=parse_text(self._cell(row, c.manufacturer)),
            type_designation=parse_text(self._cell(row, c.type_designation)),
            local_authority=parse_text(self._cell(row, c.local_authority)),
            location_type=parse_text(self._cell(row, c.location_type)),
            cadastral_district=parse_text(self._cell(row, c.cadastral_district)),
            cadastral_no=parse_text(self._cell(row, c.cadastral_no)),
            coordinate_x=parse_decimal(self._cell(row, c.coordinate_x)),
            coordinate_y=parse_decimal(self._cell(row, c.coordinate_y)),
            coordinate_origin=parse_text(self._cell(row, c.coordinate_origin)),
        )

    def _date(self, row: Row, column: int | None) -> date | None:
        return parse_date(self._cell(row, column), day_first=self._day_first)

    @staticmethod
    def _cell(row: Row, column: int | None) -> Cell:
        if column is None or column >= len(row):
            return None
        return row[column]
