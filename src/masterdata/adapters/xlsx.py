"""Read registry workbooks into plain row grids."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

if TYPE_CHECKING:
    from pathlib import Path

    from masterdata.domain.headers import Cell

log = getLogger(__name__)


class SpreadsheetError(RuntimeError):
    """Raised when a workbook cannot be opened or holds no worksheet."""


def read_first_worksheet(path: Path) -> list[tuple[Cell, ...]]:
    """Return every row of the first worksheet as a tuple of cell values.

    Formulas come back as their cached values. Row ``n`` of the sheet is at index
    ``n - 1``.
    """

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as exc:
        raise SpreadsheetError(f"Could not open workbook {path.name}: {exc}") from exc

    try:
        if not workbook.worksheets:
            raise SpreadsheetError(f"Workbook {path.name} contains no worksheet")
        sheet = workbook.worksheets[0]
        rows = [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    log.debug("Read %d rows from sheet %r of %s", len(rows), sheet.title, path.name)
    return rows
