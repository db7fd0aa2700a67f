"""Spreadsheet import defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_int

DEFAULT_IMPORT_BATCH_SIZE = 1000
DEFAULT_HEADER_SCAN_ROWS = 20
DEFAULT_HEADER_ANCHOR = "Møllenummer (GSRN)"


@dataclass(frozen=True, slots=True)
class ImportConfig:
    batch_size: int = DEFAULT_IMPORT_BATCH_SIZE
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
    header_anchor: str = DEFAULT_HEADER_ANCHOR
    day_first: bool = True


def get_import_config() -> ImportConfig:
    return ImportConfig(
        batch_size=optional_env_int("MASTERDATA_IMPORT_BATCH_SIZE", DEFAULT_IMPORT_BATCH_SIZE),
    )
