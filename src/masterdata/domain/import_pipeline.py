"""Run a registry grid through header resolution, parsing and upserting."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from masterdata.domain.parsing import ParsedRow, RecordParser, RowError
from masterdata.domain.upsert import (
    DEFAULT_BATCH_SIZE,
    BatchCommitError,
    DeduplicatingUpserter,
)

if TYPE_CHECKING:
    from masterdata.domain.headers import Grid, HeaderResolver
    from masterdata.domain.ports import RegistryUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class ImportResult:
    imported_count: int = 0
    updated_count: int = 0
    total_count: int = 0
    errors: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> ImportResult:
        return cls(errors=[message])

    def as_dict(self) -> dict[str, Any]:
        return {
            "importedCount": self.imported_count,
            "updatedCount": self.updated_count,
            "totalCount": self.total_count,
            "errors": list(self.errors),
        }


class ImportPipeline:
    """Import one registry grid.

    Each call to :meth:`run` builds a fresh parser, so duplicate detection never
    leaks between runs. Row numbers in errors are 1-based sheet rows.
    """

    def __init__(
        self,
        *,
        headers: HeaderResolver,
        uow: RegistryUnitOfWork,
        batch_size: int = DEFAULT_BATCH_SIZE,
        day_first: bool = True,
    ) -> None:
        self._headers = headers
        self._uow = uow
        self._batch_size = batch_size
        self._day_first = day_first

    def run(self, grid: Grid) -> ImportResult:
        layout = self._headers.resolve(grid)
        if layout is None:
            log.error("Header row not found")
            return ImportResult.failed(
                f"Could not find header row: no cell contains {self._headers.anchor!r}"
            )
        log.debug("Header row at sheet row %d: %s", layout.row_index + 1, layout.columns)

        parser = RecordParser(layout.columns, day_first=self._day_first)
        upserter = DeduplicatingUpserter(self._uow, batch_size=self._batch_size)
        errors: list[str] = []

        for index in range(layout.row_index + 1, len(grid)):
            row_number = index + 1
            outcome = parser.parse(grid[index], row_number=row_number)
            if isinstance(outcome, RowError):
                log.warning("Skipping row %d: %s", row_number, outcome.message)
                errors.append(outcome.render())
                continue
            if not isinstance(outcome, ParsedRow):
                continue
            try:
                upserter.upsert(outcome)
            except BatchCommitError as exc:
                errors.extend(_lost_batch(exc, parser))
            except Exception as exc:  # noqa: BLE001
                log.warning("Could not store row %d: %s", row_number, exc)
                parser.forget(outcome.gsrn)
                errors.append(RowError(row_number, str(exc)).render())

        try:
            upserter.finish()
        except BatchCommitError as exc:
            errors.extend(_lost_batch(exc, parser))

        counters = upserter.counters
        result = ImportResult(
            imported_count=counters.imported,
            updated_count=counters.updated,
            total_count=counters.total,
            errors=errors,
        )
        log.info(
            "Import finished: %d imported, %d updated, %d errors",
            result.imported_count,
            result.updated_count,
            len(result.errors),
        )
        return result


def _lost_batch(exc: BatchCommitError, parser: RecordParser) -> list[str]:
    log.error("Batch commit failed, %d rows not stored: %s", len(exc.rows), exc)  # noqa: TRY400
    for row in exc.rows:
        parser.forget(row.gsrn)
    return [RowError(row.row_number, str(exc)).render() for row in exc.rows]
