"""Identity-preserving persistence of parsed registry rows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from masterdata.domain.model import WindTurbine

if TYPE_CHECKING:
    from masterdata.domain.parsing import ParsedRow
    from masterdata.domain.ports import RegistryUnitOfWork

log = getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


class UpsertOutcome(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass(slots=True)
class UpsertCounters:
    imported: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.imported + self.updated


class BatchCommitError(RuntimeError):
    """A batch commit failed; ``rows`` were rolled back and are not stored."""

    def __init__(self, rows: tuple[ParsedRow, ...], cause: Exception) -> None:
        super().__init__(str(cause))
        self.rows = rows


class DeduplicatingUpserter:
    """Insert-or-overwrite turbines by GSRN, committing in fixed-size batches.

    Every row is applied inside its own savepoint, so a row that cannot be stored
    is undone on its own and its exception propagates without touching the rest
    of the batch. A commit happens whenever the running total reaches a multiple
    of ``batch_size`` and once more in :meth:`finish`. When a commit fails the
    batch is rolled back, its rows are taken off the counters and a
    :class:`BatchCommitError` naming them is raised.
    """

    def __init__(self, uow: RegistryUnitOfWork, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._uow = uow
        self._batch_size = batch_size
        self.counters = UpsertCounters()
        self._pending = UpsertCounters()
        self._pending_rows: list[ParsedRow] = []

    def upsert(self, row: ParsedRow) -> UpsertOutcome:
        with self._uow.savepoint():
            outcome = self._apply(row)
        self._count(outcome)
        self._pending_rows.append(row)
        if self.counters.total % self._batch_size == 0:
            self._commit()
        return outcome

    def finish(self) -> UpsertCounters:
        """Commit whatever the last partial batch holds and return the counters."""

        self._commit()
        return self.counters

    def _apply(self, row: ParsedRow) -> UpsertOutcome:
        turbines = self._uow.repositories.turbines
        existing = turbines.get_by_gsrn(row.gsrn)
        if existing is None:
            turbines.add(WindTurbine.from_registry(row.gsrn, row.values))
            return UpsertOutcome.INSERTED
        existing.overwrite(row.values)
        return UpsertOutcome.UPDATED

    def _count(self, outcome: UpsertOutcome) -> None:
        for counters in (self.counters, self._pending):
            if outcome is UpsertOutcome.INSERTED:
                counters.imported += 1
            else:
                counters.updated += 1

    def _commit(self) -> None:
        try:
            self._uow.commit()
        except Exception as exc:
            rows = self._abandon_batch()
            raise BatchCommitError(rows, exc) from exc
        log.debug(
            "Committed batch: %d inserted, %d updated",
            self._pending.imported,
            self._pending.updated,
        )
        self._reset_batch()

    def _abandon_batch(self) -> tuple[ParsedRow, ...]:
        rows = tuple(self._pending_rows)
        log.warning("Rolling back %d uncommitted rows", len(rows))
        self._uow.rollback()
        self.counters.imported -= self._pending.imported
        self.counters.updated -= self._pending.updated
        self._reset_batch()
        return rows

    def _reset_batch(self) -> None:
        self._pending = UpsertCounters()
        self._pending_rows = []
