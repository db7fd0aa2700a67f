"""Ports for persisting registry aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from masterdata.domain.model import Site, WindTurbine

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class TurbineStatistics:
    total_turbines: int
    manufacturers: int
    model_types: int


@dataclass(frozen=True, slots=True)
class SiteStatistics:
    total_sites: int
    turbines_with_site: int
    turbines_without_site: int
    average_turbines_per_site: float


TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class WindTurbineRepository(Repository[WindTurbine], Protocol):
    """Persistence contract for turbines keyed by GSRN."""

    def get_by_gsrn(self, gsrn: str) -> WindTurbine | None: ...

    def list_by_gsrns(self, gsrns: Iterable[str]) -> Sequence[WindTurbine]: ...

    def page(self, *, page: int = 1, page_size: int = 100) -> Sequence[WindTurbine]: ...

    def search(
        self,
        *,
        manufacturer: str | None = None,
        type_designation: str | None = None,
        page: int = 1,
        page_size: int = 100,
    ) -> Sequence[WindTurbine]: ...

    def enrichment_candidates(
        self,
        *,
        only_unlinked: bool = True,
        gsrns: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> Sequence[WindTurbine]:
        """Turbines carrying both cadastral fields, in id order."""
        ...

    def statistics(self) -> TurbineStatistics: ...


@runtime_checkable
class SiteRepository(Repository[Site], Protocol):
    """Persistence contract for sites keyed by owner name."""

    def get(self, site_id: int) -> Site | None: ...

    def get_by_name(self, name: str) -> Site | None: ...

    def create(self, name: str) -> Site:
        """Persist a new site immediately.

        If a concurrent writer created the same name first, return that site instead.
        """
        ...

    def page(self, *, page: int = 1, page_size: int = 100) -> Sequence[Site]: ...

    def turbines_for(
        self, site: Site, *, page: int = 1, page_size: int = 100
    ) -> Sequence[WindTurbine]: ...

    def remove(self, site: Site) -> None:
        """Delete ``site`` after unlinking its turbines; turbines are kept."""
        ...

    def statistics(self) -> SiteStatistics: ...
