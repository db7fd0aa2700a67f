"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AsyncExitStack
from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from masterdata.adapters.dawa import DawaClient
from masterdata.adapters.ois import OisClient
from masterdata.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRegistryUnitOfWork,
    is_started,
    startup,
)
from masterdata.adapters.xlsx import SpreadsheetError, read_first_worksheet
from masterdata.config import get_cadastral_config, get_import_config, load_header_synonyms
from masterdata.domain.headers import HeaderResolver
from masterdata.domain.import_pipeline import ImportPipeline, ImportResult
from masterdata.domain.model import WindTurbine
from masterdata.domain.ports import RegistryUnitOfWork
from masterdata.domain.sites import EnrichmentSummary, SiteResolver, enrich_turbines

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from masterdata.config import CadastralConfig, ImportConfig
    from masterdata.domain.ports import (
        OwnerLookup,
        PropertyLookup,
        SiteStatistics,
        TurbineStatistics,
    )

UnitOfWorkFactory = Callable[[], RegistryUnitOfWork]

SUPPORTED_SUFFIXES = frozenset({".xlsx"})

log = getLogger(__name__)


class UnsupportedInputError(ValueError):
    """Raised for input files the importer refuses before reading them."""


def validate_input_file(path: Path) -> None:
    """Reject anything that is not a non-empty ``.xlsx`` file."""

    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedInputError(f"Only .xlsx files are supported, got {path.name!r}")
    if not path.is_file():
        raise UnsupportedInputError(f"No such file: {path}")
    if path.stat().st_size == 0:
        raise UnsupportedInputError(f"File {path.name!r} is empty")


def _default_unit_of_work_factory() -> RegistryUnitOfWork:
    if not is_started():
        startup()
    return SqlAlchemyRegistryUnitOfWork()


def import_registry_file(
    path: Path | str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ImportConfig | None = None,
    synonyms: Mapping[str, Sequence[str]] | None = None,
) -> ImportResult:
    """Import one registry workbook and return the counters and row errors.

    Raises :class:`UnsupportedInputError` before touching the database when the
    file is not a non-empty ``.xlsx``. Unreadable workbooks produce a failed
    result rather than an exception.
    """

    source = Path(path)
    validate_input_file(source)
    import_config = config or get_import_config()
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory

    try:
        grid = read_first_worksheet(source)
    except SpreadsheetError as exc:
        log.error("Could not read %s: %s", source, exc)  # noqa: TRY400
        return ImportResult.failed(f"Import failed: {exc}")

    headers = HeaderResolver(
        synonyms if synonyms is not None else load_header_synonyms(),
        anchor=import_config.header_anchor,
        scan_rows=import_config.header_scan_rows,
    )
    log.info("Importing %s (%d rows)", source.name, len(grid))
    with effective_uow() as uow:
        pipeline = ImportPipeline(
            headers=headers,
            uow=uow,
            batch_size=import_config.batch_size,
            day_first=import_config.day_first,
        )
        return pipeline.run(grid)


def enrich_sites(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: CadastralConfig | None = None,
    properties: PropertyLookup | None = None,
    owners: OwnerLookup | None = None,
    only_unlinked: bool = True,
    gsrns: Iterable[str] | None = None,
    limit: int | None = None,
) -> EnrichmentSummary:
    """Link turbines to sites through the cadastral and ownership registers.

    ``properties`` and ``owners`` default to the DAWA and OIS clients built from
    ``config``; each keeps one connection open for the whole pass.
    """

    cadastral = config or get_cadastral_config()
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory
    with effective_uow() as uow:
        candidates = uow.repositories.turbines.enrichment_candidates(
            only_unlinked=only_unlinked,
            gsrns=gsrns,
            limit=limit,
        )
        log.info("Resolving sites for %d turbines", len(candidates))
        return asyncio.run(
            _enrich(
                candidates,
                uow=uow,
                cadastral=cadastral,
                properties=properties,
                owners=owners,
            )
        )


async def _enrich(
    turbines: Sequence[WindTurbine],
    *,
    uow: RegistryUnitOfWork,
    cadastral: CadastralConfig,
    properties: PropertyLookup | None,
    owners: OwnerLookup | None,
) -> EnrichmentSummary:
    async with AsyncExitStack() as stack:
        if properties is None:
            properties = await stack.enter_async_context(
                DawaClient(cadastral.dawa, page_size=cadastral.dawa_page_size)
            )
        if owners is None:
            owners = await stack.enter_async_context(OisClient(cadastral.ois))
        resolver = SiteResolver(
            properties=properties,
            owners=owners,
            sites=uow.repositories.sites,
        )
        return await enrich_turbines(turbines, resolver=resolver, uow=uow)


@dataclass(frozen=True, slots=True)
class RegistryStatistics:
    turbines: TurbineStatistics
    sites: SiteStatistics

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalTurbines": self.turbines.total_turbines,
            "manufacturers": self.turbines.manufacturers,
            "modelTypes": self.turbines.model_types,
            "totalSites": self.sites.total_sites,
            "totalTurbinesWithSite": self.sites.turbines_with_site,
            "totalTurbinesWithoutSite": self.sites.turbines_without_site,
            "averageTurbinesPerSite": round(self.sites.average_turbines_per_site, 2),
        }


def registry_statistics(
    *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> RegistryStatistics:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory
    with effective_uow() as uow:
        return RegistryStatistics(
            turbines=uow.repositories.turbines.statistics(),
            sites=uow.repositories.sites.statistics(),
        )


def find_turbine(
    gsrn: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> dict[str, Any] | None:
    """Return one turbine as a JSON-ready mapping, or ``None`` if unknown."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory
    with effective_uow() as uow:
        turbine = uow.repositories.turbines.get_by_gsrn(gsrn.strip())
        if turbine is None:
            return None
        return turbine_as_dict(turbine)


def turbine_as_dict(turbine: WindTurbine) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for item in fields(turbine):
        if item.name == "site":
            continue
        payload[_camel_case(item.name)] = _json_value(getattr(turbine, item.name))
    payload["siteId"] = turbine.site_id
    payload["siteName"] = turbine.site.name if turbine.site is not None else None
    return payload


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _json_value(value: object) -> object:
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value
