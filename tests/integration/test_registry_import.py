from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import TYPE_CHECKING

import httpx
import pytest
from openpyxl import Workbook

from masterdata.adapters.dawa import DawaClient
from masterdata.adapters.http_resilience import ResilientClient
from masterdata.app import (
    UnsupportedInputError,
    enrich_sites,
    find_turbine,
    import_registry_file,
    registry_statistics,
)
from masterdata.config.http_resilience import ResilienceConfig, RetryPolicy
from masterdata.config.importing import ImportConfig
from tests.helpers.registry import (
    HEADER_ROW,
    FakeOwnerLookup,
    FakePropertyLookup,
    make_row,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from masterdata.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegistryUnitOfWork

    UowFactory = Callable[[], SqlAlchemyRegistryUnitOfWork]


def _write_workbook(path: Path, rows: Sequence[Sequence[object]], *, preamble: int = 7) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    assert sheet is not None
    for index in range(preamble):
        sheet.append([f"Stamdataregister, udtræk {index}"])
    sheet.append(list(HEADER_ROW))
    for row in rows:
        sheet.append(list(row))
    workbook.save(path)
    return path


@pytest.mark.integration
def test_import_then_reimport_workbook(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    path = _write_workbook(
        tmp_path / "anlaeg.xlsx",
        [
            make_row("570714700000000001", capacity="2.000 kW"),
            make_row("570714700000000002", capacity=3600, rotor="112,0"),
            make_row("570714700000000001", capacity="1"),
            make_row("ikke-et-nummer"),
        ],
    )

    first = import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)
    second = import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)

    assert first.as_dict() == {
        "importedCount": 2,
        "updatedCount": 0,
        "totalCount": 2,
        "errors": [],
    }
    assert (second.imported_count, second.updated_count, second.total_count) == (0, 2, 2)

    turbine = find_turbine("570714700000000001", unit_of_work_factory=sqlite_unit_of_work)
    assert turbine is not None
    assert turbine["capacityKw"] == 2000
    assert turbine["originalConnectionDate"] == "2003-02-01"
    assert turbine["siteId"] is None

    other = find_turbine("570714700000000002", unit_of_work_factory=sqlite_unit_of_work)
    assert other is not None
    assert Decimal(other["rotorDiameterM"]) == Decimal("112.0")


@pytest.mark.integration
def test_small_batches_commit_everything(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    path = _write_workbook(
        tmp_path / "batch.xlsx",
        [make_row(str(7000 + index)) for index in range(25)],
        preamble=0,
    )

    result = import_registry_file(
        path,
        unit_of_work_factory=sqlite_unit_of_work,
        config=ImportConfig(batch_size=10),
    )

    assert result.total_count == 25
    stats = registry_statistics(unit_of_work_factory=sqlite_unit_of_work)
    assert stats.turbines.total_turbines == 25


@pytest.mark.integration
def test_missing_header_reports_single_error(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    workbook = Workbook()
    sheet = workbook.active
    assert sheet is not None
    sheet.append(["GSRN", "Fabrikat"])
    sheet.append(["1", "Vestas"])
    path = tmp_path / "wrong.xlsx"
    workbook.save(path)

    result = import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)

    assert (result.imported_count, result.updated_count, result.total_count) == (0, 0, 0)
    assert len(result.errors) == 1


@pytest.mark.integration
def test_corrupt_workbook_is_a_failed_result(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    path = tmp_path / "corrupt.xlsx"
    path.write_bytes(b"PK not really")

    result = import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)

    assert result.total_count == 0
    assert result.errors[0].startswith("Import failed:")


@pytest.mark.parametrize("name", ["anlaeg.csv", "anlaeg.xls", "anlaeg"])
def test_wrong_extension_is_rejected_before_import(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_text("Møllenummer (GSRN)\n1\n")

    def no_database() -> SqlAlchemyRegistryUnitOfWork:
        raise AssertionError("unit of work must not be opened")

    with pytest.raises(UnsupportedInputError):
        import_registry_file(path, unit_of_work_factory=no_database)


def test_empty_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "empty.XLSX"
    path.touch()

    with pytest.raises(UnsupportedInputError, match="empty"):
        import_registry_file(path)


@pytest.mark.integration
def test_enrichment_links_turbines_on_same_owner_to_one_site(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    path = _write_workbook(
        tmp_path / "anlaeg.xlsx",
        [
            make_row("1", cadastral_no="12a", cadastral_district="Hee By"),
            make_row("2", cadastral_no="12b", cadastral_district="Hee By"),
            make_row("3", cadastral_no=None, cadastral_district="Hee By"),
        ],
    )
    import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)

    summary = enrich_sites(
        unit_of_work_factory=sqlite_unit_of_work,
        properties=FakePropertyLookup({("12a", "Hee By"): "100", ("12b", "Hee By"): "200"}),
        owners=FakeOwnerLookup({"100": "Vindselskabet A/S", "200": "Vindselskabet A/S"}),
    )

    assert summary.linked == 2
    first = find_turbine("1", unit_of_work_factory=sqlite_unit_of_work)
    second = find_turbine("2", unit_of_work_factory=sqlite_unit_of_work)
    assert first is not None
    assert second is not None
    assert first["siteId"] is not None
    assert first["siteId"] == second["siteId"]
    assert first["siteName"] == "Vindselskabet A/S"
    assert first["propertyId"] == "100"

    stats = registry_statistics(unit_of_work_factory=sqlite_unit_of_work)
    assert stats.sites.total_sites == 1
    assert stats.sites.turbines_without_site == 1

    rerun = enrich_sites(
        unit_of_work_factory=sqlite_unit_of_work,
        properties=FakePropertyLookup(),
        owners=FakeOwnerLookup(),
    )
    assert rerun.processed == 0


@pytest.mark.integration
def test_enrichment_with_failing_cadastral_service_leaves_turbine_unlinked(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    path = _write_workbook(
        tmp_path / "anlaeg.xlsx",
        [make_row("1", cadastral_no="12a", cadastral_district="Hee By")],
    )
    import_registry_file(path, unit_of_work_factory=sqlite_unit_of_work)

    def factory(config: ResilienceConfig) -> ResilientClient:
        transport = httpx.MockTransport(lambda _request: httpx.Response(500))
        return ResilientClient(config, transport=transport)

    dawa = DawaClient(
        ResilienceConfig(
            name="dawa",
            base_url="https://dawa.test",
            retry=RetryPolicy(total=0),
            cache=None,
        ),
        client_factory=factory,
    )
    owners = FakeOwnerLookup()
    try:
        summary = enrich_sites(
            unit_of_work_factory=sqlite_unit_of_work,
            properties=dawa,
            owners=owners,
        )
    finally:
        asyncio.run(dawa.aclose())

    assert summary.as_dict()["lookup_failed"] == 1
    assert owners.calls == []
    turbine = find_turbine("1", unit_of_work_factory=sqlite_unit_of_work)
    assert turbine is not None
    assert turbine["siteId"] is None
