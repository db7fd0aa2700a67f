"""DAWA cadastral autocomplete response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


class DawaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Jordstykke(DawaBaseModel):
    """Cadastral parcel as embedded in an autocomplete hit."""

    matrikelnr: str | None = None
    sfe_ejendomsnr: str | None = Field(default=None, alias="sfeejendomsnr")

    @field_validator("sfe_ejendomsnr", "matrikelnr", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class AutocompleteHit(DawaBaseModel):
    tekst: str | None = None
    jordstykke: Jordstykke | None = None


class AutocompleteResponse(RootModel[list[AutocompleteHit]]):
    def first_property_id(self) -> str | None:
        if not self.root:
            return None
        parcel = self.root[0].jordstykke
        if parcel is None or not parcel.sfe_ejendomsnr:
            return None
        return parcel.sfe_ejendomsnr.strip() or None
