"""OIS ownership response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OisBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Owner(OisBaseModel):
    name: str | None = None


class OwnerResponse(OisBaseModel):
    bfe: int | None = None
    owners: list[Owner] | None = Field(default=None, alias="ejerdata")

    def first_owner_name(self) -> str | None:
        if not self.owners:
            return None
        name = self.owners[0].name
        if name is None:
            return None
        return name.strip() or None
