"""Settings and maintenance Sunday schemas."""

from pydantic import BaseModel, Field

from basis_planner.schemas.base import PatchModel


class SettingsUpdate(PatchModel):
    year: int | str | None = None
    bundesland: str | None = Field(default=None, max_length=10)


class MaintenanceSundayUpdate(BaseModel):
    date: str | None = None
    label: str | None = Field(default=None, max_length=255)


class MaintenanceSundayResponse(BaseModel):
    id: int
    date: str | None
    label: str | None

    model_config = {"from_attributes": True}
