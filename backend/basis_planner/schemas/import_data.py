"""JSON import document.

Mirrors the shape of the landscape tree the front end exports. Field values
are checked by the database inside the import transaction, so a missing
``startDate`` or an unknown activity ``type`` rolls the whole import back.
Durations, dates and SID notes follow the same limits as the CRUD endpoints.
Sub-activities are not part of the format.
"""

from pydantic import BaseModel

from basis_planner.schemas.planner import IsoDate, SidNotes, Workdays


class ImportActivity(BaseModel):
    type: str | None = None
    startDate: IsoDate | None = None
    duration: Workdays | None = None
    includesWeekend: bool | None = None


class ImportSid(BaseModel):
    name: str | None = None
    isPRD: bool | None = None
    notes: SidNotes | None = None
    activities: list[ImportActivity] | None = None


class ImportLandscape(BaseModel):
    name: str | None = None
    sids: list[ImportSid] | None = None


class ImportActivityType(BaseModel):
    id: str
    label: str
    color: str


class ImportDocument(BaseModel):
    year: int | str | None = None
    bundesland: str | None = None
    activityTypes: list[ImportActivityType] | None = None
    landscapes: list[ImportLandscape] | None = None
