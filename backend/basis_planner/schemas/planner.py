"""Landscape hierarchy and activity type schemas.

Request bodies use the column names (``is_prd``, ``start_date``). Responses
keep the mixed shape the planner front end reads: raw column names alongside
camelCase aliases such as ``isPRD`` and ``startDate``.
"""

from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from basis_planner.models.planner import SID_NOTES_MAX_LENGTH
from basis_planner.schemas.base import PatchModel

MAX_DURATION_WORKDAYS = 366


def check_calendar_date(value: str) -> str:
    """Reject strings like 2026-13-45; the value stays a string."""
    date.fromisoformat(value)
    return value


def clip_notes(value: str) -> str:
    return value[:SID_NOTES_MAX_LENGTH]


IsoDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(check_calendar_date)]
Workdays = Annotated[int, Field(ge=1, le=MAX_DURATION_WORKDAYS)]
SidNotes = Annotated[str, AfterValidator(clip_notes)]


# --- Activity types ---


class ActivityTypeCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=20)


class ActivityTypeUpdate(PatchModel):
    label: str | None = Field(default=None, min_length=1, max_length=255)
    color: str | None = Field(default=None, min_length=1, max_length=20)


class ActivityTypeResponse(BaseModel):
    id: str
    label: str
    color: str
    sort_order: int

    model_config = {"from_attributes": True}


# --- Landscapes ---


class LandscapeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class LandscapeUpdate(PatchModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)


# --- SIDs ---


class SidCreate(BaseModel):
    landscape_id: int
    name: str = Field(default="", max_length=50)
    is_prd: bool = False


class SidUpdate(PatchModel):
    name: str | None = Field(default=None, max_length=50)
    is_prd: bool | None = None
    notes: SidNotes | None = None


# --- Activities ---


class ActivityCreate(BaseModel):
    sid_id: int
    type_id: str = Field(..., min_length=1)
    start_date: IsoDate
    duration: Workdays = 1
    includes_weekend: bool = False


class ActivityUpdate(PatchModel):
    type_id: str | None = Field(default=None, min_length=1)
    start_date: IsoDate | None = None
    duration: Workdays | None = None
    includes_weekend: bool | None = None


class SubActivityCreate(BaseModel):
    activity_id: int
    start_date: IsoDate
    name: str | None = Field(default=None, max_length=255)
    duration: Workdays = 1
    includes_weekend: bool = False


class SubActivityUpdate(PatchModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: IsoDate | None = None
    duration: Workdays | None = None
    includes_weekend: bool | None = None


# --- Responses ---


class SubActivityNode(BaseModel):
    id: int
    name: str
    startDate: str
    duration: int
    includesWeekend: bool
    sort_order: int


class SubActivityCreated(SubActivityNode):
    activity_id: int


class ActivityCreated(BaseModel):
    id: int
    sid_id: int
    type: str
    startDate: str
    duration: int
    includesWeekend: bool


class ActivityNode(ActivityCreated):
    type_id: str
    start_date: str
    includes_weekend: bool
    subActivities: list[SubActivityNode] = []


class SidCreated(BaseModel):
    id: int
    landscape_id: int
    name: str
    isPRD: bool
    sort_order: int
    activities: list[ActivityNode] = []


class SidNode(SidCreated):
    is_prd: bool
    notes: str


class LandscapeNode(BaseModel):
    id: int
    name: str
    sort_order: int
    sids: list[SidNode] = []
