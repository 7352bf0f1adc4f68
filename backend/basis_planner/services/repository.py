"""Domain repository: CRUD over the landscape hierarchy, activity types and settings."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.core.database import Base
from basis_planner.core.errors import ConflictError, NotFoundError, ValidationError
from basis_planner.models.planner import (
    DEFAULT_SUB_ACTIVITY_NAME,
    Activity,
    ActivityType,
    Landscape,
    Sid,
    SubActivity,
)
from basis_planner.models.settings import MAINTENANCE_SUNDAY_IDS, MaintenanceSunday, Setting
from basis_planner.schemas.planner import (
    ActivityCreate,
    ActivityNode,
    ActivityTypeCreate,
    LandscapeCreate,
    LandscapeNode,
    SidCreate,
    SidNode,
    SubActivityCreate,
    SubActivityNode,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def activity_node(activity: Activity, sub_activities: Iterable[SubActivity] = ()) -> ActivityNode:
    return ActivityNode(
        id=activity.id,
        sid_id=activity.sid_id,
        type_id=activity.type_id,
        start_date=activity.start_date,
        duration=activity.duration,
        includes_weekend=activity.includes_weekend,
        type=activity.type_id,
        startDate=activity.start_date,
        includesWeekend=activity.includes_weekend,
        subActivities=[sub_activity_node(s) for s in sub_activities],
    )


def sub_activity_node(sub: SubActivity) -> SubActivityNode:
    return SubActivityNode(
        id=sub.id,
        name=sub.name,
        startDate=sub.start_date,
        duration=sub.duration,
        includesWeekend=sub.includes_weekend,
        sort_order=sub.sort_order,
    )


class PlannerRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Helpers ---

    async def _get(self, model: type[ModelT], obj_id: Any, message: str) -> ModelT:
        obj = await self.db.get(model, obj_id)
        if obj is None:
            raise NotFoundError(message)
        return obj

    async def _next_sort_order(self, column, *criteria) -> int:
        query = select(func.max(column))
        if criteria:
            query = query.where(*criteria)
        result = await self.db.execute(query)
        return (result.scalar() or 0) + 1

    async def _apply(self, obj: Base, changes: dict[str, Any]) -> None:
        for field, value in changes.items():
            setattr(obj, field, value)
        await self.db.flush()

    # --- Activity types ---

    async def list_activity_types(self) -> list[ActivityType]:
        result = await self.db.execute(select(ActivityType).order_by(ActivityType.sort_order))
        return list(result.scalars().all())

    async def create_activity_type(self, data: ActivityTypeCreate) -> ActivityType:
        if await self.db.get(ActivityType, data.id) is not None:
            raise ConflictError(f"Aktivitätstyp '{data.id}' existiert bereits")

        activity_type = ActivityType(
            id=data.id,
            label=data.label,
            color=data.color,
            sort_order=await self._next_sort_order(ActivityType.sort_order),
        )
        self.db.add(activity_type)
        await self.db.flush()
        return activity_type

    async def update_activity_type(self, type_id: str, changes: dict[str, Any]) -> ActivityType:
        activity_type = await self._get(ActivityType, type_id, "Aktivitätstyp nicht gefunden")
        await self._apply(activity_type, changes)
        return activity_type

    async def count_activities_of_type(self, type_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Activity.id)).where(Activity.type_id == type_id)
        )
        return result.scalar() or 0

    async def delete_activity_type(self, type_id: str) -> None:
        activity_type = await self._get(ActivityType, type_id, "Aktivitätstyp nicht gefunden")
        in_use = await self.count_activities_of_type(type_id)
        if in_use:
            raise ConflictError(
                f"Aktivitätstyp wird noch von {in_use} Aktivität(en) verwendet und kann nicht gelöscht werden"
            )
        await self.db.delete(activity_type)
        await self.db.flush()

    # --- Landscape tree ---

    async def list_landscapes_with_children(self) -> list[LandscapeNode]:
        """Nested read model: landscapes → SIDs → activities → sub-activities."""
        landscapes = (
            await self.db.execute(select(Landscape).order_by(Landscape.sort_order, Landscape.id))
        ).scalars().all()
        sids = (
            await self.db.execute(select(Sid).order_by(Sid.sort_order, Sid.id))
        ).scalars().all()
        activities = (
            await self.db.execute(select(Activity).order_by(Activity.start_date, Activity.id))
        ).scalars().all()
        sub_activities = (
            await self.db.execute(select(SubActivity).order_by(SubActivity.sort_order, SubActivity.id))
        ).scalars().all()

        subs_by_activity: dict[int, list[SubActivity]] = defaultdict(list)
        for sub in sub_activities:
            subs_by_activity[sub.activity_id].append(sub)

        activities_by_sid: dict[int, list[ActivityNode]] = defaultdict(list)
        for activity in activities:
            activities_by_sid[activity.sid_id].append(
                activity_node(activity, subs_by_activity[activity.id])
            )

        sids_by_landscape: dict[int, list[SidNode]] = defaultdict(list)
        for sid in sids:
            sids_by_landscape[sid.landscape_id].append(
                SidNode(
                    id=sid.id,
                    landscape_id=sid.landscape_id,
                    name=sid.name,
                    is_prd=sid.is_prd,
                    notes=sid.notes or "",
                    sort_order=sid.sort_order,
                    isPRD=sid.is_prd,
                    activities=activities_by_sid[sid.id],
                )
            )

        return [
            LandscapeNode(
                id=landscape.id,
                name=landscape.name,
                sort_order=landscape.sort_order,
                sids=sids_by_landscape[landscape.id],
            )
            for landscape in landscapes
        ]

    # --- Landscapes ---

    async def create_landscape(self, data: LandscapeCreate) -> Landscape:
        landscape = Landscape(
            name=data.name,
            sort_order=await self._next_sort_order(Landscape.sort_order),
        )
        self.db.add(landscape)
        await self.db.flush()
        return landscape

    async def update_landscape(self, landscape_id: int, changes: dict[str, Any]) -> Landscape:
        landscape = await self._get(Landscape, landscape_id, "Landschaft nicht gefunden")
        await self._apply(landscape, changes)
        return landscape

    async def delete_landscape(self, landscape_id: int) -> None:
        landscape = await self._get(Landscape, landscape_id, "Landschaft nicht gefunden")
        await self.db.delete(landscape)
        await self.db.flush()

    # --- SIDs ---

    async def create_sid(self, data: SidCreate) -> Sid:
        await self._get(Landscape, data.landscape_id, "Landschaft nicht gefunden")
        sid = Sid(
            landscape_id=data.landscape_id,
            name=data.name,
            is_prd=data.is_prd,
            notes="",
            sort_order=await self._next_sort_order(Sid.sort_order, Sid.landscape_id == data.landscape_id),
        )
        self.db.add(sid)
        await self.db.flush()
        return sid

    async def update_sid(self, sid_id: int, changes: dict[str, Any]) -> Sid:
        sid = await self._get(Sid, sid_id, "SID nicht gefunden")
        await self._apply(sid, changes)
        return sid

    async def delete_sid(self, sid_id: int) -> None:
        sid = await self._get(Sid, sid_id, "SID nicht gefunden")
        await self.db.delete(sid)
        await self.db.flush()

    # --- Activities ---

    async def _check_activity_type(self, type_id: str) -> None:
        if await self.db.get(ActivityType, type_id) is None:
            raise NotFoundError(f"Aktivitätstyp '{type_id}' nicht gefunden")

    async def create_activity(self, data: ActivityCreate) -> Activity:
        await self._get(Sid, data.sid_id, "SID nicht gefunden")
        await self._check_activity_type(data.type_id)
        activity = Activity(
            sid_id=data.sid_id,
            type_id=data.type_id,
            start_date=data.start_date,
            duration=data.duration,
            includes_weekend=data.includes_weekend,
        )
        self.db.add(activity)
        await self.db.flush()
        return activity

    async def update_activity(self, activity_id: int, changes: dict[str, Any]) -> Activity:
        activity = await self._get(Activity, activity_id, "Aktivität nicht gefunden")
        if "type_id" in changes:
            await self._check_activity_type(changes["type_id"])
        await self._apply(activity, changes)
        return activity

    async def delete_activity(self, activity_id: int) -> None:
        activity = await self._get(Activity, activity_id, "Aktivität nicht gefunden")
        await self.db.delete(activity)
        await self.db.flush()

    # --- Sub-activities ---

    async def create_sub_activity(self, data: SubActivityCreate) -> SubActivity:
        await self._get(Activity, data.activity_id, "Übergeordnete Aktivität nicht gefunden")
        sub = SubActivity(
            activity_id=data.activity_id,
            name=data.name or DEFAULT_SUB_ACTIVITY_NAME,
            start_date=data.start_date,
            duration=data.duration,
            includes_weekend=data.includes_weekend,
            sort_order=await self._next_sort_order(
                SubActivity.sort_order, SubActivity.activity_id == data.activity_id
            ),
        )
        self.db.add(sub)
        await self.db.flush()
        return sub

    async def update_sub_activity(self, sub_id: int, changes: dict[str, Any]) -> SubActivity:
        sub = await self._get(SubActivity, sub_id, "Sub-Aktivität nicht gefunden")
        await self._apply(sub, changes)
        return sub

    async def delete_sub_activity(self, sub_id: int) -> None:
        sub = await self._get(SubActivity, sub_id, "Sub-Aktivität nicht gefunden")
        await self.db.delete(sub)
        await self.db.flush()

    # --- Settings ---

    async def get_settings(self) -> dict[str, str | None]:
        result = await self.db.execute(select(Setting))
        return {s.key: s.value for s in result.scalars().all()}

    async def set_setting(self, key: str, value: str) -> None:
        setting = await self.db.get(Setting, key)
        if setting is None:
            self.db.add(Setting(key=key, value=value))
        else:
            setting.value = value
        await self.db.flush()

    async def update_settings(self, changes: dict[str, Any]) -> None:
        for key, value in changes.items():
            await self.set_setting(key, str(value))

    # --- Maintenance Sundays ---

    async def list_maintenance_sundays(self) -> list[MaintenanceSunday]:
        result = await self.db.execute(select(MaintenanceSunday).order_by(MaintenanceSunday.id))
        return list(result.scalars().all())

    async def update_maintenance_sunday(
        self, sunday_id: int, date: str | None, label: str | None
    ) -> MaintenanceSunday:
        if sunday_id not in MAINTENANCE_SUNDAY_IDS:
            raise ValidationError("Ungültige Wartungssonntag-ID (1-4)")
        sunday = await self._get(MaintenanceSunday, sunday_id, "Wartungssonntag nicht gefunden")
        sunday.date = date or ""
        sunday.label = label or ""
        await self.db.flush()
        return sunday
