"""Landscape hierarchy endpoints: landscapes, SIDs, activities and sub-activities."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.api.auth import get_current_user, require_admin
from basis_planner.api.deps import get_audit_log, get_repository
from basis_planner.core.database import get_db
from basis_planner.schemas.planner import (
    ActivityCreate,
    ActivityCreated,
    ActivityUpdate,
    LandscapeCreate,
    LandscapeNode,
    LandscapeUpdate,
    SidCreate,
    SidCreated,
    SidUpdate,
    SubActivityCreate,
    SubActivityCreated,
    SubActivityUpdate,
)
from basis_planner.services.audit import AuditLog
from basis_planner.services.repository import PlannerRepository
from basis_planner.services.sessions import CurrentUser

router = APIRouter(tags=["landscapes"])


# --- Landscapes ---


@router.get("/landscapes", response_model=list[LandscapeNode])
async def list_landscapes(
    repo: PlannerRepository = Depends(get_repository),
    _current_user: CurrentUser = Depends(get_current_user),
):
    """Full planner tree; the front end renders everything from this one call."""
    return await repo.list_landscapes_with_children()


@router.post("/landscapes", response_model=LandscapeNode)
async def create_landscape(
    data: LandscapeCreate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    landscape = await repo.create_landscape(data)
    await db.commit()
    await audit.record(admin.id, admin.username, "LANDSCAPE_CREATE", {"id": landscape.id, "name": landscape.name})
    return LandscapeNode(id=landscape.id, name=landscape.name, sort_order=landscape.sort_order, sids=[])


@router.put("/landscapes/{landscape_id}")
async def update_landscape(
    landscape_id: int,
    data: LandscapeUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_landscape(landscape_id, changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "LANDSCAPE_UPDATE", {"id": landscape_id, **changes})
    return {"success": True}


@router.delete("/landscapes/{landscape_id}")
async def delete_landscape(
    landscape_id: int,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.delete_landscape(landscape_id)
    await db.commit()
    await audit.record(admin.id, admin.username, "LANDSCAPE_DELETE", {"id": landscape_id})
    return {"success": True}


# --- SIDs ---


@router.post("/sids", response_model=SidCreated)
async def create_sid(
    data: SidCreate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    sid = await repo.create_sid(data)
    await db.commit()
    await audit.record(admin.id, admin.username, "SID_CREATE", {"id": sid.id, **data.model_dump()})
    return SidCreated(
        id=sid.id,
        landscape_id=sid.landscape_id,
        name=sid.name,
        isPRD=sid.is_prd,
        sort_order=sid.sort_order,
        activities=[],
    )


@router.put("/sids/{sid_id}")
async def update_sid(
    sid_id: int,
    data: SidUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_sid(sid_id, changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "SID_UPDATE", {"id": sid_id, "fields": sorted(changes)})
    return {"success": True}


@router.delete("/sids/{sid_id}")
async def delete_sid(
    sid_id: int,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.delete_sid(sid_id)
    await db.commit()
    await audit.record(admin.id, admin.username, "SID_DELETE", {"id": sid_id})
    return {"success": True}


# --- Activities ---


@router.post("/activities", response_model=ActivityCreated)
async def create_activity(
    data: ActivityCreate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    activity = await repo.create_activity(data)
    await db.commit()
    await audit.record(
        admin.id,
        admin.username,
        "ACTIVITY_CREATE",
        {"sid_id": data.sid_id, "type_id": data.type_id, "start_date": data.start_date, "duration": data.duration},
    )
    return ActivityCreated(
        id=activity.id,
        sid_id=activity.sid_id,
        type=activity.type_id,
        startDate=activity.start_date,
        duration=activity.duration,
        includesWeekend=activity.includes_weekend,
    )


@router.put("/activities/{activity_id}")
async def update_activity(
    activity_id: int,
    data: ActivityUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_activity(activity_id, changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "ACTIVITY_UPDATE", {"id": activity_id, **changes})
    return {"success": True}


@router.delete("/activities/{activity_id}")
async def delete_activity(
    activity_id: int,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.delete_activity(activity_id)
    await db.commit()
    await audit.record(admin.id, admin.username, "ACTIVITY_DELETE", {"id": activity_id})
    return {"success": True}


# --- Sub-activities ---


@router.post("/sub-activities", response_model=SubActivityCreated)
async def create_sub_activity(
    data: SubActivityCreate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    sub = await repo.create_sub_activity(data)
    await db.commit()
    await audit.record(
        admin.id,
        admin.username,
        "SUBACTIVITY_CREATE",
        {"activity_id": data.activity_id, "name": sub.name, "start_date": data.start_date, "duration": data.duration},
    )
    return SubActivityCreated(
        id=sub.id,
        activity_id=sub.activity_id,
        name=sub.name,
        startDate=sub.start_date,
        duration=sub.duration,
        includesWeekend=sub.includes_weekend,
        sort_order=sub.sort_order,
    )


@router.put("/sub-activities/{sub_id}")
async def update_sub_activity(
    sub_id: int,
    data: SubActivityUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_sub_activity(sub_id, changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "SUBACTIVITY_UPDATE", {"id": sub_id, **changes})
    return {"success": True}


@router.delete("/sub-activities/{sub_id}")
async def delete_sub_activity(
    sub_id: int,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.delete_sub_activity(sub_id)
    await db.commit()
    await audit.record(admin.id, admin.username, "SUBACTIVITY_DELETE", {"id": sub_id})
    return {"success": True}
