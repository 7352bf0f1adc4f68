"""Activity type endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.api.auth import get_current_user, require_admin
from basis_planner.api.deps import get_audit_log, get_repository
from basis_planner.core.database import get_db
from basis_planner.schemas.planner import ActivityTypeCreate, ActivityTypeResponse, ActivityTypeUpdate
from basis_planner.services.audit import AuditLog
from basis_planner.services.repository import PlannerRepository
from basis_planner.services.sessions import CurrentUser

router = APIRouter(prefix="/activity-types", tags=["activity-types"])


@router.get("", response_model=list[ActivityTypeResponse])
async def list_activity_types(
    repo: PlannerRepository = Depends(get_repository),
    _current_user: CurrentUser = Depends(get_current_user),
):
    return await repo.list_activity_types()


@router.post("", response_model=ActivityTypeResponse)
async def create_activity_type(
    data: ActivityTypeCreate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    activity_type = await repo.create_activity_type(data)
    await db.commit()
    await audit.record(admin.id, admin.username, "ACTIVITY_TYPE_CREATE", data.model_dump())
    return activity_type


@router.put("/{type_id}")
async def update_activity_type(
    type_id: str,
    data: ActivityTypeUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_activity_type(type_id, changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "ACTIVITY_TYPE_UPDATE", {"id": type_id, **changes})
    return {"success": True}


@router.delete("/{type_id}")
async def delete_activity_type(
    type_id: str,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.delete_activity_type(type_id)
    await db.commit()
    await audit.record(admin.id, admin.username, "ACTIVITY_TYPE_DELETE", {"id": type_id})
    return {"success": True}
