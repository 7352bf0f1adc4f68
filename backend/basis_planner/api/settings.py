"""Settings endpoints: planner year/region and maintenance Sundays."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.api.auth import get_current_user, require_admin
from basis_planner.api.deps import get_audit_log, get_repository
from basis_planner.core.database import get_db
from basis_planner.schemas.settings import MaintenanceSundayResponse, MaintenanceSundayUpdate, SettingsUpdate
from basis_planner.services.audit import AuditLog
from basis_planner.services.repository import PlannerRepository
from basis_planner.services.sessions import CurrentUser

router = APIRouter(tags=["settings"])


@router.get("/settings")
async def get_settings(
    repo: PlannerRepository = Depends(get_repository),
    _current_user: CurrentUser = Depends(get_current_user),
) -> dict[str, str | None]:
    return await repo.get_settings()


@router.put("/settings")
async def update_settings(
    data: SettingsUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await repo.update_settings(changes)
    await db.commit()
    await audit.record(admin.id, admin.username, "SETTINGS_UPDATE", changes)
    return {"success": True}


@router.get("/maintenance-sundays", response_model=list[MaintenanceSundayResponse])
async def list_maintenance_sundays(
    repo: PlannerRepository = Depends(get_repository),
    _current_user: CurrentUser = Depends(get_current_user),
):
    return await repo.list_maintenance_sundays()


@router.put("/maintenance-sundays/{sunday_id}")
async def update_maintenance_sunday(
    sunday_id: int,
    data: MaintenanceSundayUpdate,
    repo: PlannerRepository = Depends(get_repository),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await repo.update_maintenance_sunday(sunday_id, data.date, data.label)
    await db.commit()
    await audit.record(
        admin.id,
        admin.username,
        "MAINTENANCE_SUNDAY_UPDATE",
        {"id": sunday_id, "date": data.date, "label": data.label},
    )
    return {"success": True}
