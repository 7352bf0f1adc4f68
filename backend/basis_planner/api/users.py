"""User management endpoints (admin only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.api.auth import require_admin
from basis_planner.api.deps import get_audit_log, get_user_service
from basis_planner.core.database import get_db
from basis_planner.schemas.user import CurrentUserResponse, UserCreate, UserResponse, UserUpdate
from basis_planner.services.audit import AuditLog
from basis_planner.services.sessions import CurrentUser
from basis_planner.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    users: UserService = Depends(get_user_service),
    _admin: CurrentUser = Depends(require_admin),
):
    return await users.list_users()


@router.post("", response_model=CurrentUserResponse)
async def create_user(
    data: UserCreate,
    users: UserService = Depends(get_user_service),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await users.create_user(data.username, data.password, data.role)
    await db.commit()
    await audit.record(admin.id, admin.username, "USER_CREATE", {"id": user.id, "username": user.username, "role": user.role})
    return user


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    data: UserUpdate,
    users: UserService = Depends(get_user_service),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    changes = data.changes()
    await users.update_user(user_id, changes)
    # Never write password material to the audit trail
    await db.commit()
    await audit.record(admin.id, admin.username, "USER_UPDATE", {"id": user_id, "fields": sorted(changes)})
    return {"success": True}


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    users: UserService = Depends(get_user_service),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await users.delete_user(user_id, acting_user_id=admin.id)
    await db.commit()
    await audit.record(admin.id, admin.username, "USER_DELETE", {"id": user_id, "username": user.username})
    return {"success": True}
