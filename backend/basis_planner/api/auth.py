"""Auth endpoints (login, logout, me, change-password) and the authorization gate."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.api.deps import get_app_settings, get_audit_log, get_session_manager, get_user_service
from basis_planner.core.config import Settings
from basis_planner.core.database import get_db
from basis_planner.core.errors import AuthenticationError, AuthorizationError
from basis_planner.core.rate_limit import login_rate_limit
from basis_planner.schemas.user import (
    ChangePasswordRequest,
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
)
from basis_planner.services.audit import AuditLog
from basis_planner.services.sessions import CurrentUser, SessionManager
from basis_planner.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


async def get_current_user(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
    app_settings: Settings = Depends(get_app_settings),
) -> CurrentUser:
    """Dependency: resolve the user from the session cookie. No bearer header fallback."""
    token = request.cookies.get(app_settings.SESSION_COOKIE_NAME)
    if not token:
        raise AuthenticationError("Nicht authentifiziert")

    current_user = await sessions.validate_session(token)
    if current_user is None:
        raise AuthenticationError("Session abgelaufen oder ungültig")
    return current_user


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency: valid session with the admin role."""
    if not current_user.is_admin:
        raise AuthorizationError("Admin-Berechtigung erforderlich")
    return current_user


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(login_rate_limit)])
async def login(
    response: Response,
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
    sessions: SessionManager = Depends(get_session_manager),
    audit: AuditLog = Depends(get_audit_log),
    app_settings: Settings = Depends(get_app_settings),
    db: AsyncSession = Depends(get_db),
):
    user = await users.authenticate(data.username, data.password)
    if user is None:
        await audit.record(None, data.username, "LOGIN_FAILED", level="WARN")
        raise AuthenticationError("Ungültige Anmeldedaten")

    token, _expires_at = await sessions.create_session(user.id)
    response.set_cookie(
        key=app_settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(sessions.ttl.total_seconds()),
        httponly=True,
        secure=app_settings.COOKIE_SECURE,
        samesite="strict",
    )
    await db.commit()
    await audit.record(user.id, user.username, "LOGIN")

    return LoginResponse(user=CurrentUserResponse.model_validate(user))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
    audit: AuditLog = Depends(get_audit_log),
    app_settings: Settings = Depends(get_app_settings),
    db: AsyncSession = Depends(get_db),
):
    token = request.cookies.get(app_settings.SESSION_COOKIE_NAME)
    current_user = await sessions.validate_session(token)
    await sessions.destroy_session(token)
    await db.commit()
    response.delete_cookie(
        key=app_settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=app_settings.COOKIE_SECURE,
        samesite="strict",
    )
    if current_user:
        await audit.record(current_user.id, current_user.username, "LOGOUT")
    return {"success": True}


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
    audit: AuditLog = Depends(get_audit_log),
    db: AsyncSession = Depends(get_db),
):
    await users.change_password(current_user.id, data.currentPassword, data.newPassword)
    await db.commit()
    await audit.record(current_user.id, current_user.username, "PASSWORD_CHANGE")
    return {"success": True, "message": "Passwort erfolgreich geändert"}
