"""Request-scoped service providers."""

from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.core.config import Settings
from basis_planner.core.database import get_db, get_sessionmaker
from basis_planner.services.audit import AuditLog
from basis_planner.services.importer import JsonImporter
from basis_planner.services.repository import PlannerRepository
from basis_planner.services.sessions import SessionManager
from basis_planner.services.users import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_audit_log(request: Request) -> AuditLog:
    return request.app.state.audit_log


def get_session_manager(
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> SessionManager:
    return SessionManager(db, ttl=timedelta(hours=app_settings.SESSION_TTL_HOURS))


def get_repository(db: AsyncSession = Depends(get_db)) -> PlannerRepository:
    return PlannerRepository(db)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(db, protected_username=app_settings.ADMIN_USERNAME)


def get_importer(sessionmaker=Depends(get_sessionmaker)) -> JsonImporter:
    return JsonImporter(sessionmaker)
