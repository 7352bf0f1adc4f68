"""Seed default admin, settings, activity types and maintenance Sundays on startup."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from basis_planner.core.config import Settings
from basis_planner.core.security import hash_password
from basis_planner.models.planner import ActivityType
from basis_planner.models.settings import MAINTENANCE_SUNDAY_IDS, MaintenanceSunday, Setting
from basis_planner.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_TYPES = (
    ("installation", "Installation", "#3b82f6"),
    ("update", "Update/Upgrade", "#8b5cf6"),
    ("kernel", "Kernel Update", "#06b6d4"),
    ("db", "DB Update", "#10b981"),
    ("os", "OS Patches", "#f59e0b"),
    ("stpi", "ST-PI Patches", "#ef4444"),
    ("security", "Security Patches", "#ec4899"),
    ("other", "Sonstige", "#6b7280"),
)

MAINTENANCE_SUNDAY_LABELS = ("I", "II", "III", "IV")


async def seed_admin_user(session: AsyncSession, settings: Settings) -> None:
    result = await session.execute(select(User).where(User.username == settings.ADMIN_USERNAME))
    if result.scalar_one_or_none():
        logger.info("Admin user already exists: %s", settings.ADMIN_USERNAME)
        return

    if settings.ADMIN_PASSWORD == "change-me-in-production":
        logger.warning("ADMIN_PASSWORD not set, seeding admin with the default password")
    session.add(
        User(
            username=settings.ADMIN_USERNAME,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role="admin",
        )
    )
    logger.info("Created admin user: %s", settings.ADMIN_USERNAME)


async def seed_settings(session: AsyncSession, settings: Settings) -> None:
    defaults = {"year": settings.DEFAULT_YEAR, "bundesland": settings.DEFAULT_BUNDESLAND}
    for key, value in defaults.items():
        if await session.get(Setting, key) is None:
            session.add(Setting(key=key, value=value))
            logger.info("Created default setting %s=%s", key, value)


async def seed_activity_types(session: AsyncSession) -> None:
    count = (await session.execute(select(func.count()).select_from(ActivityType))).scalar() or 0
    if count:
        return
    for index, (type_id, label, color) in enumerate(DEFAULT_ACTIVITY_TYPES):
        session.add(ActivityType(id=type_id, label=label, color=color, sort_order=index))
    logger.info("Created %d default activity types", len(DEFAULT_ACTIVITY_TYPES))


async def seed_maintenance_sundays(session: AsyncSession) -> None:
    for sunday_id, numeral in zip(MAINTENANCE_SUNDAY_IDS, MAINTENANCE_SUNDAY_LABELS):
        if await session.get(MaintenanceSunday, sunday_id) is None:
            session.add(MaintenanceSunday(id=sunday_id, date="", label=f"Wartungssonntag {numeral}"))
            logger.info("Created maintenance Sunday %d", sunday_id)


async def seed_defaults(sessionmaker: async_sessionmaker[AsyncSession], settings: Settings) -> None:
    """Idempotent: safe to run against an already initialized database."""
    async with sessionmaker.begin() as session:
        await seed_admin_user(session, settings)
        await seed_settings(session, settings)
        await seed_activity_types(session)
        await seed_maintenance_sundays(session)
