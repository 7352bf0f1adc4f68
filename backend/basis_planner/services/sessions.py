"""Session manager: issues, validates and expires opaque session tokens."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.core.security import generate_session_token
from basis_planner.models.user import Session, User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CurrentUser:
    """Identity resolved from a valid session."""

    id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SessionManager:
    def __init__(
        self,
        db: AsyncSession,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        now: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.ttl = ttl
        self.now = now

    async def create_session(self, user_id: int) -> tuple[str, datetime]:
        """Store a new token for the user and sweep sessions that already expired."""
        issued_at = self.now()
        token = generate_session_token()
        expires_at = issued_at + self.ttl

        self.db.add(Session(user_id=user_id, token=token, expires_at=expires_at))
        await self.db.flush()

        result = await self.db.execute(delete(Session).where(Session.expires_at < issued_at))
        if result.rowcount:
            logger.debug("Swept %d expired sessions", result.rowcount)

        return token, expires_at

    async def validate_session(self, token: str | None) -> CurrentUser | None:
        if not token:
            return None

        result = await self.db.execute(
            select(User.id, User.username, User.role)
            .join(Session, Session.user_id == User.id)
            .where(Session.token == token, Session.expires_at > self.now())
        )
        row = result.one_or_none()
        if row is None:
            return None
        return CurrentUser(id=row.id, username=row.username, role=row.role)

    async def destroy_session(self, token: str | None) -> None:
        if not token:
            return
        await self.db.execute(delete(Session).where(Session.token == token))
