"""Credential store: users, password hashes and roles."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from basis_planner.core.config import settings
from basis_planner.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from basis_planner.core.security import hash_password, verify_password
from basis_planner.models.user import USER_ROLES, User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession, protected_username: str | None = None):
        self.db = db
        # The built-in admin can never be deleted, neither via API nor CLI
        self.protected_username = protected_username or settings.ADMIN_USERNAME

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_users(self, order_by_id: bool = False) -> list[User]:
        order = User.id if order_by_id else User.created_at
        result = await self.db.execute(select(User).order_by(order, User.id))
        return list(result.scalars().all())

    async def authenticate(self, username: str, password: str) -> User | None:
        user = await self.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    async def create_user(self, username: str, password: str, role: str = "user") -> User:
        if role not in USER_ROLES:
            raise ValidationError("Ungültige Rolle")
        if await self.get_by_username(username):
            raise ConflictError(f"Benutzername '{username}' existiert bereits")

        user = User(username=username, password_hash=hash_password(password), role=role)
        self.db.add(user)
        await self.db.flush()
        logger.info("Created user %s with role %s", username, role)
        return user

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("Benutzer nicht gefunden")

        if "role" in changes and changes["role"] not in USER_ROLES:
            raise ValidationError("Ungültige Rolle")
        if "username" in changes and changes["username"] != user.username:
            if await self.get_by_username(changes["username"]):
                raise ConflictError(f"Benutzername '{changes['username']}' existiert bereits")
            user.username = changes["username"]
        if "password" in changes:
            user.password_hash = hash_password(changes["password"])
        if "role" in changes:
            user.role = changes["role"]

        await self.db.flush()
        return user

    async def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = await self.db.get(User, user_id)
        if user is None or not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Aktuelles Passwort ist falsch")
        user.password_hash = hash_password(new_password)
        await self.db.flush()

    def _check_deletable(self, user: User, acting_user_id: int | None) -> None:
        if acting_user_id is not None and user.id == acting_user_id:
            raise ValidationError("Sie können sich nicht selbst löschen")
        if user.username == self.protected_username:
            raise ValidationError(f"Der {self.protected_username}-Benutzer kann nicht gelöscht werden")

    async def delete_user(self, user_id: int, acting_user_id: int | None = None) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("Benutzer nicht gefunden")
        self._check_deletable(user, acting_user_id)
        await self.db.delete(user)
        await self.db.flush()
        return user

    async def delete_user_by_username(self, username: str) -> User:
        user = await self.get_by_username(username)
        if user is None:
            raise NotFoundError(f"Benutzer '{username}' nicht gefunden")
        self._check_deletable(user, None)
        await self.db.delete(user)
        await self.db.flush()
        return user
