from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from basis_planner.models import Session, User
from basis_planner.services.sessions import SessionManager

T0 = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


def fixed_clock(moment: datetime):
    return lambda: moment


async def _admin_id(session) -> int:
    return (await session.execute(select(User.id).where(User.username == "admin"))).scalar_one()


@pytest.mark.asyncio
async def test_session_valid_until_expiry(sessionmaker):
    async with sessionmaker.begin() as db:
        user_id = await _admin_id(db)
        token, expires_at = await SessionManager(db, now=fixed_clock(T0)).create_session(user_id)
    assert expires_at == T0 + timedelta(hours=24)

    async with sessionmaker() as db:
        just_before = SessionManager(db, now=fixed_clock(expires_at - timedelta(seconds=1)))
        current = await just_before.validate_session(token)
        assert current is not None
        assert current.id == user_id
        assert current.username == "admin"
        assert current.is_admin

        at_expiry = SessionManager(db, now=fixed_clock(expires_at))
        assert await at_expiry.validate_session(token) is None

        after = SessionManager(db, now=fixed_clock(expires_at + timedelta(hours=1)))
        assert await after.validate_session(token) is None


@pytest.mark.asyncio
async def test_unknown_or_missing_token_is_invalid(sessionmaker):
    async with sessionmaker() as db:
        manager = SessionManager(db)
        assert await manager.validate_session(None) is None
        assert await manager.validate_session("") is None
        assert await manager.validate_session("not-a-token") is None


@pytest.mark.asyncio
async def test_destroy_session_is_idempotent(sessionmaker):
    async with sessionmaker.begin() as db:
        manager = SessionManager(db)
        token, _ = await manager.create_session(await _admin_id(db))
        assert await manager.validate_session(token) is not None

        await manager.destroy_session(token)
        assert await manager.validate_session(token) is None

        await manager.destroy_session(token)
        await manager.destroy_session(None)
        assert await manager.validate_session(token) is None


@pytest.mark.asyncio
async def test_create_session_sweeps_expired_sessions(sessionmaker):
    async with sessionmaker.begin() as db:
        user_id = await _admin_id(db)
        old_token, _ = await SessionManager(db, now=fixed_clock(T0)).create_session(user_id)

    later = T0 + timedelta(days=2)
    async with sessionmaker.begin() as db:
        new_token, _ = await SessionManager(db, now=fixed_clock(later)).create_session(user_id)

    async with sessionmaker() as db:
        tokens = (await db.execute(select(Session.token))).scalars().all()
        assert old_token not in tokens
        assert new_token in tokens


@pytest.mark.asyncio
async def test_concurrent_sessions_for_one_user(sessionmaker):
    async with sessionmaker.begin() as db:
        manager = SessionManager(db)
        user_id = await _admin_id(db)
        first, _ = await manager.create_session(user_id)
        second, _ = await manager.create_session(user_id)

    assert first != second
    async with sessionmaker() as db:
        manager = SessionManager(db)
        assert await manager.validate_session(first) is not None
        assert await manager.validate_session(second) is not None


@pytest.mark.asyncio
async def test_sessions_are_removed_with_their_user(sessionmaker):
    async with sessionmaker.begin() as db:
        user = User(username="temp", password_hash="x", role="user")
        db.add(user)
        await db.flush()
        token, _ = await SessionManager(db).create_session(user.id)

    async with sessionmaker.begin() as db:
        await db.delete(await db.get(User, user.id))

    async with sessionmaker() as db:
        count = (await db.execute(select(func.count()).select_from(Session))).scalar()
        assert count == 0
        assert await SessionManager(db).validate_session(token) is None
