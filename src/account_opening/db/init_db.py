"""
account_opening.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the role catalog.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from account_opening.auth.roles import ROLE_DESCRIPTIONS, RoleName, normalize_role
from account_opening.db.base import Base
from account_opening.db.models import Role


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production relies on Alembic migrations.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_roles(session_factory: async_sessionmaker[AsyncSession]) -> None:
    # Idempotent: only catalog entries missing by key are inserted.
    async with session_factory() as session:
        existing = set((await session.execute(select(Role.key))).scalars().all())
        for role in RoleName:
            key = normalize_role(role.value)
            if key in existing:
                continue
            session.add(Role(name=role.value, key=key, description=ROLE_DESCRIPTIONS[role]))
        await session.commit()
