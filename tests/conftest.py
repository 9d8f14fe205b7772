"""
tests.conftest

Shared fixtures: a fresh SQLite file per test, the app with its lifespan running, and an
httpx client wired through ASGITransport.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from account_opening.api.app import create_app
from account_opening.auth.passwords import hash_secret
from account_opening.db.models import Client, ClientProfile, User
from account_opening.db.repositories.users import UserRepo
from account_opening.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path}/test.db",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not drive lifespan; run it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def session_factory(app: FastAPI) -> async_sessionmaker[AsyncSession]:
    return app.state.sessionmaker



async def make_user(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    login_handle: str,
    secret: str,
    full_name: str = "Test User",
    is_active: bool = True,
) -> int:
    async with session_factory() as s:
        user: User = await UserRepo(s).create(
            full_name=full_name,
            login_handle=login_handle,
            password_hash=hash_secret(secret, rounds=4),
        )
        user.is_active = is_active
        user_id = user.id
        await s.commit()
    return user_id


async def make_client(
    session_factory: async_sessionmaker[AsyncSession], *, national_id: str = "1020304050"
) -> int:
    async with session_factory() as s:
        client = Client(
            national_id=national_id,
            first_name="Laura",
            last_name="Gomez",
            second_last_name="Rios",
        )
        s.add(client)
        await s.flush()
        s.add(
            ClientProfile(
                client_id=client.id,
                email="laura@example.test",
                phone="3001234567",
                city="Bogota",
            )
        )
        client_id = client.id
        await s.commit()
    return client_id
