from __future__ import annotations

import asyncio

import pytest

from account_opening.db.models import RoleBinding
from account_opening.errors import AlreadyGranted, UnknownPrincipal, UnknownRole
from account_opening.services.role_directory import RoleDirectory
from tests.conftest import make_user


@pytest.mark.asyncio
async def test_assign_then_query(session_factory) -> None:
    user_id = await make_user(session_factory, login_handle="ana@bank.test", secret="Secreto123")

    async with session_factory() as s:
        directory = RoleDirectory(session=s)
        binding = await directory.assign("ana@bank.test", "operations director")
        assert binding.user_id == user_id

        roles = await directory.roles_of("Ana@Bank.test")
        assert [r.name for r in roles] == ["Operations-Director"]
        assert await directory.has_role("ana@bank.test", "Operations-Director")
        assert not await directory.has_role("ana@bank.test", "Cashier")
        assert await directory.binding_for(user_id, "OPERATIONS_DIRECTOR") == binding.id


@pytest.mark.asyncio
async def test_assign_twice_is_already_granted(session_factory) -> None:
    await make_user(session_factory, login_handle="ana@bank.test", secret="Secreto123")

    async with session_factory() as s:
        await RoleDirectory(session=s).assign("ana@bank.test", "Cashier")
    async with session_factory() as s:
        with pytest.raises(AlreadyGranted):
            await RoleDirectory(session=s).assign("ana@bank.test", "Cashier")
        assert [r.name for r in await RoleDirectory(session=s).roles_of("ana@bank.test")] == [
            "Cashier"
        ]


@pytest.mark.asyncio
async def test_assign_unknown_principal_or_role(session_factory) -> None:
    await make_user(session_factory, login_handle="ana@bank.test", secret="Secreto123")

    async with session_factory() as s:
        directory = RoleDirectory(session=s)
        with pytest.raises(UnknownPrincipal):
            await directory.assign("ghost@bank.test", "Advisor")
        with pytest.raises(UnknownRole):
            await directory.assign("ana@bank.test", "Auditor")


@pytest.mark.asyncio
async def test_roles_of_hides_inactive_principals(session_factory) -> None:
    await make_user(
        session_factory, login_handle="ana@bank.test", secret="Secreto123", is_active=False
    )

    async with session_factory() as s:
        directory = RoleDirectory(session=s)
        await directory.assign("ana@bank.test", "Advisor")
        assert await directory.roles_of("ana@bank.test") == []


@pytest.mark.asyncio
async def test_catalog_is_complete(session_factory) -> None:
    async with session_factory() as s:
        names = [r.name for r in await RoleDirectory(session=s).all_roles()]
    assert names == sorted(["Advisor", "Operations-Director", "Administrator", "Cashier"])


@pytest.mark.asyncio
async def test_concurrent_identical_assigns_grant_once(session_factory) -> None:
    await make_user(session_factory, login_handle="ana@bank.test", secret="Secreto123")

    async def assign():
        async with session_factory() as s:
            return await RoleDirectory(session=s).assign("ana@bank.test", "Administrator")

    results = await asyncio.gather(*(assign() for _ in range(4)), return_exceptions=True)

    granted = [r for r in results if isinstance(r, RoleBinding)]
    refused = [r for r in results if isinstance(r, AlreadyGranted)]
    assert len(granted) == 1
    assert len(refused) == 3

    async with session_factory() as s:
        roles = await RoleDirectory(session=s).roles_of("ana@bank.test")
    assert [r.name for r in roles] == ["Administrator"]
