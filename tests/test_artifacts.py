from __future__ import annotations

import pytest
from sqlalchemy import update

from account_opening.db.models import AccountRequest
from account_opening.errors import ArtifactNotFound
from account_opening.services.account_requests import AccountRequestService
from account_opening.services.artifacts import ArtifactStore
from account_opening.services.role_directory import RoleDirectory
from tests.conftest import make_client, make_user


async def _pending_request(session_factory) -> int:
    user_id = await make_user(session_factory, login_handle="ana@bank.test", secret="Secreto123")
    client_id = await make_client(session_factory)
    async with session_factory() as s:
        directory = RoleDirectory(session=s)
        role = await directory.find_role("Advisor")
        binding, _ = await directory.get_or_create(user_id=user_id, role_id=role.id)
        return await AccountRequestService(session=s).create(
            client_id=client_id, creator_binding_id=binding.id
        )


@pytest.mark.asyncio
async def test_attach_then_read(session_factory) -> None:
    request_id = await _pending_request(session_factory)
    payload = b"%PDF-1.7\n" + bytes(range(256))

    async with session_factory() as s:
        store = ArtifactStore(session=s)
        assert await store.attach(request_id, payload, "pdf") is True
        stored = await store.read(request_id)

    assert stored.content == payload
    assert stored.content_type == "pdf"


@pytest.mark.asyncio
async def test_attach_is_write_once(session_factory) -> None:
    request_id = await _pending_request(session_factory)

    async with session_factory() as s:
        store = ArtifactStore(session=s)
        assert await store.attach(request_id, b"first", "png") is True
        assert await store.attach(request_id, b"second", "pdf") is False
        stored = await store.read(request_id)

    assert stored.content == b"first"
    assert stored.content_type == "png"


@pytest.mark.asyncio
async def test_read_without_artifact(session_factory) -> None:
    request_id = await _pending_request(session_factory)

    async with session_factory() as s:
        store = ArtifactStore(session=s)
        with pytest.raises(ArtifactNotFound):
            await store.read(request_id)
        with pytest.raises(ArtifactNotFound):
            await store.read(424242)
        assert await store.attach(424242, b"x", "pdf") is False


@pytest.mark.asyncio
async def test_missing_type_tag_defaults_to_pdf(session_factory) -> None:
    request_id = await _pending_request(session_factory)

    async with session_factory() as s:
        await s.execute(
            update(AccountRequest)
            .where(AccountRequest.id == request_id)
            .values(artifact=b"legacy bytes", artifact_type=None)
        )
        await s.commit()
        stored = await ArtifactStore(session=s).read(request_id)

    assert stored.content_type == "pdf"
