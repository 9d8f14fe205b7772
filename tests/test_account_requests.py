"""
tests.test_account_requests

Request lifecycle: creation, guarded transitions, and the read views.
"""

from __future__ import annotations

import asyncio

import pytest

from account_opening.db.models import ProductType, RequestState
from account_opening.errors import EmptyComment, RequestNotFound
from account_opening.services.account_requests import AccountRequestService, ArtifactUpload
from account_opening.services.role_directory import RoleDirectory
from tests.conftest import make_client, make_user


async def _advisor_binding(session_factory, handle: str = "ana@bank.test") -> int:
    user_id = await make_user(session_factory, login_handle=handle, secret="Secreto123")
    async with session_factory() as s:
        directory = RoleDirectory(session=s)
        role = await directory.find_role("Advisor")
        binding, _ = await directory.get_or_create(user_id=user_id, role_id=role.id)
        return binding.id


async def _create(session_factory, **kwargs) -> int:
    async with session_factory() as s:
        return await AccountRequestService(session=s).create(**kwargs)


async def _get(session_factory, request_id: int):
    async with session_factory() as s:
        return await AccountRequestService(session=s).get(request_id)


@pytest.mark.asyncio
async def test_new_request_is_pending_and_attributed(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)

    request_id = await _create(
        session_factory,
        client_id=client_id,
        creator_binding_id=binding_id,
        comment="  first savings account ",
    )

    req = await _get(session_factory, request_id)
    assert req.state is RequestState.pending
    assert req.product_type is ProductType.savings
    assert req.creator_binding_id == binding_id
    assert req.advisor_comment == "first savings account"
    assert req.resolved_at is None
    assert not req.has_artifact
    assert req.creator.user.login_handle == "ana@bank.test"
    assert req.creator.role.name == "Advisor"
    assert req.client.full_name == "Laura Gomez Rios"


@pytest.mark.asyncio
async def test_reject_requires_comment_then_terminal(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)
    request_id = await _create(session_factory, client_id=client_id, creator_binding_id=binding_id)

    async with session_factory() as s:
        service = AccountRequestService(session=s)
        with pytest.raises(EmptyComment):
            await service.reject(request_id, "   ")
        assert (await service.get(request_id)).state is RequestState.pending

        assert await service.reject(request_id, "missing income proof") is True
        assert await service.approve(request_id) is False

    req = await _get(session_factory, request_id)
    assert req.state is RequestState.rejected
    assert req.director_comment == "missing income proof"
    assert req.resolved_at is not None


@pytest.mark.asyncio
async def test_approve_is_idempotent(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)
    request_id = await _create(session_factory, client_id=client_id, creator_binding_id=binding_id)

    async with session_factory() as s:
        service = AccountRequestService(session=s)
        assert await service.approve(request_id) is True
        first = (await service.get(request_id)).resolved_at
        assert await service.approve(request_id) is False
        assert await service.reject(request_id, "too late") is False
        again = await service.get(request_id)

    assert again.state is RequestState.approved
    assert again.resolved_at == first
    assert again.director_comment is None


@pytest.mark.asyncio
async def test_concurrent_resolutions_have_one_winner(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)
    request_id = await _create(session_factory, client_id=client_id, creator_binding_id=binding_id)

    async def approve() -> bool:
        async with session_factory() as s:
            return await AccountRequestService(session=s).approve(request_id)

    async def reject() -> bool:
        async with session_factory() as s:
            return await AccountRequestService(session=s).reject(request_id, "duplicate")

    results = await asyncio.gather(approve(), reject(), approve())
    assert sorted(results) == [False, False, True]
    assert (await _get(session_factory, request_id)).state is not RequestState.pending


@pytest.mark.asyncio
async def test_unknown_request(session_factory) -> None:
    async with session_factory() as s:
        service = AccountRequestService(session=s)
        assert await service.approve(9999) is False
        with pytest.raises(RequestNotFound):
            await service.get(9999)
        with pytest.raises(RequestNotFound):
            await service.get_detail(9999)


@pytest.mark.asyncio
async def test_list_filters_and_orders_newest_first(session_factory) -> None:
    ana = await _advisor_binding(session_factory, "ana@bank.test")
    luis = await _advisor_binding(session_factory, "luis@bank.test")
    client_id = await make_client(session_factory)

    first = await _create(session_factory, client_id=client_id, creator_binding_id=ana)
    second = await _create(session_factory, client_id=client_id, creator_binding_id=luis)
    third = await _create(session_factory, client_id=client_id, creator_binding_id=ana)

    async with session_factory() as s:
        service = AccountRequestService(session=s)
        await service.approve(second)

        assert [r.id for r in await service.list()] == [third, second, first]
        assert [r.id for r in await service.list(creator_binding_id=ana)] == [third, first]
        assert [r.id for r in await service.list(state=RequestState.approved)] == [second]
        assert [r.id for r in await service.list(state=RequestState.pending)] == [third, first]


@pytest.mark.asyncio
async def test_detail_includes_client_profile(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)
    request_id = await _create(
        session_factory,
        client_id=client_id,
        creator_binding_id=binding_id,
        artifact=ArtifactUpload(content=b"%PDF-1.4", content_type="pdf"),
    )

    async with session_factory() as s:
        req = await AccountRequestService(session=s).get_detail(request_id)
    assert req.client.profile.email == "laura@example.test"
    assert req.has_artifact
    assert req.artifact_type == "pdf"


@pytest.mark.asyncio
async def test_delete(session_factory) -> None:
    binding_id = await _advisor_binding(session_factory)
    client_id = await make_client(session_factory)
    request_id = await _create(session_factory, client_id=client_id, creator_binding_id=binding_id)

    async with session_factory() as s:
        service = AccountRequestService(session=s)
        assert await service.delete(request_id) is True
        assert await service.delete(request_id) is False
        with pytest.raises(RequestNotFound):
            await service.get(request_id)
