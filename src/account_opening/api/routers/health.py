"""
account_opening.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): DB reachable and role catalog seeded.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.api.deps import db_session
from account_opening.auth.roles import RoleName
from account_opening.db.models import Role

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> JSONResponse:
    # Login cannot succeed until every catalog role exists.
    seeded = (await session.execute(select(func.count(Role.id)))).scalar_one()
    if seeded < len(RoleName):
        return JSONResponse(status_code=503, content={"status": "not_ready", "roles": seeded})
    return JSONResponse(content={"status": "ready", "roles": seeded})
