"""
Service probes.

``/health`` answers as long as the process is serving. ``/ready`` also
touches the database and reports how many cards the catalog holds, so a
deploy can tell a running but unusable instance apart from a working one.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from arcanaflow.api.dependencies import get_catalog
from arcanaflow.db.database import get_session
from arcanaflow.services.card_catalog import CardCatalog

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str | None = None
    catalog_size: int | None = None


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """The process is up. Nothing downstream is checked."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> HealthResponse:
    """
    Readings can be served and recorded.

    Answers 503 with ``database="disconnected"`` while the database is
    unreachable.
    """
    if not await _database_reachable(session):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")

    return HealthResponse(status="ready", database="connected", catalog_size=len(catalog))
