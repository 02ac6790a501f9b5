"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from integration_dashboard.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


class ClearOneRequest(BaseModel):
    """Identifies a single cached request."""

    url: str = Field(min_length=1)
    params: dict[str, Any] | None = None


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/cache/clear", dependencies=[Depends(require_admin)])
async def clear_cache(request: Request) -> dict[str, str]:
    """Drop every cached response."""
    container: AppContainer = request.app.state.container
    container.fetcher.clear_all()
    return {"status": "cleared"}


@router.post("/cache/clear-one", dependencies=[Depends(require_admin)])
async def clear_cache_entry(
    payload: ClearOneRequest, request: Request
) -> dict[str, str]:
    """Drop the cached response for one request."""
    container: AppContainer = request.app.state.container
    container.fetcher.clear_one(payload.url, payload.params)
    return {"status": "cleared"}
