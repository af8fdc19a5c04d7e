"""Admin user-management endpoints.

List, summarize and export users, and run the moderation actions.  Every
request builds its own ``UserDirectory`` over the injected gateway.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.responses import JSONResponse, Response

from app.core.locks import UserBusyError, user_action
from app.db.gateway import DataGateway, get_gateway
from app.models.enums import SortKey, SortOrder
from app.models.moderation import ActionResponse
from app.models.user import UserListResponse, UserQuery, UserStats
from app.services.dashboard import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def user_query(
    search: str = Query(default="", description="Substring of name or email"),
    sort_by: SortKey = Query(default=SortKey.created_at, description="Field to sort by"),
    order: SortOrder = Query(default=SortOrder.desc, description="Sort order"),
    show_banned: bool = Query(default=True, description="Include banned users"),
) -> UserQuery:
    return UserQuery(search=search, sort_by=sort_by, order=order, show_banned=show_banned)


async def _loaded_directory(gateway: DataGateway, query: UserQuery) -> UserDirectory:
    directory = UserDirectory(gateway, query)
    if not await directory.refresh():
        raise HTTPException(status_code=502, detail=directory.notifications[-1].message)
    return directory


async def _run_action(
    directory: UserDirectory,
    user_id: str,
    action: Callable[[Any], Awaitable[ActionResponse]],
) -> Any:
    try:
        with user_action(user_id):
            result = await action(user_id)
    except UserBusyError as exc:
        raise HTTPException(
            status_code=409,
            detail="Another action on this user is in progress",
        ) from exc

    if not result.success:
        return JSONResponse(status_code=502, content=result.model_dump(mode="json"))

    if directory.loaded:
        result.users = directory.snapshot()
    return result


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@router.get("", response_model=UserListResponse)
async def list_users(
    query: UserQuery = Depends(user_query),
    gateway: DataGateway = Depends(get_gateway),
) -> UserListResponse:
    """Return the visible users with activity counts and summary stats."""
    directory = await _loaded_directory(gateway, query)
    return directory.snapshot()


@router.get("/stats", response_model=UserStats)
async def user_stats(gateway: DataGateway = Depends(get_gateway)) -> UserStats:
    """Return the summary cards over all users."""
    directory = await _loaded_directory(gateway, UserQuery())
    return directory.stats


@router.get("/export")
async def export_users(
    query: UserQuery = Depends(user_query),
    gateway: DataGateway = Depends(get_gateway),
) -> Response:
    """Download the visible users as CSV."""
    directory = await _loaded_directory(gateway, query)
    filename, content = directory.export()
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------

@router.post("/{user_id}/ban", response_model=ActionResponse)
async def ban_user(
    user_id: str,
    query: UserQuery = Depends(user_query),
    gateway: DataGateway = Depends(get_gateway),
) -> Any:
    """Ban a user, then return the refreshed list."""
    directory = UserDirectory(gateway, query)
    return await _run_action(directory, user_id, directory.ban_user)


@router.post("/{user_id}/unban", response_model=ActionResponse)
async def unban_user(
    user_id: str,
    query: UserQuery = Depends(user_query),
    gateway: DataGateway = Depends(get_gateway),
) -> Any:
    """Lift a ban, then return the refreshed list."""
    directory = UserDirectory(gateway, query)
    return await _run_action(directory, user_id, directory.unban_user)


@router.delete("/{user_id}", response_model=ActionResponse)
async def delete_user(
    user_id: str,
    query: UserQuery = Depends(user_query),
    gateway: DataGateway = Depends(get_gateway),
) -> Any:
    """Delete a user with its interviews and results.

    The response lists every step.  Dependent deletes may fail without
    failing the request; only the user-row delete decides the status.
    """
    directory = UserDirectory(gateway, query)
    return await _run_action(directory, user_id, directory.delete_user)
