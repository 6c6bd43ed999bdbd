"""User management endpoints."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status

from newsletter_api.core.config import settings
from newsletter_api.core.deps import RequestContext, get_request_context, get_user_service
from newsletter_api.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from newsletter_api.core.pagination import MAX_PAGE, get_filter, get_paging_data, get_paging_data_for_single
from newsletter_api.core.permissions import PENDING_PASSWORD_DETAIL, get_permissions
from newsletter_api.schemas.base import PaginatedResponse
from newsletter_api.schemas.user import UserCreate, UserPromoteResponse, UserRead, UserUpdate
from newsletter_api.services.activity import log_activity
from newsletter_api.services.user import UserService

logger = structlog.get_logger()
router = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_users(
    page: Optional[int] = Query(default=None, ge=0, le=MAX_PAGE),
    size: Optional[int] = Query(default=None, ge=1, le=settings.MAX_PAGE_SIZE),
    name: Optional[str] = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    """List users; a regular caller gets a single page holding only itself."""
    permissions = await get_permissions(ctx, users)

    page_filter = get_filter(page, size)
    if name:
        page_filter.name = name

    if permissions.only_himself:
        return get_paging_data_for_single(
            UserRead.model_validate(permissions.caller), page_filter.page, page_filter.size
        )

    rows, total = await users.find_all(ctx.db, page_filter)
    items = [UserRead.model_validate(row) for row in rows]
    return get_paging_data((items, total), page_filter.page, page_filter.size)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    permissions = await get_permissions(ctx, users, block_on_pending_password=False)
    caller = permissions.caller

    if permissions.only_himself:
        if caller.id != user_id:
            raise ForbiddenError("You don't have privileges to access data of another user")
        if caller.pending_password:
            raise ForbiddenError(PENDING_PASSWORD_DETAIL)
        return caller

    requested = await users.find_by_id(ctx.db, user_id)
    if requested is None:
        raise NotFoundError("User not found")
    return requested


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    if permissions.only_himself:
        raise ForbiddenError("You don't have privileges to create users")

    created = await users.save(ctx.db, user_in)
    log_activity(background_tasks, created, "was created", permissions.caller)
    return created


@router.put("/{user_id}", response_model=UserRead)
async def edit_user(
    user_id: int,
    user_in: UserUpdate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    caller = permissions.caller

    if permissions.only_himself:
        if caller.id != user_id:
            raise ForbiddenError("You don't have privileges to edit other users")
        edited = await users.edit(ctx.db, caller, user_in.model_dump(include={"name", "email", "password"}))
        log_activity(background_tasks, edited, "was edited", caller)
        return edited

    edited = await users.edit_by_id(
        ctx.db, user_id, user_in.model_dump(include={"name", "email", "password", "pending_confirm"})
    )
    if edited is None:
        raise NotFoundError("User not found")
    log_activity(background_tasks, edited, "was edited", caller)
    return edited


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def remove_user(
    user_id: int,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Response:
    permissions = await get_permissions(ctx, users, block_on_pending_password=False)
    caller = permissions.caller

    if permissions.only_himself:
        if caller.id != user_id:
            raise ForbiddenError("You don't have privileges to delete users")
        if caller.pending_password:
            raise ForbiddenError(PENDING_PASSWORD_DETAIL)

        removed = await users.remove(ctx.db, caller)
        log_activity(background_tasks, removed, "was removed", caller)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if caller.id == user_id and caller.pending_password:
        raise ForbiddenError(PENDING_PASSWORD_DETAIL)

    requested = await users.find_by_id(ctx.db, user_id)
    if requested is None:
        raise NotFoundError("User not found")

    removed = await users.remove(ctx.db, requested)
    log_activity(background_tasks, removed, "was removed", caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/promote", response_model=UserPromoteResponse)
async def promote_user(
    user_id: int,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    """Grant super privileges to another user, pending confirmation."""
    permissions = await get_permissions(ctx, users)
    if not permissions.super:
        raise ForbiddenError("You don't have privileges to promote users")

    if permissions.caller.id == user_id:
        raise BadRequestError("You cannot promote yourself")

    promoted = await users.promote(ctx.db, user_id)
    if promoted is None:
        raise NotFoundError("User not found")

    log_activity(background_tasks, promoted, "was promoted", permissions.caller)
    return UserPromoteResponse(
        message="User was promoted successfully",
        user=UserRead.model_validate(promoted),
    )
