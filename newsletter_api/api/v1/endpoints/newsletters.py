"""
Newsletter Endpoints
Newsletter CRUD and activation, gated by caller ownership
"""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status

from newsletter_api.core.config import settings
from newsletter_api.core.deps import (
    RequestContext,
    get_newsletter_service,
    get_request_context,
    get_user_service,
)
from newsletter_api.core.exceptions import ForbiddenError, NotFoundError
from newsletter_api.core.pagination import MAX_PAGE, get_filter, get_paging_data
from newsletter_api.core.permissions import Permissions, get_permissions
from newsletter_api.models.newsletter import Newsletter
from newsletter_api.schemas.base import PaginatedResponse
from newsletter_api.schemas.newsletter import (
    NewsletterCreate,
    NewsletterRead,
    NewsletterStatusResponse,
    NewsletterUpdate,
)
from newsletter_api.services.activity import log_activity
from newsletter_api.services.newsletter import NewsletterService
from newsletter_api.services.user import UserService

logger = structlog.get_logger()
router = APIRouter()


async def _list_newsletters(
    ctx: RequestContext,
    users: UserService,
    newsletters: NewsletterService,
    *,
    page: Optional[int],
    size: Optional[int],
    name: Optional[str],
    logged_user: bool,
) -> PaginatedResponse:
    permissions = await get_permissions(ctx, users)

    page_filter = get_filter(page, size)
    if permissions.only_himself or logged_user:
        page_filter.user_id = permissions.caller.id
    if name:
        page_filter.name = name

    rows, total = await newsletters.find_all(ctx.db, page_filter)
    items = [NewsletterRead.model_validate(row) for row in rows]
    return get_paging_data((items, total), page_filter.page, page_filter.size)


async def _load_owned_newsletter(
    ctx: RequestContext,
    newsletters: NewsletterService,
    permissions: Permissions,
    newsletter_id: int,
    forbidden_detail: str,
) -> Newsletter:
    newsletter = await newsletters.find_by_id(ctx.db, newsletter_id)
    if newsletter is None:
        raise NotFoundError("Newsletter not found")

    if permissions.only_himself and newsletter.user_id != permissions.caller.id:
        logger.warning(
            "Newsletter access denied",
            newsletter_id=newsletter_id,
            owner_id=newsletter.user_id,
            user_id=permissions.caller.id,
        )
        raise ForbiddenError(forbidden_detail)

    return newsletter


@router.get("", response_model=PaginatedResponse)
async def list_newsletters(
    page: Optional[int] = Query(None, ge=0, le=MAX_PAGE, description="Zero-based page number"),
    size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    name: Optional[str] = Query(None, description="Name contains"),
    logged_user: bool = Query(False, description="Only newsletters owned by the caller"),
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    """List newsletters; regular callers only ever see their own."""
    return await _list_newsletters(
        ctx, users, newsletters, page=page, size=size, name=name, logged_user=logged_user
    )


@router.get("/mine", response_model=PaginatedResponse)
async def list_my_newsletters(
    page: Optional[int] = Query(None, ge=0, le=MAX_PAGE, description="Zero-based page number"),
    size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    name: Optional[str] = Query(None, description="Name contains"),
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    """List the caller's own newsletters."""
    return await _list_newsletters(
        ctx, users, newsletters, page=page, size=size, name=name, logged_user=True
    )


@router.get("/{newsletter_id}", response_model=NewsletterRead)
async def get_newsletter(
    newsletter_id: int,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    return await _load_owned_newsletter(
        ctx, newsletters, permissions, newsletter_id,
        "You cannot access newsletter from another user",
    )


@router.post("", response_model=NewsletterRead, status_code=status.HTTP_201_CREATED)
async def create_newsletter(
    newsletter_in: NewsletterCreate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    if permissions.only_himself and newsletter_in.user_id != permissions.caller.id:
        raise ForbiddenError("You don't have privileges to create newsletters from another users")

    created = await newsletters.save(ctx.db, newsletter_in)
    log_activity(background_tasks, created, "was created", permissions.caller)
    return created


@router.put("/{newsletter_id}", response_model=NewsletterRead)
async def edit_newsletter(
    newsletter_id: int,
    newsletter_in: NewsletterUpdate,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    newsletter = await _load_owned_newsletter(
        ctx, newsletters, permissions, newsletter_id,
        "You don't have privileges to edit newsletters of another users",
    )

    if permissions.only_himself and newsletter_in.user_id != newsletter.user_id:
        raise ForbiddenError("You don't have privileges to transfer newsletters to another users")

    edited = await newsletters.edit(ctx.db, newsletter, newsletter_in)
    log_activity(background_tasks, edited, "was edited", permissions.caller)
    return edited


@router.patch("/{newsletter_id}/activate", response_model=NewsletterStatusResponse)
async def activate_newsletter(
    newsletter_id: int,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    newsletter = await _load_owned_newsletter(
        ctx, newsletters, permissions, newsletter_id,
        "You don't have privileges to edit newsletters of another users",
    )

    activated = await newsletters.activate(ctx.db, newsletter)
    log_activity(background_tasks, activated, "was activated", permissions.caller)
    return NewsletterStatusResponse(
        message="Newsletter was activated successfully",
        newsletter=NewsletterRead.model_validate(activated),
    )


@router.patch("/{newsletter_id}/deactivate", response_model=NewsletterStatusResponse)
async def deactivate_newsletter(
    newsletter_id: int,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Any:
    permissions = await get_permissions(ctx, users)
    newsletter = await _load_owned_newsletter(
        ctx, newsletters, permissions, newsletter_id,
        "You don't have privileges to edit newsletters of another users",
    )

    deactivated = await newsletters.deactivate(ctx.db, newsletter)
    log_activity(background_tasks, deactivated, "was deactivated", permissions.caller)
    return NewsletterStatusResponse(
        message="Newsletter was deactivated successfully",
        newsletter=NewsletterRead.model_validate(deactivated),
    )


@router.delete("/{newsletter_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def remove_newsletter(
    newsletter_id: int,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
    newsletters: NewsletterService = Depends(get_newsletter_service),
) -> Response:
    permissions = await get_permissions(ctx, users)
    newsletter = await _load_owned_newsletter(
        ctx, newsletters, permissions, newsletter_id,
        "You don't have privileges to remove newsletters of another users",
    )

    removed = await newsletters.remove(ctx.db, newsletter)
    log_activity(background_tasks, removed, "was removed", permissions.caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
