"""
Authentication Endpoints
Login, forced password change and caller profile
"""

import asyncio
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from newsletter_api.core.config import settings
from newsletter_api.core.database import get_db
from newsletter_api.core.deps import RequestContext, get_request_context, get_user_service
from newsletter_api.core.exceptions import BadRequestError, UnauthorizedError
from newsletter_api.core.permissions import get_permissions
from newsletter_api.core.security import create_access_token, verify_password
from newsletter_api.schemas.auth import ChangePasswordRequest, LoginRequest, TokenResponse
from newsletter_api.schemas.base import SuccessResponse
from newsletter_api.schemas.user import UserRead
from newsletter_api.services.activity import log_activity
from newsletter_api.services.user import UserService

logger = structlog.get_logger()
router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    users: UserService = Depends(get_user_service),
) -> Any:
    """
    Exchange email and password for a bearer token

    A caller with a pending password still gets a token; gated endpoints
    reject it until the password is changed.
    """
    user = await users.find_by_email(db, login_data.email)
    if not user:
        logger.warning("Login attempt with non-existent email", email=login_data.email)
        raise UnauthorizedError("Invalid email or password")

    # Verify password (run in executor to avoid blocking event loop)
    password_valid = await asyncio.to_thread(verify_password, login_data.password, user.hashed_password)
    if not password_valid:
        logger.warning("Login attempt with invalid password", email=login_data.email, user_id=user.id)
        raise UnauthorizedError("Invalid email or password")

    expires = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(subject=user.id, expires_delta=expires)

    logger.info("User logged in", user_id=user.id)
    return TokenResponse(
        access_token=access_token,
        expires_in=int(expires.total_seconds()),
        pending_password=user.pending_password,
    )


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    password_data: ChangePasswordRequest,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    """Change the caller's password and clear any forced-change flag"""
    permissions = await get_permissions(ctx, users, block_on_pending_password=False)
    caller = permissions.caller

    password_valid = await asyncio.to_thread(
        verify_password, password_data.current_password, caller.hashed_password
    )
    if not password_valid:
        raise BadRequestError("Current password is incorrect")
    if password_data.new_password == password_data.current_password:
        raise BadRequestError("New password must differ from the current one")

    changed = await users.change_password(ctx.db, caller, password_data.new_password)
    log_activity(background_tasks, changed, "changed password", caller)
    return SuccessResponse(message="Password changed successfully")


@router.get("/me", response_model=UserRead)
async def get_current_user_profile(
    ctx: RequestContext = Depends(get_request_context),
    users: UserService = Depends(get_user_service),
) -> Any:
    """Caller profile, readable even while a password change is pending"""
    permissions = await get_permissions(ctx, users, block_on_pending_password=False)
    return permissions.caller
