"""
Caller identity resolution and permission evaluation shared by the
newsletter and user controllers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from newsletter_api.core.deps import RequestContext
from newsletter_api.core.exceptions import ForbiddenError, UnauthorizedError
from newsletter_api.models.user import User
from newsletter_api.services.user import UserService

logger = structlog.get_logger()

PENDING_PASSWORD_DETAIL = "You must change your password before proceeding with this operation."


@dataclass(frozen=True)
class Permissions:
    caller: User
    # Restricted to the caller's own resources
    only_himself: bool
    # Confirmed cross-user authority
    super: bool


def evaluate_permissions(caller: Any, block_on_pending_password: bool = True) -> Permissions:
    """Derive the permission flags of a resolved caller.

    A super account whose grant is still pending confirmation is treated
    like a regular account.

    Raises:
        ForbiddenError: the caller must change its password first
    """
    if block_on_pending_password and caller.pending_password:
        logger.warning("Caller blocked by pending password change", user_id=caller.id)
        raise ForbiddenError(PENDING_PASSWORD_DETAIL)

    is_super = bool(caller.is_super)
    pending_confirm = bool(caller.pending_confirm)

    return Permissions(
        caller=caller,
        only_himself=(not is_super) or (is_super and pending_confirm),
        super=is_super and not pending_confirm,
    )


async def resolve_caller(ctx: RequestContext, user_service: UserService) -> User:
    """Load the caller record named by the request context.

    A valid token whose user no longer exists means the token and the store
    disagree, reported as 401.
    """
    caller = await user_service.find_by_id(ctx.db, ctx.caller_id)
    if caller is None:
        logger.warning("Logged user not found", user_id=ctx.caller_id)
        raise UnauthorizedError("Logged user cannot be found!")
    return caller


async def get_permissions(
    ctx: RequestContext,
    user_service: UserService,
    block_on_pending_password: bool = True,
) -> Permissions:
    caller = await resolve_caller(ctx, user_service)
    return evaluate_permissions(caller, block_on_pending_password)
