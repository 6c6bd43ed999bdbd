"""
FastAPI Dependencies
Request context and service providers
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from newsletter_api.core.database import get_db
from newsletter_api.core.exceptions import UnauthorizedError
from newsletter_api.core.security import verify_token
from newsletter_api.services.newsletter import NewsletterService
from newsletter_api.services.user import UserService

logger = structlog.get_logger()

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller id plus the request's database session"""
    caller_id: int
    db: AsyncSession


async def get_caller_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> int:
    """
    Extract the caller id from the bearer token

    Raises:
        UnauthorizedError: If credentials are missing or invalid
    """
    if not credentials:
        logger.warning("Missing authentication credentials")
        raise UnauthorizedError("Not authenticated")

    subject = verify_token(credentials.credentials, token_type="access")
    try:
        return int(subject)
    except ValueError:
        logger.warning("Token subject is not a user id", subject=subject)
        raise UnauthorizedError("Could not validate credentials")


async def get_request_context(
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    return RequestContext(caller_id=caller_id, db=db)


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_newsletter_service(request: Request) -> NewsletterService:
    return request.app.state.newsletter_service
