"""
API v1 Router
Main router for all API v1 endpoints
"""

from fastapi import APIRouter
from newsletter_api.api.v1.endpoints import auth, newsletters, users

api_router = APIRouter()

# Authentication endpoints
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

# User management endpoints
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

# Newsletter management endpoints
api_router.include_router(
    newsletters.router,
    prefix="/newsletters",
    tags=["newsletters"]
)
