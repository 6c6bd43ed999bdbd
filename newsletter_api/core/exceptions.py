"""
API error taxonomy.

Every error is an ``HTTPException`` so FastAPI renders it as
``{"detail": ...}`` with the matching status code.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class APIError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    title: str = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.title, headers=headers)


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Bad Request"


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not found"


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT
    title = "Conflict"
