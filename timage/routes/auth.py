"""
T-Image API: Authentication Route Handlers
=============================================

What:  POST /api/auth/signup, POST /api/auth/login,
       PATCH /api/auth/reset-password.
How:   FastAPI validates the body against the schemas (422 on failure),
       then the handler delegates to UserService.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timage.auth import get_current_user
from timage.database import get_db_session
from timage.models.user import User
from timage.schemas.common import ErrorResponse, MessageResponse
from timage.schemas.user import CredentialsRequest, ResetPasswordRequest, UserSummary
from timage.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/signup",
    status_code=201,
    response_model=UserSummary,
    responses={
        400: {"description": "Username already exists", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def signup(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserSummary:
    return await user_service.signup(db, body.username, body.password)


@router.post(
    "/login",
    response_model=UserSummary,
    responses={
        400: {"description": "Invalid username or password", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Login user",
    description="Checks a username and password. No session or token is issued.",
)
async def login(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserSummary:
    return await user_service.login(db, body.username, body.password)


@router.patch(
    "/reset-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid old password", "model": ErrorResponse},
        401: {"description": "Unauthorized - authentication required", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Reset user password",
    description="Change the caller's password after validating the old password.",
)
async def reset_password(
    body: ResetPasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await user_service.reset_password(db, user, body.old_password, body.new_password)
    return MessageResponse(message="Password updated successfully")
