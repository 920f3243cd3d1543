"""
T-Image API: Image Route Handlers
====================================

What:  POST/GET /api/images and GET/DELETE /api/images/{image_id}.
How:   Upload and delete require Basic credentials (get_current_user);
       listing and single fetch are public.

DELETE returns exactly one response: 204 with an empty body on success,
otherwise the error raised by ImageService (404 before 403).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timage.auth import get_current_user
from timage.database import get_db_session
from timage.models.user import User
from timage.schemas.common import ErrorResponse
from timage.schemas.image import ImageId, ImageResponse, ImageUploadRequest
from timage.services.image_service import image_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/images", tags=["Images"])


@router.post(
    "",
    status_code=201,
    response_model=ImageResponse,
    responses={
        400: {"description": "Title or URL already used", "model": ErrorResponse},
        401: {"description": "Unauthorized - authentication required", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Upload a new image",
    description="Creates a new image entry with title and URL, owned by the caller.",
)
async def upload_image(
    body: ImageUploadRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ImageResponse:
    return await image_service.upload(db, user, body.title, body.url)


@router.get(
    "",
    response_model=List[ImageResponse],
    summary="Get all images",
)
async def list_images(db: AsyncSession = Depends(get_db_session)) -> List[ImageResponse]:
    return await image_service.list_images(db)


@router.get(
    "/{image_id}",
    response_model=ImageResponse,
    responses={
        404: {"description": "Image not found", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Get a single image by ID",
)
async def get_image(
    image_id: ImageId,
    db: AsyncSession = Depends(get_db_session),
) -> ImageResponse:
    return await image_service.get_image(db, image_id)


@router.delete(
    "/{image_id}",
    status_code=204,
    response_class=Response,
    responses={
        401: {"description": "Unauthorized - authentication required", "model": ErrorResponse},
        403: {"description": "Forbidden - user is not the author of the image", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
        422: {"description": "Validation error", "model": ErrorResponse},
    },
    summary="Delete a single image",
    description="Delete image by ID. Only the image author can delete it.",
)
async def delete_image(
    image_id: ImageId,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await image_service.delete_image(db, user, image_id)
    return Response(status_code=204)
