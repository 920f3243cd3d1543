"""
T-Image API: Image Service
=============================

What:  Upload, list, fetch and owner-only delete of image records.
Who:   Called by the /api/images routes.

Ownership Rule:
    Only the user whose id equals `image.author_id` may delete an image.
    A missing image is reported before ownership is checked, so
    DELETE on an unknown id is 404 for every caller.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timage.database import create_record
from timage.exceptions import ConflictError, DatabaseError, ForbiddenError, NotFoundError
from timage.models.image import Image
from timage.models.user import User
from timage.schemas.image import ImageResponse

logger = logging.getLogger(__name__)


class ImageService:
    """Business logic layer for image records. Stateless."""

    async def upload(
        self, db: AsyncSession, author: User, title: str, url: str
    ) -> ImageResponse:
        """
        Store a new image owned by `author`.

        Raises:
            ConflictError: title or url already used by another image (→ 400)
        """
        image = Image(title=title, url=url, author_id=author.id)
        try:
            await create_record(db, image)
        except ConflictError:
            raise ConflictError(
                message="An image with this title or URL already exists",
                context={"title": title, "url": url},
            )

        logger.info("Image %s uploaded by user %s", image.id, image.author_id)
        return ImageResponse.model_validate(image)

    async def list_images(self, db: AsyncSession) -> List[ImageResponse]:
        """Return every image, oldest first."""
        try:
            result = await db.execute(
                select(Image).order_by(Image.created_at, Image.id)
            )
            images = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing images: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve images. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [ImageResponse.model_validate(image) for image in images]

    async def _get(self, db: AsyncSession, image_id: str) -> Image:
        try:
            result = await db.execute(select(Image).where(Image.id == image_id))
            image = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching image %s: %s", image_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the image. Please try again.",
                context={"image_id": image_id},
            )
        if image is None:
            raise NotFoundError(resource="image", resource_id=image_id)
        return image

    async def get_image(self, db: AsyncSession, image_id: str) -> ImageResponse:
        """
        Raises:
            NotFoundError: no image with this id (→ 404)
        """
        return ImageResponse.model_validate(await self._get(db, image_id))

    async def delete_image(self, db: AsyncSession, user: User, image_id: str) -> None:
        """
        Delete an image owned by `user`.

        Raises:
            NotFoundError: no image with this id (→ 404)
            ForbiddenError: `user` is not the author (→ 403); image untouched
        """
        image = await self._get(db, image_id)
        if image.author_id != user.id:
            logger.warning(
                "User %s attempted to delete image %s owned by %s",
                user.id, image.id, image.author_id,
            )
            raise ForbiddenError(
                message="Forbidden from deleting",
                context={"image_id": image.id, "user_id": user.id},
            )

        await db.delete(image)
        await db.flush()
        logger.info("Image %s deleted by user %s", image_id, user.id)


image_service = ImageService()
