"""
T-Image API: Image SQLAlchemy Model
======================================

What:  ORM model for the `images` table. Only the URL of an image is
       stored; the bytes live wherever the URL points.
Who:   Used by ImageService.

Table Design:
    - title and url are each UNIQUE; upload relies on the constraints to
      report duplicates
    - author_id references users.id and never changes after insert
    - created_at index serves the "list all images" query, which returns
      images in creation order
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timage.database import Base, new_object_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Image(Base):
    """
    Image metadata uploaded by a user.

    Lifecycle:
        1. Created by upload (author = authenticated caller)
        2. Never updated in place
        3. Deleted only by its author
    """

    __tablename__ = "images"

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=new_object_id,
    )

    title: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        unique=True,
    )

    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        unique=True,
    )

    author_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_images_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, title='{self.title}', author_id={self.author_id})>"
