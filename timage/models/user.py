"""
T-Image API: User SQLAlchemy Model
=====================================

What:  ORM model for the `users` table.
Who:   Used by UserService and the Basic credential verifier.

Table Design:
    - id: 24-char hex string, generated in Python (see database.new_object_id)
    - username: unique; the UNIQUE constraint is what signup relies on to
      detect duplicates atomically
    - password_hash: bcrypt output (60 chars); plaintext is never stored
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timage.database import Base, new_object_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    An account that can upload and delete images.

    Lifecycle:
        1. Created by signup
        2. password_hash replaced by password reset
        3. Never deleted
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=new_object_id,
    )

    username: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
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

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
