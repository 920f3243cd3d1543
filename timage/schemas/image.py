"""
T-Image API: Image Request/Response Schemas
==============================================

What:  Upload body, image response model and the `image_id` path parameter.
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Path
from pydantic import AnyUrl, Field, StringConstraints, TypeAdapter, field_validator

from timage.schemas.common import CamelModel

_uri_adapter = TypeAdapter(AnyUrl)

# Path parameter for single-image routes: identifiers are exactly 24 characters
ImageId = Annotated[
    str,
    Path(
        min_length=24,
        max_length=24,
        description="ID of the image",
        examples=["60d21b4667d0d8992e610c85"],
    ),
]


class ImageUploadRequest(CamelModel):
    """
    Body of POST /api/images.

    `url` is validated as an absolute URI but stored exactly as sent (after
    trimming), so "https://x.com/a.jpg" is not normalized.
    """
    title: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)
    ] = Field(description="Title of the image", examples=["Sunset"])
    url: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1)
    ] = Field(description="URL of the image", examples=["https://x.com/a.jpg"])

    @field_validator("url")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        try:
            _uri_adapter.validate_python(v)
        except ValueError:
            raise ValueError("url must be a valid URI")
        return v


class ImageResponse(CamelModel):
    """An image record as returned by every image endpoint."""
    id: str = Field(description="24-character image identifier")
    title: str = Field(description="Title of the image")
    url: str = Field(description="URL of the image")
    author_id: str = Field(description="ID of the user who uploaded the image")
    created_at: datetime = Field(description="When the image was uploaded (UTC)")
    updated_at: datetime = Field(description="Last modification time (UTC)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
