"""
T-Image API: ORM Models
==========================

Importing this package registers every table on `Base.metadata`
(used by Alembic autogenerate and `database.create_tables`).
"""

from timage.models.user import User
from timage.models.image import Image

__all__ = ["User", "Image"]
