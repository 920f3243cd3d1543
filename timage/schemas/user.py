"""
T-Image API: User Request/Response Schemas
=============================================

Request bodies for signup/login and password reset. Strings are trimmed
before the 1-30 character bounds are checked; violations surface as 422.
"""

from typing import Annotated

from pydantic import Field, StringConstraints

from timage.schemas.common import CamelModel

# Trimmed, 1-30 characters. Shared by usernames and every password field.
CredentialStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=30),
]


class CredentialsRequest(CamelModel):
    """Body of POST /api/auth/signup and POST /api/auth/login."""
    username: CredentialStr = Field(description="Account name, unique", examples=["alice"])
    password: CredentialStr = Field(description="Plaintext password", examples=["secret1"])


class ResetPasswordRequest(CamelModel):
    """Body of PATCH /api/auth/reset-password (JSON keys: oldPassword, newPassword)."""
    old_password: CredentialStr = Field(description="User's current password")
    new_password: CredentialStr = Field(description="User's new password")


class UserSummary(CamelModel):
    """Public view of a user; never includes the password hash."""
    username: str = Field(description="Account name")
    id: str = Field(description="24-character user identifier")
