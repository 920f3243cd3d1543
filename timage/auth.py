"""
T-Image API: Basic Credential Verifier
=========================================

What:  Resolves the caller of a protected endpoint from the HTTP Basic
       `Authorization` header.
How:   1. Split the header into scheme and parameter; scheme must be Basic
       2. base64-decode the parameter into "username:password"
       3. Look the user up and verify the password hash (UserService)
       Any failure raises AuthenticationError → 401 with WWW-Authenticate.
Who:   Injected into protected routes with `Depends(get_current_user)`.

Every request re-verifies from scratch: nothing is cached and no session
or token is issued.
"""

import base64
import binascii
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.ext.asyncio import AsyncSession

from timage.database import get_db_session
from timage.exceptions import AuthenticationError
from timage.models.user import User
from timage.services.user_service import user_service

logger = logging.getLogger(__name__)


def decode_basic_credentials(authorization: Optional[str]) -> Optional[HTTPBasicCredentials]:
    """
    Decode a raw `Authorization` header value into Basic credentials.

    Returns None when the header is absent, the scheme is not Basic, the
    payload is not valid base64/UTF-8, or the decoded text has no colon.
    The username ends at the first colon; the password may contain colons.
    """
    if not authorization:
        return None
    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return HTTPBasicCredentials(username=username, password=password)


class BasicAuthScheme(HTTPBasic):
    """
    HTTPBasic that never raises while parsing.

    Registered as the `BasicAuth` security scheme in the OpenAPI document;
    the decision to reject is left to `get_current_user` so every failure
    produces the same error body.
    """

    async def __call__(self, request: Request) -> Optional[HTTPBasicCredentials]:  # type: ignore[override]
        return decode_basic_credentials(request.headers.get("Authorization"))


basic_auth = BasicAuthScheme(scheme_name="BasicAuth", auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    FastAPI dependency returning the authenticated User.

    Raises:
        AuthenticationError: missing, malformed or wrong credentials (→ 401)
    """
    if credentials is None:
        raise AuthenticationError(context={"reason": "missing_or_malformed_header"})

    user = await user_service.authenticate(db, credentials.username, credentials.password)
    if user is None:
        raise AuthenticationError(context={"reason": "bad_credentials"})

    logger.debug("Authenticated request as user %s", user.id)
    return user
