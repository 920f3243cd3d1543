"""
T-Image API: User Service
============================

What:  Signup, login, password reset and credential lookup for users.
How:   Passwords go through timage.security (bcrypt); inserts go through
       database.create_record so duplicate usernames surface as
       ConflictError straight from the UNIQUE constraint.
Who:   Called by the /api/auth routes and by the credential verifier.

Design Decision:
    UserService is stateless: the session is passed to every call, so the
    same instance serves all concurrent requests.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timage.database import create_record
from timage.exceptions import ConflictError, DatabaseError, InvalidCredentialsError
from timage.models.user import User
from timage.schemas.user import UserSummary
from timage.security import burn_verification, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic layer for user accounts.

    Responsibilities:
        - signup(): create an account with a hashed password
        - login(): check a username/password pair
        - reset_password(): replace the hash after checking the old password
        - authenticate(): resolve credentials to a User (Basic auth)
    """

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
        except Exception as e:
            logger.error("Database error looking up user: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})
        return result.scalar_one_or_none()

    async def authenticate(
        self, db: AsyncSession, username: str, password: str
    ) -> Optional[User]:
        """
        Return the User whose stored hash matches `password`, else None.

        An unknown username still costs one bcrypt verification so timing
        does not reveal which usernames exist.
        """
        user = await self._find_by_username(db, username)
        if user is None:
            await burn_verification(password)
            return None
        if not await verify_password(password, user.password_hash):
            return None
        return user

    async def signup(self, db: AsyncSession, username: str, password: str) -> UserSummary:
        """
        Create a user.

        Raises:
            ConflictError: username already taken (→ 400)
        """
        user = User(username=username, password_hash=await hash_password(password))
        try:
            await create_record(db, user)
        except ConflictError:
            raise ConflictError(
                message=f"Username {username} already exists",
                context={"username": username},
            )

        logger.info("User created: %s (%s)", user.username, user.id)
        return UserSummary(username=user.username, id=user.id)

    async def login(self, db: AsyncSession, username: str, password: str) -> UserSummary:
        """
        Verify a username/password pair.

        Raises:
            InvalidCredentialsError: unknown user or wrong password (→ 400);
                the two cases are indistinguishable to the caller
        """
        user = await self.authenticate(db, username, password)
        if user is None:
            raise InvalidCredentialsError()
        return UserSummary(username=user.username, id=user.id)

    async def reset_password(
        self,
        db: AsyncSession,
        user: User,
        old_password: str,
        new_password: str,
    ) -> None:
        """
        Replace `user`'s password hash after checking `old_password`.

        Raises:
            InvalidCredentialsError: old password does not match (→ 400);
                the stored hash is left unchanged
        """
        if not await verify_password(old_password, user.password_hash):
            raise InvalidCredentialsError(
                message="Invalid old password",
                context={"user_id": user.id},
            )

        user.password_hash = await hash_password(new_password)
        await db.flush()
        logger.info("Password updated for user %s", user.id)


user_service = UserService()
