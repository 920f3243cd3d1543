"""
T-Image API: Password Hashing
================================

What:  bcrypt hashing and verification for user passwords.
How:   `bcrypt.hashpw` with a per-hash random salt and the configured cost
       factor; `bcrypt.checkpw` re-hashes the candidate and compares in
       constant time. Both are CPU-bound for hundreds of milliseconds, so
       the public helpers run them in a worker thread via
       `asyncio.to_thread` and the event loop keeps serving other requests.
Who:   UserService (signup, login, reset) and the credential verifier.

bcrypt only considers the first 72 bytes of its input. Passwords are capped
at 30 characters, but multi-byte UTF-8 can still exceed 72 bytes, so both
hashing and verification truncate identically.
"""

import asyncio
from functools import lru_cache

import bcrypt

from timage.config import settings

_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def _hash_blocking(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("ascii")


def _verify_blocking(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _hash_blocking("timage-dummy-password")


def _burn_blocking(password: str) -> None:
    _verify_blocking(password, _dummy_hash())


async def hash_password(password: str) -> str:
    """Return the bcrypt hash of `password` as an ASCII string."""
    return await asyncio.to_thread(_hash_blocking, password)


async def verify_password(password: str, password_hash: str) -> bool:
    """
    Check `password` against a stored bcrypt hash.

    Returns False (never raises) for a malformed stored hash.
    """
    return await asyncio.to_thread(_verify_blocking, password, password_hash)


async def burn_verification(password: str) -> None:
    """
    Spend one bcrypt verification on a throwaway hash.

    Called when the claimed username does not exist, so an unknown user and
    a wrong password take the same time to reject.
    """
    await asyncio.to_thread(_burn_blocking, password)
