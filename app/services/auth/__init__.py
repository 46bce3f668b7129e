import asyncio
import logging
import re
from typing import Any

from passlib.context import CryptContext

from app.utils.config import settings


logger = logging.getLogger(__name__)

# $2b$<cost>$ followed by a 22 char salt and a 31 char checksum.
_BCRYPT_HASH_RE = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}\Z")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class PasswordHashingError(RuntimeError):
    """Salt generation or hashing failed; the write must not go ahead."""


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt with a freshly generated salt."""
    try:
        return pwd_context.hash(plain)
    except Exception as exc:
        raise PasswordHashingError("Could not hash password") from exc


def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify plaintext password against a bcrypt hash.

    A missing or malformed hash never matches.
    """
    if not hashed or not isinstance(plain, str):
        logger.warning("Password comparison against a missing hash or candidate")
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        logger.warning("Password comparison against a malformed hash")
        return False


def is_password_hash(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    if not _BCRYPT_HASH_RE.match(value):
        return False
    return pwd_context.identify(value, required=False) is not None


async def hash_password_async(plain: str) -> str:
    return await asyncio.to_thread(hash_password, plain)


async def verify_password_async(plain: str, hashed: str | None) -> bool:
    return await asyncio.to_thread(verify_password, plain, hashed)
