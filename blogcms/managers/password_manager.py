"""
Password hashing with Argon2id through passlib's CryptContext.

Hashing is CPU-bound, so the async helpers run it in a worker thread.
"""

from asyncio import to_thread

from passlib.context import CryptContext

from blogcms.monitoring import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["argon2"],
    argon2__memory_cost=19_456,  # KiB
    argon2__time_cost=2,
    argon2__parallelism=1,
)


def hash_password_sync(password: str) -> str:
    if not password:
        mssg = "Password cannot be empty"
        raise ValueError(mssg)
    return pwd_context.hash(password)


def verify_password_sync(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Unknown or malformed hash format
        logger.warning("password hash could not be identified")
        return False


async def hash_password(password: str) -> str:
    return await to_thread(hash_password_sync, password)


async def verify_password(password: str, hashed: str) -> bool:
    return await to_thread(verify_password_sync, password, hashed)
