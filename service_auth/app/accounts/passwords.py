"""
Password hashing with bcrypt.

Hashing is CPU-bound; the async helpers run it in a worker thread.
"""

import asyncio

import bcrypt

from shared.errors import ValidationError

# bcrypt only looks at the first 72 bytes of the secret
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    encoded = password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "Password too long",
            details={"max_bytes": MAX_PASSWORD_BYTES}
        )
    return encoded


def _hash_password_sync(password: str, rounds: int) -> str:
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def _verify_password_sync(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), hashed_password.encode('utf-8'))
    except ValidationError:
        return False


async def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a plain text password in the thread pool."""
    return await asyncio.to_thread(_hash_password_sync, password, rounds)


async def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plain text password against a stored hash in the thread pool."""
    return await asyncio.to_thread(_verify_password_sync, password, hashed_password)
