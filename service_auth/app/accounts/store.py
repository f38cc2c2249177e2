"""
Principal registration and credential checks.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from shared.errors import AuthenticationError, ConflictError
from shared.logging import get_logger
from shared.persistence import Table
from .passwords import hash_password, verify_password

PRINCIPAL_TABLE = "principals"
PRINCIPAL_COLUMNS = {
    "username": "VARCHAR(255) NOT NULL UNIQUE",
    "password_hash": "VARCHAR(255) NOT NULL",
    "role": "VARCHAR(64) NOT NULL",
    "created_at": "TIMESTAMPTZ NOT NULL",
}

DEFAULT_ROLE = "student"


class RegistrationRequest(BaseModel):
    """Body of POST /auth/register."""
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class Principal(BaseModel):
    """Stored principal record."""
    id: int
    username: str
    password_hash: str
    role: str = DEFAULT_ROLE
    created_at: datetime


class PrincipalStore:
    """Registers principals and authenticates their credentials."""

    def __init__(self, table: Table, hash_rounds: int = 12):
        self.table = table
        self.hash_rounds = hash_rounds
        self.logger = get_logger("auth.accounts")

    async def register(self, username: str, password: str, role: str = DEFAULT_ROLE) -> Principal:
        if await self.table.find_by("username", username) is not None:
            raise ConflictError("Username already taken", details={"username": username})

        row = await self.table.insert({
            "username": username,
            "password_hash": await hash_password(password, rounds=self.hash_rounds),
            "role": role,
            "created_at": datetime.now(timezone.utc),
        })
        principal = Principal(**row)

        self.logger.info("Principal registered", principal_id=principal.id, username=username)
        return principal

    async def authenticate(self, username: str, password: str) -> Principal:
        """Return the principal whose stored hash matches, else raise."""
        row = await self.table.find_by("username", username)
        if row is None or not await verify_password(password, row["password_hash"]):
            self.logger.warning("Login rejected", username=username)
            raise AuthenticationError("Invalid username or password")

        return Principal(**row)
