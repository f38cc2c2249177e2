"""
Student models and storage.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from shared.errors import NotFoundError
from shared.persistence import Table

STUDENT_TABLE = "students"
STUDENT_COLUMNS = {
    "name": "VARCHAR(255) NOT NULL",
    "email": "VARCHAR(255) NOT NULL",
    "course": "VARCHAR(255)",
    "created_at": "TIMESTAMPTZ NOT NULL",
    "updated_at": "TIMESTAMPTZ NOT NULL",
}


class StudentRequest(BaseModel):
    """Body for creating or replacing a student."""
    name: str = Field(..., min_length=1, max_length=255, description="Full name")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$", description="Contact email")
    course: Optional[str] = Field(None, max_length=255, description="Enrolled course")


class Student(BaseModel):
    """Stored student profile."""
    id: int
    name: str
    email: str
    course: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StudentRepository:
    """CRUD over the students table."""

    def __init__(self, table: Table):
        self.table = table

    async def create(self, request: StudentRequest) -> Student:
        now = datetime.now(timezone.utc)
        row = await self.table.insert({**request.model_dump(), "created_at": now, "updated_at": now})
        return Student(**row)

    async def list(self) -> List[Student]:
        return [Student(**row) for row in await self.table.list()]

    async def get(self, student_id: int) -> Student:
        row = await self.table.get(student_id)
        if row is None:
            raise NotFoundError("Student", student_id)
        return Student(**row)

    async def update(self, student_id: int, request: StudentRequest) -> Student:
        row = await self.table.update(
            student_id,
            {**request.model_dump(), "updated_at": datetime.now(timezone.utc)}
        )
        if row is None:
            raise NotFoundError("Student", student_id)
        return Student(**row)

    async def delete(self, student_id: int) -> None:
        if not await self.table.delete(student_id):
            raise NotFoundError("Student", student_id)
