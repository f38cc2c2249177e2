"""
Todo item models and storage.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from shared.errors import NotFoundError
from shared.persistence import Table

TODO_TABLE = "todo_items"
TODO_COLUMNS = {
    "description": "TEXT NOT NULL",
    "is_complete": "BOOLEAN NOT NULL DEFAULT FALSE",
    "created_at": "TIMESTAMPTZ NOT NULL",
    "updated_at": "TIMESTAMPTZ NOT NULL",
}


class TodoRequest(BaseModel):
    """Body for creating or updating a todo item."""
    description: str = Field(..., max_length=2000, description="What needs doing")
    is_complete: bool = Field(default=False, description="Completion flag")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value


class TodoItem(BaseModel):
    """Stored todo item."""
    id: int
    description: str
    is_complete: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TodoRepository:
    """CRUD over the todo table."""

    def __init__(self, table: Table):
        self.table = table

    async def create(self, request: TodoRequest) -> TodoItem:
        now = datetime.now(timezone.utc)
        row = await self.table.insert({**request.model_dump(), "created_at": now, "updated_at": now})
        return TodoItem(**row)

    async def list(self) -> List[TodoItem]:
        return [TodoItem(**row) for row in await self.table.list()]

    async def get(self, item_id: int) -> TodoItem:
        row = await self.table.get(item_id)
        if row is None:
            raise NotFoundError("TodoItem", item_id)
        return TodoItem(**row)

    async def update(self, item_id: int, request: TodoRequest) -> TodoItem:
        """Copy description and completion onto the stored item."""
        row = await self.table.update(item_id, {
            "description": request.description,
            "is_complete": request.is_complete,
            "updated_at": datetime.now(timezone.utc),
        })
        if row is None:
            raise NotFoundError("TodoItem", item_id)
        return TodoItem(**row)

    async def delete(self, item_id: int) -> None:
        if not await self.table.delete(item_id):
            raise NotFoundError("TodoItem", item_id)
