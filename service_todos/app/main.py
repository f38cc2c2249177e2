"""
Todo service for the Student Portal.
"""

from typing import List, Optional

from fastapi import Response, status

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.persistence import TableFactory
from .models import TODO_COLUMNS, TODO_TABLE, TodoItem, TodoRepository, TodoRequest


class TodoService(BaseService):
    """Todo service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("todos", 8030, config=config)
        self.tables = TableFactory(self.config)
        self.todos = TodoRepository(self.tables.table(TODO_TABLE, TODO_COLUMNS))

        self._setup_todo_routes()

    async def on_startup(self):
        await self.tables.start()

    async def on_shutdown(self):
        await self.tables.stop()

    def _setup_todo_routes(self):
        """Set up todo routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "todos",
                "message": "Student Portal - Todo Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/todo", response_model=TodoItem, status_code=status.HTTP_201_CREATED)
        async def create_todo(request: TodoRequest):
            item = await self.todos.create(request)
            self.logger.info("Todo created", todo_id=item.id)
            return item

        @self.app.get("/api/todo/{item_id}", response_model=TodoItem)
        async def get_todo(item_id: int):
            return await self.todos.get(item_id)

        @self.app.put("/api/todo/{item_id}", response_model=TodoItem)
        async def update_todo(item_id: int, request: TodoRequest):
            return await self.todos.update(item_id, request)

        @self.app.delete("/api/todo/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_todo(item_id: int):
            await self.todos.delete(item_id)
            self.logger.info("Todo deleted", todo_id=item_id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        @self.app.get("/api/todos", response_model=List[TodoItem])
        async def list_todos():
            return await self.todos.list()

    async def _check_dependencies(self):
        """Check todo service dependencies."""
        return {"database": await self.tables.check()}


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = TodoService(config)
    return service.app


if __name__ == "__main__":
    service = TodoService()
    service.run()
