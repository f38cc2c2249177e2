"""
Single-table persistence for portal services.

Every entity lives in one table keyed by an auto-incrementing integer
``id``. Two backends share the ``Table`` interface:

- ``InMemoryTable``: dict-backed, used for local runs and tests.
- ``PostgresTable``: asyncpg pool owned by a ``Database``; tables are
  created with ``CREATE TABLE IF NOT EXISTS`` when the pool starts.

Each call is a single statement that commits on its own; there are no
cross-row transactions.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import asyncpg

from shared.config import BaseConfig
from shared.errors import ConflictError, PersistenceError
from shared.logging import get_logger

Row = Dict[str, Any]


class Table(ABC):
    """CRUD operations over one entity table."""

    def __init__(self, name: str, columns: Dict[str, str]):
        self.name = name
        self.columns = columns

    def _checked(self, values: Row) -> Row:
        unknown = set(values) - set(self.columns)
        if unknown:
            raise PersistenceError(
                f"Unknown columns for table {self.name}",
                details={"columns": sorted(unknown)}
            )
        return values

    @abstractmethod
    async def insert(self, values: Row) -> Row:
        """Insert a row and return it with its assigned id."""

    @abstractmethod
    async def get(self, row_id: int) -> Optional[Row]:
        """Fetch one row by id."""

    @abstractmethod
    async def list(self) -> List[Row]:
        """Return all rows ordered by id."""

    @abstractmethod
    async def update(self, row_id: int, values: Row) -> Optional[Row]:
        """Overwrite the given columns; None when the row does not exist."""

    @abstractmethod
    async def delete(self, row_id: int) -> bool:
        """Delete a row; False when it did not exist."""

    @abstractmethod
    async def find_by(self, column: str, value: Any) -> Optional[Row]:
        """Return the first row whose column equals value."""


class InMemoryTable(Table):
    """Dict-backed table with an auto-increment counter."""

    def __init__(self, name: str, columns: Dict[str, str]):
        super().__init__(name, columns)
        self._rows: Dict[int, Row] = {}
        self._next_id = 1

    async def insert(self, values: Row) -> Row:
        row = {**self._checked(values), "id": self._next_id}
        self._rows[self._next_id] = row
        self._next_id += 1
        return copy.deepcopy(row)

    async def get(self, row_id: int) -> Optional[Row]:
        row = self._rows.get(row_id)
        return copy.deepcopy(row) if row is not None else None

    async def list(self) -> List[Row]:
        return [copy.deepcopy(self._rows[key]) for key in sorted(self._rows)]

    async def update(self, row_id: int, values: Row) -> Optional[Row]:
        row = self._rows.get(row_id)
        if row is None:
            return None
        row.update(self._checked(values))
        return copy.deepcopy(row)

    async def delete(self, row_id: int) -> bool:
        return self._rows.pop(row_id, None) is not None

    async def find_by(self, column: str, value: Any) -> Optional[Row]:
        self._checked({column: value})
        for key in sorted(self._rows):
            if self._rows[key].get(column) == value:
                return copy.deepcopy(self._rows[key])
        return None


class Database:
    """asyncpg connection pool shared by the tables of one service."""

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None
        self.tables: List["PostgresTable"] = []
        self.logger = get_logger("persistence.postgres")

    def table(self, name: str, columns: Dict[str, str]) -> "PostgresTable":
        table = PostgresTable(self, name, columns)
        self.tables.append(table)
        return table

    async def start(self):
        """Open the pool and create missing tables."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=30
            )
            async with self.pool.acquire() as conn:
                for table in self.tables:
                    await conn.execute(table.ddl())

            self.logger.info("PostgreSQL persistence started", tables=[t.name for t in self.tables])

        except (OSError, asyncpg.PostgresError) as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise PersistenceError("Database unavailable", details={"error": str(e)})

    async def stop(self):
        """Close the pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def check(self) -> bool:
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, asyncpg.PostgresError):
            return False


class PostgresTable(Table):
    """Table backed by PostgreSQL through asyncpg."""

    def __init__(self, database: Database, name: str, columns: Dict[str, str]):
        super().__init__(name, columns)
        self.database = database

    def ddl(self) -> str:
        column_sql = ",\n    ".join(f"{column} {sql_type}" for column, sql_type in self.columns.items())
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n    id SERIAL PRIMARY KEY,\n    {column_sql}\n)"

    async def _run(self, method: str, sql: str, *args):
        if self.database.pool is None:
            raise PersistenceError("Database pool not started", details={"table": self.name})
        try:
            async with self.database.pool.acquire() as conn:
                return await getattr(conn, method)(sql, *args)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError(f"Duplicate value in {self.name}", details={"constraint": getattr(e, "constraint_name", None)})
        except asyncpg.PostgresError as e:
            self.database.logger.error("Query failed", table=self.name, error=str(e))
            raise PersistenceError(f"Query on {self.name} failed", details={"error": str(e)})

    async def insert(self, values: Row) -> Row:
        columns = list(self._checked(values))
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        sql = f"INSERT INTO {self.name} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"
        row = await self._run("fetchrow", sql, *[values[c] for c in columns])
        return dict(row)

    async def get(self, row_id: int) -> Optional[Row]:
        row = await self._run("fetchrow", f"SELECT * FROM {self.name} WHERE id = $1", row_id)
        return dict(row) if row else None

    async def list(self) -> List[Row]:
        rows = await self._run("fetch", f"SELECT * FROM {self.name} ORDER BY id")
        return [dict(row) for row in rows]

    async def update(self, row_id: int, values: Row) -> Optional[Row]:
        columns = list(self._checked(values))
        if not columns:
            return await self.get(row_id)
        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(columns, start=2))
        sql = f"UPDATE {self.name} SET {assignments} WHERE id = $1 RETURNING *"
        row = await self._run("fetchrow", sql, row_id, *[values[c] for c in columns])
        return dict(row) if row else None

    async def delete(self, row_id: int) -> bool:
        row = await self._run("fetchrow", f"DELETE FROM {self.name} WHERE id = $1 RETURNING id", row_id)
        return row is not None

    async def find_by(self, column: str, value: Any) -> Optional[Row]:
        self._checked({column: value})
        sql = f"SELECT * FROM {self.name} WHERE {column} = $1 ORDER BY id LIMIT 1"
        row = await self._run("fetchrow", sql, value)
        return dict(row) if row else None


class TableFactory:
    """Builds tables for the backend selected in configuration."""

    def __init__(self, config: BaseConfig):
        self.backend = config.database_backend.lower()
        if self.backend not in ("memory", "postgres"):
            raise ValueError(f"Unsupported database backend: {config.database_backend}")
        self.database = Database(config.postgres_dsn) if self.backend == "postgres" else None

    def table(self, name: str, columns: Dict[str, str]) -> Table:
        if self.database is not None:
            return self.database.table(name, columns)
        return InMemoryTable(name, columns)

    async def start(self):
        if self.database is not None:
            await self.database.start()

    async def stop(self):
        if self.database is not None:
            await self.database.stop()

    async def check(self) -> str:
        if self.database is None:
            return "ok"
        return "ok" if await self.database.check() else "error"
