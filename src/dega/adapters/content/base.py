"""Shared SQL plumbing for the content repositories."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

import asyncpg
import structlog

from dega.adapters.db.app_db import AppDatabase
from dega.core.exceptions import BadRequestAlertError, SlugConflictError
from dega.core.pagination import Page, PageRequest, validate_sort
from dega.models.base import new_id

logger = structlog.get_logger()

T = TypeVar("T")


class PostgresContentRepository(Generic[T]):
    """Repository for one content table.

    Subclasses declare the table, the entity dataclass and the column
    lists; this class builds the SQL. ``scoped`` tables match ``client_id``
    on slug lookups, listings and searches.
    """

    table: ClassVar[str]
    entity_type: ClassVar[type]
    entity_name: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    search_columns: ClassVar[tuple[str, ...]] = ("name", "slug")
    scoped: ClassVar[bool] = True
    default_order: ClassVar[str] = "created_at DESC, id"

    def __init__(self, db: AppDatabase) -> None:
        """Initialize the repository."""
        self._db = db

    @property
    def _select(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table}"

    @property
    def _writable_columns(self) -> tuple[str, ...]:
        return tuple(c for c in self.columns if c not in ("id", "created_at"))

    async def get_by_id(self, entity_id: str) -> T | None:
        """Get entity by ID."""
        row = await self._db.fetch_one(f"{self._select} WHERE id = $1", entity_id)
        if not row:
            return None
        return await self._hydrate_one(self._row_to_entity(row))

    async def get_by_slug(self, slug: str, client_id: str | None = None) -> T | None:
        """Get entity by slug within the client scope."""
        where, params = self._slug_condition(slug, client_id)
        row = await self._db.fetch_one(f"{self._select} WHERE {where}", *params)
        if not row:
            return None
        return await self._hydrate_one(self._row_to_entity(row))

    async def slug_exists(self, slug: str, client_id: str | None = None) -> bool:
        """Check whether a slug is taken within the client scope."""
        where, params = self._slug_condition(slug, client_id)
        exists = await self._db.fetch_val(
            f"SELECT EXISTS(SELECT 1 FROM {self.table} WHERE {where})", *params
        )
        return bool(exists)

    async def list(self, request: PageRequest, client_id: str | None = None) -> Page[T]:
        """List one page of entities."""
        conditions: list[str] = []
        params: list[Any] = []
        if self.scoped:
            conditions.append("client_id IS NOT DISTINCT FROM $1")
            params.append(client_id)
        return await self._page(conditions, params, request)

    async def search(
        self, query: str, request: PageRequest, client_id: str | None = None
    ) -> Page[T]:
        """Case-insensitive substring search over the text columns."""
        conditions: list[str] = []
        params: list[Any] = []
        if self.scoped:
            conditions.append("client_id IS NOT DISTINCT FROM $1")
            params.append(client_id)
        idx = len(params) + 1
        matches = " OR ".join(f"{column} ILIKE ${idx}" for column in self.search_columns)
        conditions.append(f"({matches})")
        params.append(f"%{query}%")
        return await self._page(conditions, params, request)

    async def create(self, entity: T) -> T:
        """Insert a new entity with a fresh id."""
        entity_id = new_id()
        columns = ("id",) + tuple(c for c in self.columns if c != "id")
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        params = [entity_id] + [self._param(entity, c) for c in columns[1:]]
        query = f"""
            INSERT INTO {self.table} ({', '.join(columns)})
            VALUES ({placeholders})
            RETURNING {', '.join(self.columns)}
        """
        try:
            row = await self._db.execute_returning(query, *params)
        except asyncpg.UniqueViolationError as exc:
            raise self._slug_conflict(entity) from exc
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._missing_reference() from exc
        if row is None:
            raise RuntimeError(f"Failed to create {self.entity_name}")
        logger.info("content_row_created", table=self.table, id=entity_id)
        return await self._hydrate_one(self._row_to_entity(row))

    async def replace(self, entity: T) -> T | None:
        """Overwrite every writable column of an existing entity."""
        query, params = self._replace_statement(entity)
        try:
            row = await self._db.execute_returning(query, *params)
        except asyncpg.UniqueViolationError as exc:
            raise self._slug_conflict(entity) from exc
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._missing_reference() from exc
        if not row:
            return None
        return await self._hydrate_one(self._row_to_entity(row))

    async def delete(self, entity_id: str) -> bool:
        """Delete an entity."""
        result: str = await self._db.execute(f"DELETE FROM {self.table} WHERE id = $1", entity_id)
        return result == "DELETE 1"

    def _replace_statement(self, entity: T) -> tuple[str, list[Any]]:
        writable = self._writable_columns
        assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(writable, start=2))
        params = [getattr(entity, "id")] + [self._param(entity, c) for c in writable]
        query = f"""
            UPDATE {self.table} SET {assignments}
            WHERE id = $1
            RETURNING {', '.join(self.columns)}
        """
        return query, params

    def _slug_condition(self, slug: str, client_id: str | None) -> tuple[str, list[Any]]:
        if self.scoped:
            return "slug = $1 AND client_id IS NOT DISTINCT FROM $2", [slug, client_id]
        return "slug = $1", [slug]

    def _slug_conflict(self, entity: T) -> SlugConflictError:
        slug = getattr(entity, "slug", None)
        logger.warning("slug_conflict", table=self.table, slug=slug)
        return SlugConflictError(
            f"Slug '{slug}' is already in use", entity_name=self.entity_name
        )

    def _missing_reference(self) -> BadRequestAlertError:
        logger.warning("missing_reference", table=self.table)
        return BadRequestAlertError(
            f"A {self.entity_name} references a record that does not exist",
            entity_name=self.entity_name,
            error_key="referencenotfound",
        )

    async def _page(
        self, conditions: list[str], params: list[Any], request: PageRequest
    ) -> Page[T]:
        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        idx = len(params) + 1
        count_query = f"SELECT COUNT(*) FROM {self.table} {where_clause}"
        list_query = f"""
            {self._select}
            {where_clause}
            ORDER BY {self._order_by(request)}
            LIMIT ${idx} OFFSET ${idx + 1}
        """
        total = await self._db.fetch_val(count_query, *params)
        rows = await self._db.fetch_all(list_query, *params, request.size, request.offset)
        entities = await self._hydrate([self._row_to_entity(row) for row in rows])
        return Page(content=entities, request=request, total=total or 0)

    def _order_by(self, request: PageRequest) -> str:
        validate_sort(request, self.columns, self.entity_name)
        if not request.sort:
            return self.default_order
        # Field names are checked against the column list above
        orders = [f"{o.field} {o.direction.value.upper()}" for o in request.sort]
        return ", ".join(orders + ["id"])

    def _param(self, entity: T, column: str) -> Any:
        return getattr(entity, column)

    def _row_to_entity(self, row: dict[str, Any]) -> T:
        """Convert database row to the entity dataclass."""
        values = {}
        for column in self.columns:
            value = row[column]
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=UTC)
            values[column] = value
        entity: T = self.entity_type(**values)
        return entity

    async def _hydrate(self, entities: list[T]) -> list[T]:
        """Attach data stored outside the entity's own row."""
        return entities

    async def _hydrate_one(self, entity: T) -> T:
        hydrated = await self._hydrate([entity])
        return hydrated[0]
