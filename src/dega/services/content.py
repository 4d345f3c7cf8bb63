"""Shared create/update/read/delete flow for content entities."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

import structlog

from dega.core.exceptions import BadRequestAlertError, EntityNotFoundError
from dega.core.interfaces import ContentRepository
from dega.core.pagination import Page, PageRequest
from dega.core.slug import DEFAULT_MAX_ATTEMPTS, SlugGenerator

logger = structlog.get_logger()

T = TypeVar("T")


def utc_now() -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(UTC)


class ContentService(Generic[T]):
    """Thin pass-through to a repository plus slug creation.

    ``scoped`` services keep every record inside the caller's client: slugs
    are unique per client, listings only show the client's records, and a
    record of another client behaves as if it did not exist.
    """

    entity_name: ClassVar[str]
    slug_source: ClassVar[str] = "name"
    scoped: ClassVar[bool] = True

    def __init__(
        self,
        repository: ContentRepository[T],
        max_slug_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Persistence gateway for the entity.
            max_slug_attempts: Bound on slug probes per creation.
        """
        self.repository = repository
        self.slugs = SlugGenerator(max_attempts=max_slug_attempts, entity_name=self.entity_name)

    async def create(self, entity: T, client_id: str | None = None) -> T:
        """Persist a new entity with a generated slug.

        Raises:
            BadRequestAlertError: If the entity already carries an id.
            SlugExhaustedError: If no free slug could be found.
            SlugConflictError: If a concurrent writer took the slug first.
        """
        if getattr(entity, "id", None):
            raise BadRequestAlertError(
                f"A new {self.entity_name} cannot already have an ID",
                entity_name=self.entity_name,
                error_key="idexists",
            )
        scope = self._scope(client_id)
        now = utc_now()
        self._assign(entity, client_id=scope, created_at=now, updated_at=now)
        entity_slug = await self.generate_slug(getattr(entity, self.slug_source), scope)
        self._assign(entity, slug=entity_slug)
        self._before_create(entity)

        created = await self.repository.create(entity)
        logger.info(
            "content_created",
            entity=self.entity_name,
            entity_id=getattr(created, "id"),
            slug=entity_slug,
            client_id=scope,
        )
        return created

    async def update(self, entity: T, client_id: str | None = None) -> T:
        """Replace an existing entity.

        ``created_at`` and ``client_id`` are kept from the stored record, and
        so is the slug when the update carries none.

        Raises:
            BadRequestAlertError: If the entity has no id.
            EntityNotFoundError: If no such entity exists for the client.
        """
        entity_id = getattr(entity, "id", None)
        if not entity_id:
            raise BadRequestAlertError(
                "Invalid id", entity_name=self.entity_name, error_key="idnull"
            )
        existing = await self.get(entity_id, client_id)
        self._assign(
            entity,
            created_at=getattr(existing, "created_at"),
            client_id=getattr(existing, "client_id"),
            updated_at=utc_now(),
        )
        if not getattr(entity, "slug", None):
            self._assign(entity, slug=getattr(existing, "slug"))

        updated = await self._replace(entity)
        if updated is None:
            raise self._not_found(entity_id)
        logger.info("content_updated", entity=self.entity_name, entity_id=entity_id)
        return updated

    async def find(self, entity_id: str, client_id: str | None = None) -> T | None:
        """Fetch by id within the client scope, or None."""
        entity = await self.repository.get_by_id(entity_id)
        if entity is None or not self._visible(entity, client_id):
            return None
        return entity

    async def get(self, entity_id: str, client_id: str | None = None) -> T:
        """Fetch by id within the client scope.

        Raises:
            EntityNotFoundError: If absent.
        """
        entity = await self.find(entity_id, client_id)
        if entity is None:
            raise self._not_found(entity_id)
        return entity

    async def get_by_slug(self, slug: str, client_id: str | None = None) -> T:
        """Fetch by slug within the client scope.

        Raises:
            EntityNotFoundError: If absent.
        """
        entity = await self.repository.get_by_slug(slug, self._scope(client_id))
        if entity is None:
            raise EntityNotFoundError(
                f"{self.entity_name} with slug '{slug}' not found",
                entity_name=self.entity_name,
            )
        return entity

    async def list(self, request: PageRequest, client_id: str | None = None) -> Page[T]:
        """One page of the client's entities."""
        if self.scoped and client_id is None:
            return Page(content=[], request=request, total=0)
        return await self.repository.list(request, self._scope(client_id))

    async def search(
        self, query: str, request: PageRequest, client_id: str | None = None
    ) -> Page[T]:
        """One page of the client's entities matching the query."""
        if self.scoped and client_id is None:
            return Page(content=[], request=request, total=0)
        return await self.repository.search(query, request, self._scope(client_id))

    async def delete(self, entity_id: str, client_id: str | None = None) -> bool:
        """Delete by id. Returns False when there was nothing to delete."""
        if await self.find(entity_id, client_id) is None:
            logger.debug("content_delete_skipped", entity=self.entity_name, entity_id=entity_id)
            return False
        deleted = await self.repository.delete(entity_id)
        logger.info("content_deleted", entity=self.entity_name, entity_id=entity_id)
        return deleted

    async def generate_slug(self, name: str | None, client_id: str | None = None) -> str | None:
        """First free slug for ``name`` in the client scope."""

        async def exists(candidate: str) -> bool:
            return await self.repository.slug_exists(candidate, client_id)

        return await self.slugs.generate(name, exists)

    def _before_create(self, entity: T) -> None:
        """Hook run after the slug is assigned and before the insert."""

    async def _replace(self, entity: T) -> T | None:
        return await self.repository.replace(entity)

    def _scope(self, client_id: str | None) -> str | None:
        return client_id if self.scoped else None

    def _visible(self, entity: T, client_id: str | None) -> bool:
        return not self.scoped or getattr(entity, "client_id", None) == client_id

    def _not_found(self, entity_id: str) -> EntityNotFoundError:
        return EntityNotFoundError(
            f"{self.entity_name} {entity_id} not found", entity_name=self.entity_name
        )

    @staticmethod
    def _assign(entity: T, **values: Any) -> None:
        for key, value in values.items():
            setattr(entity, key, value)
