"""Category service."""

from __future__ import annotations

from dega.core.domain_types import Category
from dega.core.exceptions import BadRequestAlertError
from dega.services.content import ContentService


class CategoryService(ContentService[Category]):
    """Categories are scoped by client; slugs derive from the name."""

    entity_name = "coreCategory"

    async def create(self, entity: Category, client_id: str | None = None) -> Category:
        """Create a category after checking its parent."""
        await self._check_parent(entity, client_id)
        return await super().create(entity, client_id)

    async def update(self, entity: Category, client_id: str | None = None) -> Category:
        """Replace a category after checking its parent."""
        await self._check_parent(entity, client_id)
        return await super().update(entity, client_id)

    async def _check_parent(self, entity: Category, client_id: str | None) -> None:
        """The parent must be a category of the same client and must not lead back here."""
        if not entity.parent_id:
            return
        seen: set[str] = set()
        parent_id: str | None = entity.parent_id
        while parent_id and parent_id not in seen:
            if entity.id and parent_id == entity.id:
                raise BadRequestAlertError(
                    "A category cannot be its own ancestor",
                    entity_name=self.entity_name,
                    error_key="parentcycle",
                )
            parent = await self.find(parent_id, client_id)
            if parent is None:
                if parent_id == entity.parent_id:
                    raise BadRequestAlertError(
                        f"Unknown parent category {parent_id}",
                        entity_name=self.entity_name,
                        error_key="parentnotfound",
                    )
                return
            seen.add(parent_id)
            parent_id = parent.parent_id
