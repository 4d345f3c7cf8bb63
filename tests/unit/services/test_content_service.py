"""Tests for the shared content service flow, exercised through categories."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from dega.adapters.content import InMemoryStore
from dega.core.domain_types import Category
from dega.core.exceptions import (
    BadRequestAlertError,
    EntityNotFoundError,
    SlugExhaustedError,
)
from dega.core.pagination import PageRequest
from dega.services import CategoryService


@pytest.fixture
def service(store: InMemoryStore) -> CategoryService:
    """Create category service over in-memory repositories."""
    return CategoryService(store.categories)


class TestCreate:
    """Tests for create."""

    async def test_generates_slug_and_scope(self, service: CategoryService) -> None:
        """The slug comes from the name and the record joins the client."""
        created = await service.create(Category(name="Tech & Science"), "factly")

        assert created.id is not None
        assert created.slug == "TechScience"
        assert created.client_id == "factly"
        assert created.created_at is not None
        assert created.created_at == created.updated_at

    async def test_second_create_gets_suffix(self, service: CategoryService) -> None:
        """A repeated name yields the next numbered slug."""
        await service.create(Category(name="Tech & Science"), "factly")
        second = await service.create(Category(name="Tech & Science"), "factly")
        third = await service.create(Category(name="Tech Science"), "factly")

        assert second.slug == "TechScience1"
        assert third.slug == "TechScience2"

    async def test_slugs_are_independent_per_client(self, service: CategoryService) -> None:
        """Another client starts from the base slug again."""
        await service.create(Category(name="News"), "factly")
        other = await service.create(Category(name="News"), "other")

        assert other.slug == "News"

    async def test_rejects_existing_id(self, service: CategoryService) -> None:
        """A new entity must not carry an id."""
        with pytest.raises(BadRequestAlertError) as exc_info:
            await service.create(Category(id="cat-1", name="News"), "factly")

        assert exc_info.value.error_key == "idexists"

    async def test_slug_exhaustion_stops_before_insert(self) -> None:
        """Nothing is written when no slug is free."""
        repository = AsyncMock()
        repository.slug_exists.return_value = True
        service = CategoryService(repository, max_slug_attempts=2)

        with pytest.raises(SlugExhaustedError):
            await service.create(Category(name="News"), "factly")

        assert repository.slug_exists.await_count == 2
        repository.create.assert_not_awaited()


class TestUpdate:
    """Tests for update."""

    async def test_requires_id(self, service: CategoryService) -> None:
        """An update without id is a bad request."""
        with pytest.raises(BadRequestAlertError) as exc_info:
            await service.update(Category(name="News"), "factly")

        assert exc_info.value.error_key == "idnull"

    async def test_unknown_id_is_not_found(self, service: CategoryService) -> None:
        """Updating a record that does not exist fails with not found."""
        with pytest.raises(EntityNotFoundError):
            await service.update(Category(id="missing", name="News"), "factly")

    async def test_keeps_stored_fields(self, service: CategoryService) -> None:
        """created_at, client and slug survive a replace that omits them."""
        created = await service.create(Category(name="News"), "factly")

        updated = await service.update(
            Category(id=created.id, name="Breaking News", description="Latest"), "factly"
        )

        assert updated.name == "Breaking News"
        assert updated.description == "Latest"
        assert updated.slug == "News"
        assert updated.client_id == "factly"
        assert updated.created_at == created.created_at

    async def test_other_client_cannot_update(self, service: CategoryService) -> None:
        """A record of another client behaves as missing."""
        created = await service.create(Category(name="News"), "factly")

        with pytest.raises(EntityNotFoundError):
            await service.update(Category(id=created.id, name="Hijack"), "other")


class TestRead:
    """Tests for get, get_by_slug, list and search."""

    async def test_get_other_client_is_not_found(self, service: CategoryService) -> None:
        """Fetching across clients fails."""
        created = await service.create(Category(name="News"), "factly")

        assert (await service.get(created.id or "", "factly")).name == "News"
        with pytest.raises(EntityNotFoundError):
            await service.get(created.id or "", "other")

    async def test_get_by_slug(self, service: CategoryService) -> None:
        """Slugs resolve within the client only."""
        await service.create(Category(name="News"), "factly")

        assert (await service.get_by_slug("News", "factly")).slug == "News"
        with pytest.raises(EntityNotFoundError):
            await service.get_by_slug("News", "other")

    async def test_list_without_client_is_empty(self) -> None:
        """Scoped listings need a client."""
        repository = AsyncMock()
        service = CategoryService(repository)

        page = await service.list(PageRequest(), None)
        results = await service.search("news", PageRequest(), None)

        assert page.total == 0
        assert results.content == []
        repository.list.assert_not_awaited()
        repository.search.assert_not_awaited()

    async def test_search(self, service: CategoryService) -> None:
        """Search stays inside the client."""
        await service.create(Category(name="Science"), "factly")
        await service.create(Category(name="Science"), "other")

        page = await service.search("sci", PageRequest(), "factly")

        assert page.total == 1


class TestDelete:
    """Tests for delete."""

    async def test_deletes(self, service: CategoryService) -> None:
        """Existing records are removed."""
        created = await service.create(Category(name="News"), "factly")

        assert await service.delete(created.id or "", "factly") is True
        with pytest.raises(EntityNotFoundError):
            await service.get(created.id or "", "factly")

    async def test_missing_is_noop(self, service: CategoryService) -> None:
        """Deleting nothing is not an error."""
        assert await service.delete("missing", "factly") is False

    async def test_other_client_is_noop(self, service: CategoryService) -> None:
        """Another client's record is left alone."""
        created = await service.create(Category(name="News"), "factly")

        assert await service.delete(created.id or "", "other") is False
        assert await service.get(created.id or "", "factly")


class TestCategoryParent:
    """Tests for parent checks on create and update."""

    async def test_missing_parent(self, service: CategoryService) -> None:
        """Unknown parents are refused before anything is written."""
        with pytest.raises(BadRequestAlertError) as exc_info:
            await service.create(Category(name="Local", parent_id="nope"), "factly")

        assert exc_info.value.error_key == "parentnotfound"
        assert (await service.list(PageRequest(), "factly")).total == 0

    async def test_indirect_cycle(self, service: CategoryService) -> None:
        """A category cannot move below one of its own children."""
        top = await service.create(Category(name="News"), "factly")
        child = await service.create(Category(name="Local", parent_id=top.id), "factly")

        top.parent_id = child.id
        with pytest.raises(BadRequestAlertError) as exc_info:
            await service.update(top, "factly")

        assert exc_info.value.error_key == "parentcycle"
