"""Page descriptors, result pages and pagination response headers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar
from urllib.parse import urlencode

from dega.core.exceptions import BadRequestAlertError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 2000


class Direction(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    """A single sort criterion."""

    field: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class PageRequest:
    """Page descriptor: 0-based page number, page size and sort order."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: tuple[SortOrder, ...] = ()

    def __post_init__(self) -> None:
        """Validate bounds."""
        if self.page < 0:
            raise BadRequestAlertError("Page index must not be negative", error_key="pageindex")
        if not 1 <= self.size <= MAX_PAGE_SIZE:
            raise BadRequestAlertError(
                f"Page size must be between 1 and {MAX_PAGE_SIZE}", error_key="pagesize"
            )

    @property
    def offset(self) -> int:
        """Number of rows to skip."""
        return self.page * self.size

    @classmethod
    def parse(
        cls,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        sort: Iterable[str] | None = None,
    ) -> PageRequest:
        """Build a request from query parameters.

        Sort parameters use the ``field,direction`` form, e.g. ``name,desc``.
        A bare ``field`` sorts ascending.
        """
        orders: list[SortOrder] = []
        for raw in sort or ():
            parts = [p.strip() for p in raw.split(",") if p.strip()]
            if not parts:
                continue
            direction = Direction.ASC
            if len(parts) > 1:
                try:
                    direction = Direction(parts[1].lower())
                except ValueError as exc:
                    raise BadRequestAlertError(
                        f"Invalid sort direction '{parts[1]}'", error_key="sortdirection"
                    ) from exc
            orders.append(SortOrder(field=parts[0], direction=direction))
        return cls(page=page, size=size, sort=tuple(orders))


@dataclass
class Page(Generic[T]):
    """One page of results plus the total number of matching rows."""

    content: list[T]
    request: PageRequest
    total: int

    @property
    def total_pages(self) -> int:
        """Number of pages for the total at the requested size."""
        if self.total <= 0:
            return 0
        return (self.total + self.request.size - 1) // self.request.size

    @property
    def number(self) -> int:
        """Current page index."""
        return self.request.page

    @property
    def size(self) -> int:
        """Requested page size."""
        return self.request.size

    def has_next(self) -> bool:
        """Whether a following page exists."""
        return self.number + 1 < self.total_pages

    def has_previous(self) -> bool:
        """Whether a preceding page exists."""
        return self.number > 0


def _page_uri(base_url: str, page: int, size: int, query: str | None = None) -> str:
    params: list[tuple[str, str | int]] = []
    if query is not None:
        params.append(("query", query))
    params.extend([("page", page), ("size", size)])
    return f"{base_url}?{urlencode(params)}"


def _link_header(page: Page[T], base_url: str, query: str | None = None) -> str:
    links: list[str] = []
    if page.has_next():
        links.append(f'<{_page_uri(base_url, page.number + 1, page.size, query)}>; rel="next"')
    if page.has_previous():
        links.append(f'<{_page_uri(base_url, page.number - 1, page.size, query)}>; rel="prev"')
    last_page = page.total_pages - 1 if page.total_pages > 0 else 0
    links.append(f'<{_page_uri(base_url, last_page, page.size, query)}>; rel="last"')
    links.append(f'<{_page_uri(base_url, 0, page.size, query)}>; rel="first"')
    return ",".join(links)


def pagination_headers(page: Page[T], base_url: str) -> dict[str, str]:
    """Headers describing a listing page: totals and navigation links."""
    return {
        "X-Total-Count": str(page.total),
        "X-Total-Pages": str(page.total_pages),
        "Link": _link_header(page, base_url),
    }


def search_pagination_headers(query: str, page: Page[T], base_url: str) -> dict[str, str]:
    """Same as pagination_headers, echoing the search query in every link."""
    return {
        "X-Total-Count": str(page.total),
        "X-Total-Pages": str(page.total_pages),
        "Link": _link_header(page, base_url, query=query),
    }


def validate_sort(request: PageRequest, allowed: Sequence[str], entity_name: str) -> None:
    """Reject sort fields outside the allowed set."""
    for order in request.sort:
        if order.field not in allowed:
            raise BadRequestAlertError(
                f"Cannot sort by '{order.field}'",
                entity_name=entity_name,
                error_key="sortfield",
            )
