"""Slug generation.

A slug is derived from a display name by dropping every character that is
not an ASCII letter or digit. Uniqueness is obtained by probing a lookup
source and appending an increasing numeric suffix until a free candidate is
found. The probe loop is bounded.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable

import structlog

from dega.core.exceptions import SlugExhaustedError

logger = structlog.get_logger()

_SPECIAL_CHARS = re.compile(r"[^a-zA-Z0-9]+")

DEFAULT_MAX_ATTEMPTS = 1000

# Returns True when the slug is already taken in the caller's scope.
SlugLookup = Callable[[str], Awaitable[bool]]


def remove_special_chars(value: str) -> str:
    """Strip everything but letters and digits."""
    return _SPECIAL_CHARS.sub("", value)


class SlugGenerator:
    """Produce unique slugs against a lookup source."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        entity_name: str | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            max_attempts: Maximum number of lookups before giving up.
            entity_name: Entity name reported in SlugExhaustedError.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.entity_name = entity_name

    async def generate(self, name: str | None, exists: SlugLookup) -> str | None:
        """Return the first collision-free slug for `name`.

        Args:
            name: Raw display name. None yields None.
            exists: Async predicate telling whether a slug is taken.

        Returns:
            The base slug if free, else base + "1", base + "2", ...

        Raises:
            SlugExhaustedError: If no free candidate is found within
                max_attempts lookups.
        """
        if name is None:
            return None

        base = remove_special_chars(name)
        candidate = base
        for suffix in range(self.max_attempts):
            if suffix:
                candidate = f"{base}{suffix}"
            if not await exists(candidate):
                if suffix:
                    logger.debug("slug_suffixed", base=base, slug=candidate)
                return candidate

        logger.warning("slug_exhausted", base=base, attempts=self.max_attempts)
        raise SlugExhaustedError(base, self.max_attempts, entity_name=self.entity_name)
