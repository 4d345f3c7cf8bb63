"""Content domain types.

Plain dataclasses for the persisted entities. Identity is an opaque string
assigned by the persistence layer; relationships are held as ids, never as
live object references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Category:
    """A content category, scoped to a tenant."""

    name: str
    id: str | None = None
    description: str | None = None
    slug: str | None = None
    parent_id: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Organization:
    """An organization. Each organization is also a tenant (client)."""

    name: str
    id: str | None = None
    description: str | None = None
    email: str | None = None
    phone: str | None = None
    site_title: str | None = None
    tag_line: str | None = None
    site_address: str | None = None
    logo_url: str | None = None
    fav_icon_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    slug: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Media:
    """Metadata of a stored binary object. The bytes live in the file store."""

    name: str
    id: str | None = None
    type: str | None = None
    description: str | None = None
    uploaded_by: str | None = None
    published_date: datetime | None = None
    title: str | None = None
    caption: str | None = None
    alt_text: str | None = None
    file_size: str | None = None
    url: str | None = None
    dimensions: str | None = None
    slug: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DegaUser:
    """A user profile with its organization memberships."""

    display_name: str
    email: str
    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    website: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    instagram_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    profile_picture: str | None = None
    description: str | None = None
    is_active: bool = True
    slug: str | None = None
    organization_ids: set[str] = field(default_factory=set)
    organization_default_id: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
