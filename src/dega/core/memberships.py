"""User <-> organization membership graph.

Memberships are kept as an adjacency map of ids in both directions. The
mutators update both sides together, so at any point
``org in organizations_of(user)`` holds exactly when
``user in users_of(org)``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class MembershipChange:
    """Organizations added to and removed from a user by a replace."""

    added: frozenset[str]
    removed: frozenset[str]

    @property
    def is_empty(self) -> bool:
        """True when nothing changed."""
        return not self.added and not self.removed


class OrganizationMemberships:
    """Bidirectional many-to-many relation between users and organizations."""

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._orgs_by_user: dict[str, set[str]] = defaultdict(set)
        self._users_by_org: dict[str, set[str]] = defaultdict(set)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> OrganizationMemberships:
        """Build a graph from (user_id, organization_id) pairs."""
        graph = cls()
        for user_id, organization_id in pairs:
            graph.add_organization(user_id, organization_id)
        return graph

    def add_organization(self, user_id: str, organization_id: str) -> None:
        """Make the user a member of the organization. Idempotent."""
        self._orgs_by_user[user_id].add(organization_id)
        self._users_by_org[organization_id].add(user_id)

    def remove_organization(self, user_id: str, organization_id: str) -> None:
        """Drop the membership. No-op when the user is not a member."""
        self._discard(self._orgs_by_user, user_id, organization_id)
        self._discard(self._users_by_org, organization_id, user_id)

    def set_organizations(
        self, user_id: str, organization_ids: Iterable[str]
    ) -> MembershipChange:
        """Replace the user's memberships and report what changed."""
        desired = set(organization_ids)
        current = set(self._orgs_by_user.get(user_id, ()))

        added = desired - current
        removed = current - desired
        for organization_id in added:
            self.add_organization(user_id, organization_id)
        for organization_id in removed:
            self.remove_organization(user_id, organization_id)

        return MembershipChange(added=frozenset(added), removed=frozenset(removed))

    def remove_user(self, user_id: str) -> None:
        """Drop every membership of a user."""
        for organization_id in list(self._orgs_by_user.get(user_id, ())):
            self.remove_organization(user_id, organization_id)

    def remove_organization_everywhere(self, organization_id: str) -> None:
        """Drop every membership of an organization."""
        for user_id in list(self._users_by_org.get(organization_id, ())):
            self.remove_organization(user_id, organization_id)

    def organizations_of(self, user_id: str) -> frozenset[str]:
        """Organization ids the user belongs to."""
        return frozenset(self._orgs_by_user.get(user_id, ()))

    def users_of(self, organization_id: str) -> frozenset[str]:
        """User ids belonging to the organization."""
        return frozenset(self._users_by_org.get(organization_id, ()))

    def is_member(self, user_id: str, organization_id: str) -> bool:
        """Whether the pair is linked."""
        return organization_id in self._orgs_by_user.get(user_id, ())

    def pairs(self) -> set[tuple[str, str]]:
        """All (user_id, organization_id) pairs."""
        return {
            (user_id, organization_id)
            for user_id, organizations in self._orgs_by_user.items()
            for organization_id in organizations
        }

    @staticmethod
    def _discard(index: dict[str, set[str]], key: str, value: str) -> None:
        members = index.get(key)
        if members is None:
            return
        members.discard(value)
        if not members:
            del index[key]
