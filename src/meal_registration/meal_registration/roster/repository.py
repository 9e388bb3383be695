from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RosterMember


class RosterRepository(Protocol):
    """Read-only roster/group provider. The core never writes roster data."""

    def get_member(self, *, tenant_id: str, employee_id: str) -> Optional[RosterMember]:
        raise NotImplementedError

    def list_members(self, *, tenant_id: str) -> Sequence[RosterMember]:
        """All members of the tenant, ordered by full name."""

        raise NotImplementedError

    def count_consumers(self, *, tenant_id: str) -> int:
        """Members outside the kitchen role category."""

        raise NotImplementedError

    def list_tenant_ids(self) -> Sequence[str]:
        raise NotImplementedError
