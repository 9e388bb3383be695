from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ActivityLogEntry


class ActivityLogRepository(Protocol):
    def append(self, entry: ActivityLogEntry) -> int:
        """Single write attempt; returns the new entry id."""

        raise NotImplementedError

    def list_for_date(self, *, tenant_id: str, target_date: date) -> Sequence[ActivityLogEntry]:
        """Meal registration/cancellation entries whose details.date is `target_date`, newest first."""

        raise NotImplementedError

    def list_page(
        self,
        *,
        tenant_id: str,
        action: Optional[str] = None,
        employee_id: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[ActivityLogEntry], int]:
        """One page of entries by created_at, newest first, plus the filtered total.

        `action` matches as a case-insensitive substring; `since` is inclusive and
        `until` exclusive.
        """

        raise NotImplementedError
