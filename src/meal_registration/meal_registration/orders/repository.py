from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import OrderStatus
from .model import Order


class OrderRepository(Protocol):
    """Giao diện repository cho Order.

    Every method is scoped by tenant_id; rows of other tenants are never read or written.
    """

    def lookup(self, *, tenant_id: str, employee_id: str, order_date: date) -> Optional[Order]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        order_date: date,
        status: OrderStatus,
        at: datetime,
    ) -> Order:
        """Insert or update keyed by (tenant_id, employee_id, date).

        A concurrent duplicate insert collapses into an update (last write wins).
        """

        raise NotImplementedError

    def list_for_employee(self, *, tenant_id: str, employee_id: str, start: date, end: date) -> Sequence[Order]:
        """Stored rows in [start, end], ascending by date."""

        raise NotImplementedError

    def list_for_date(self, *, tenant_id: str, order_date: date) -> Sequence[Order]:
        raise NotImplementedError

    def list_for_range(self, *, tenant_id: str, start: date, end: date) -> Sequence[Order]:
        """All stored rows of the tenant dated in [start, end], ascending by date."""

        raise NotImplementedError

    def count_for_consumers(self, *, tenant_id: str, order_date: date, status: OrderStatus) -> int:
        """Rows with `status` on `order_date` whose employee is a meal consumer (non-kitchen roster member)."""

        raise NotImplementedError

    def history(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        since: date,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Order], int]:
        """Page of rows dated >= since, newest first, plus the total row count."""

        raise NotImplementedError

    def reset_not_eating_before(self, *, tenant_id: str, before: date, at: datetime) -> int:
        """Flip not_eating rows dated before `before` back to eating; returns affected rows."""

        raise NotImplementedError
