from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "testing")

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from meal_registration.activity.model import ActivityLogEntry
from meal_registration.container import assemble
from meal_registration.core.constants import CIVIL_TZ
from meal_registration.core.enums import OrderStatus
from meal_registration.core.exceptions import StoreError
from meal_registration.orders.model import Order
from meal_registration.roster.model import RosterMember


class InMemoryOrders:
    def __init__(self, roster: Optional["InMemoryRoster"] = None):
        self.rows: dict[tuple[str, str, date], Order] = {}
        self.fail_on: set[date] = set()
        self.upsert_calls = 0
        self._roster = roster
        self._id = 0

    def lookup(self, *, tenant_id: str, employee_id: str, order_date: date) -> Optional[Order]:
        return self.rows.get((tenant_id, employee_id, order_date))

    def upsert(self, *, tenant_id: str, employee_id: str, order_date: date, status: OrderStatus, at: datetime) -> Order:
        self.upsert_calls += 1
        if order_date in self.fail_on:
            raise StoreError("simulated store error")
        key = (tenant_id, employee_id, order_date)
        existing = self.rows.get(key)
        if existing:
            order = replace(existing, status=status, updated_at=at)
        else:
            self._id += 1
            order = Order(
                order_id=self._id,
                tenant_id=tenant_id,
                employee_id=employee_id,
                date=order_date,
                status=status,
                created_at=at,
                updated_at=at,
            )
        self.rows[key] = order
        return order

    def put(self, tenant_id: str, employee_id: str, order_date: date, status: OrderStatus) -> Order:
        """Seed a row directly, bypassing the service."""
        self._id += 1
        order = Order(order_id=self._id, tenant_id=tenant_id, employee_id=employee_id, date=order_date, status=status)
        self.rows[(tenant_id, employee_id, order_date)] = order
        return order

    def list_for_employee(self, *, tenant_id: str, employee_id: str, start: date, end: date):
        items = [
            o
            for (t, e, d), o in self.rows.items()
            if t == tenant_id and e == employee_id and start <= d <= end
        ]
        return sorted(items, key=lambda o: o.date)

    def list_for_date(self, *, tenant_id: str, order_date: date):
        return [o for (t, _, d), o in self.rows.items() if t == tenant_id and d == order_date]

    def list_for_range(self, *, tenant_id: str, start: date, end: date):
        items = [o for (t, _, d), o in self.rows.items() if t == tenant_id and start <= d <= end]
        return sorted(items, key=lambda o: (o.date, o.employee_id))

    def count_for_consumers(self, *, tenant_id: str, order_date: date, status: OrderStatus) -> int:
        consumers = {m.employee_id for m in self._roster.list_members(tenant_id=tenant_id) if not m.is_kitchen}
        return sum(
            1
            for (t, e, d), o in self.rows.items()
            if t == tenant_id and d == order_date and o.status == status and e in consumers
        )

    def history(self, *, tenant_id: str, employee_id: str, since: date, offset: int, limit: int):
        items = [o for (t, e, d), o in self.rows.items() if t == tenant_id and e == employee_id and d >= since]
        items.sort(key=lambda o: o.date, reverse=True)
        return items[offset : offset + limit], len(items)

    def reset_not_eating_before(self, *, tenant_id: str, before: date, at: datetime) -> int:
        n = 0
        for key, o in list(self.rows.items()):
            if key[0] == tenant_id and o.status == OrderStatus.NOT_EATING and o.date < before:
                self.rows[key] = replace(o, status=OrderStatus.EATING, updated_at=at)
                n += 1
        return n


class InMemoryActivity:
    def __init__(self):
        self.entries: list[ActivityLogEntry] = []
        self.fail = False

    def append(self, entry: ActivityLogEntry) -> int:
        if self.fail:
            raise StoreError("audit sink unavailable")
        entry = replace(entry, entry_id=len(self.entries) + 1)
        self.entries.append(entry)
        return entry.entry_id

    def list_for_date(self, *, tenant_id: str, target_date: date):
        items = [e for e in self.entries if e.tenant_id == tenant_id and e.details.date == target_date]
        items.sort(key=lambda e: (e.created_at, e.entry_id), reverse=True)
        return items

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
    ):
        items = [e for e in self.entries if e.tenant_id == tenant_id]
        if action:
            items = [e for e in items if action.lower() in e.action.value]
        if employee_id:
            items = [e for e in items if e.performed_by == employee_id]
        if since is not None:
            items = [e for e in items if e.created_at >= since]
        if until is not None:
            items = [e for e in items if e.created_at < until]
        items.sort(key=lambda e: (e.created_at, e.entry_id), reverse=True)
        return items[offset : offset + limit], len(items)


class InMemoryRoster:
    def __init__(self, members: list[RosterMember]):
        self.members = members
        self.fail = False

    def get_member(self, *, tenant_id: str, employee_id: str) -> Optional[RosterMember]:
        for m in self.members:
            if m.tenant_id == tenant_id and m.employee_id == employee_id:
                return m
        return None

    def list_members(self, *, tenant_id: str):
        if self.fail:
            raise StoreError("roster unavailable")
        return sorted((m for m in self.members if m.tenant_id == tenant_id), key=lambda m: m.full_name)

    def count_consumers(self, *, tenant_id: str) -> int:
        return sum(1 for m in self.list_members(tenant_id=tenant_id) if not m.is_kitchen)

    def list_tenant_ids(self):
        return sorted({m.tenant_id for m in self.members})


class InMemorySettings:
    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(values or {})

    def get_values(self, keys):
        return {k: self.values[k] for k in keys if k in self.values}

    def upsert_values(self, values) -> None:
        self.values.update(values)


def _roster() -> InMemoryRoster:
    return InMemoryRoster(
        [
            RosterMember("e1", "t1", "An Nguyen", "an@example.com", "Employee", department="IT", shift="Ca sáng"),
            RosterMember("e2", "t1", "Binh Tran", "binh@example.com", "Employee", department="HR"),
            RosterMember("e3", "t1", "Chi Le", "chi@example.com", "Manager", department="IT"),
            RosterMember("e4", "t1", "Dung Pham", "dung@example.com", "Employee"),
            RosterMember("k1", "t1", "Kitchen Staff", "bep@example.com", "Kitchen", department="Bếp"),
            RosterMember("x1", "t2", "Xuan Vo", "xuan@example.com", "Employee", department="Sales"),
        ]
    )


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, 08:00 in UTC+07:00.
    return datetime(2024, 6, 10, 8, 0, tzinfo=CIVIL_TZ)


@pytest.fixture
def roster_repo() -> InMemoryRoster:
    return _roster()


@pytest.fixture
def orders_repo(roster_repo) -> InMemoryOrders:
    return InMemoryOrders(roster_repo)


@pytest.fixture
def activity_repo() -> InMemoryActivity:
    return InMemoryActivity()


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def container(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now):
    return assemble(
        orders=orders_repo,
        activity=activity_repo,
        roster=roster_repo,
        settings=settings_repo,
        clock=lambda: fixed_now,
    )
