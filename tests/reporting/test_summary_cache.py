from __future__ import annotations

from datetime import date

import pytest

from meal_registration.container import assemble
from meal_registration.reporting.cache import SummaryCache
from meal_registration.reporting.model import DailySummary

TODAY = date(2024, 6, 10)


class Ticks:
    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def ticks() -> Ticks:
    return Ticks()


def _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, cache):
    return assemble(
        orders=orders_repo,
        activity=activity_repo,
        roster=roster_repo,
        settings=settings_repo,
        cache=cache,
        clock=lambda: fixed_now,
    )


def test_other_instance_sees_change_once_entry_expires(
    orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, ticks
):
    a = _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, SummaryCache(30, clock=ticks))
    b = _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, SummaryCache(30, clock=ticks))

    assert b.reporting_service.daily_summary("t1", TODAY).not_eating_count == 0

    a.registration_service.toggle_today(tenant_id="t1", employee_id="e1")
    assert a.reporting_service.daily_summary("t1", TODAY).not_eating_count == 1

    ticks.value += 30
    assert b.reporting_service.daily_summary("t1", TODAY).not_eating_count == 1


def test_zero_ttl_never_serves_cached_summary(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now):
    a = _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, SummaryCache(0))
    b = _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, SummaryCache(0))

    assert b.reporting_service.daily_summary("t1", TODAY).not_eating_count == 0
    a.registration_service.toggle_today(tenant_id="t1", employee_id="e1")

    assert b.reporting_service.daily_summary("t1", TODAY).not_eating_count == 1


def test_roster_change_is_picked_up_after_expiry(
    orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, ticks
):
    c = _instance(orders_repo, activity_repo, roster_repo, settings_repo, fixed_now, SummaryCache(30, clock=ticks))
    assert c.reporting_service.daily_summary("t1", TODAY).total_employees == 4

    roster_repo.members = [m for m in roster_repo.members if m.employee_id != "e4"]
    ticks.value += 29
    assert c.reporting_service.daily_summary("t1", TODAY).total_employees == 4
    ticks.value += 1
    assert c.reporting_service.daily_summary("t1", TODAY).total_employees == 3


def test_cache_entries_expire_and_invalidate_per_tenant(ticks):
    cache = SummaryCache(10, clock=ticks)
    cache.put("t1", DailySummary(date=TODAY, total_employees=4, not_eating_count=1))
    cache.put("t2", DailySummary(date=TODAY, total_employees=1, not_eating_count=0))
    assert len(cache) == 2

    cache.invalidate("t1")
    assert cache.get("t1", TODAY) is None
    assert cache.get("t2", TODAY) is not None

    ticks.value += 10
    assert cache.get("t2", TODAY) is None
    assert len(cache) == 0
