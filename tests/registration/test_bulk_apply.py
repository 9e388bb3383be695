from __future__ import annotations

from datetime import date

import pytest

from meal_registration.core.enums import ActivityAction, OrderStatus
from meal_registration.core.exceptions import ConfigError, PartialBatchFailure
from meal_registration.registration.model import Committed, Failed

D1, D2, D3 = date(2024, 6, 11), date(2024, 6, 12), date(2024, 6, 13)


def _bulk(container, dates, status=OrderStatus.NOT_EATING, employee_id="e1"):
    return container.registration_service.bulk_apply(
        tenant_id="t1", employee_id=employee_id, dates=dates, target_status=status
    )


def test_bulk_opt_out_writes_each_date(container, orders_repo, activity_repo):
    result = _bulk(container, [D1, D2, D3])

    assert result.succeeded == {D1, D2, D3}
    assert result.failed_dates == set()
    for d in (D1, D2, D3):
        assert orders_repo.rows[("t1", "e1", d)].status == OrderStatus.NOT_EATING
    assert [e.details.date for e in activity_repo.entries] == [D1, D2, D3]
    assert all(e.action == ActivityAction.MEAL_CANCELLATION for e in activity_repo.entries)


def test_repeating_bulk_is_idempotent(container, orders_repo, activity_repo):
    _bulk(container, [D1, D2, D3])
    again = _bulk(container, [D1, D2, D3])

    assert again.succeeded == {D1, D2, D3}
    assert again.changed == set()
    assert len([k for k in orders_repo.rows if k[:2] == ("t1", "e1")]) == 3
    assert len(activity_repo.entries) == 3


def test_bulk_rejects_past_and_non_cooking_dates(container, orders_repo):
    past_friday = date(2024, 6, 7)
    saturday = date(2024, 6, 15)
    today = date(2024, 6, 10)

    result = _bulk(container, [past_friday, saturday, today])

    assert result.rejected == {past_friday, saturday}
    assert result.succeeded == {today}
    assert ("t1", "e1", past_friday) not in orders_repo.rows
    assert ("t1", "e1", saturday) not in orders_repo.rows


def test_bulk_partial_failure_keeps_committed_dates(container, orders_repo, activity_repo):
    orders_repo.fail_on.add(D2)

    result = _bulk(container, [D1, D2, D3])

    assert result.succeeded == {D1, D3}
    assert result.failed_dates == {D2}
    assert isinstance(result.outcomes[D2], Failed)
    assert ("t1", "e1", D2) not in orders_repo.rows
    assert orders_repo.rows[("t1", "e1", D1)].status == OrderStatus.NOT_EATING
    assert orders_repo.rows[("t1", "e1", D3)].status == OrderStatus.NOT_EATING
    assert sorted(e.details.date for e in activity_repo.entries) == [D1, D3]

    with pytest.raises(PartialBatchFailure) as excinfo:
        result.raise_for_failures()
    assert excinfo.value.result is result
    assert "2024-06-12" in str(excinfo.value)


def test_bulk_register_after_opt_out_is_logged_as_registration(container, activity_repo):
    _bulk(container, [D1])
    result = _bulk(container, [D1], status=OrderStatus.EATING)

    outcome = result.outcomes[D1]
    assert isinstance(outcome, Committed)
    assert outcome.changed
    assert outcome.previous_status == OrderStatus.NOT_EATING
    assert activity_repo.entries[-1].action == ActivityAction.MEAL_REGISTRATION


def test_bulk_eating_on_absent_row_is_written(container, orders_repo, activity_repo):
    result = _bulk(container, [D1], status=OrderStatus.EATING)

    assert result.changed == {D1}
    assert orders_repo.rows[("t1", "e1", D1)].status == OrderStatus.EATING
    assert len(activity_repo.entries) == 1


def test_bulk_invalid_cooking_days_aborts_without_writes(container, settings_repo, orders_repo):
    settings_repo.values["cooking_days"] = "{not json"

    with pytest.raises(ConfigError):
        _bulk(container, [D1, D2])

    assert orders_repo.upsert_calls == 0


def test_bulk_result_to_dict(container, orders_repo):
    orders_repo.fail_on.add(D2)
    data = _bulk(container, [D1, D2, date(2024, 6, 15)]).to_dict()

    assert data["status"] == "not_eating"
    assert data["succeeded"] == ["2024-06-11"]
    assert data["failed"] == ["2024-06-12"]
    assert data["rejected"] == ["2024-06-15"]
    assert data["per_date"]["2024-06-11"]["ok"] is True
    assert data["per_date"]["2024-06-12"]["ok"] is False
