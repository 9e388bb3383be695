from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from meal_registration.core.constants import CIVIL_TZ
from meal_registration.core.enums import OrderStatus
from meal_registration.core.exceptions import ConfigError
from meal_registration.penalty.calculator import deadline_for, evaluate_action
from meal_registration.settings.model import DeadlineConfig

CONFIG = DeadlineConfig(deadline_time=time(5, 0), offset_days=1)


def _at(*args) -> datetime:
    return datetime(*args, tzinfo=CIVIL_TZ)


def test_deadline_is_offset_days_after_action_date():
    assert deadline_for(date(2024, 1, 10), CONFIG) == _at(2024, 1, 11, 5, 0)


def test_zero_offset_uses_same_day():
    config = DeadlineConfig(deadline_time=time(9, 30), offset_days=0)
    assert deadline_for(date(2024, 1, 10), config) == _at(2024, 1, 10, 9, 30)


def test_late_cancellation_counts_minutes_after_deadline():
    decision = evaluate_action(
        action_instant=_at(2024, 1, 11, 6, 0),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.NOT_EATING,
        previous_status=OrderStatus.EATING,
        config=CONFIG,
    )
    assert decision.is_late
    assert decision.minutes_late == 60
    assert decision.deadline == _at(2024, 1, 11, 5, 0)


def test_switch_back_to_eating_is_never_late():
    decision = evaluate_action(
        action_instant=_at(2024, 1, 11, 6, 0),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.EATING,
        previous_status=OrderStatus.NOT_EATING,
        config=CONFIG,
    )
    assert not decision.is_late
    assert decision.minutes_late == 0


def test_action_exactly_at_deadline_is_on_time():
    decision = evaluate_action(
        action_instant=_at(2024, 1, 11, 5, 0),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.NOT_EATING,
        previous_status=None,
        config=CONFIG,
    )
    assert not decision.is_late


def test_partial_minutes_are_floored():
    decision = evaluate_action(
        action_instant=_at(2024, 1, 11, 6, 0, 59),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.NOT_EATING,
        previous_status=OrderStatus.EATING,
        config=CONFIG,
    )
    assert decision.minutes_late == 60


def test_instant_in_other_offset_is_compared_in_civil_time():
    # 23:30 UTC is 06:30 the next day at UTC+07:00.
    decision = evaluate_action(
        action_instant=datetime(2024, 1, 10, 23, 30, tzinfo=timezone.utc),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.NOT_EATING,
        previous_status=OrderStatus.EATING,
        config=CONFIG,
    )
    assert decision.minutes_late == 90


def test_naive_instant_is_read_as_civil_time():
    decision = evaluate_action(
        action_instant=datetime(2024, 1, 11, 5, 10),
        action_date=date(2024, 1, 10),
        new_status=OrderStatus.NOT_EATING,
        previous_status=OrderStatus.EATING,
        config=CONFIG,
    )
    assert decision.minutes_late == 10
    assert decision.deadline.utcoffset() == timedelta(hours=7)


def test_config_defaults_when_settings_missing():
    config = DeadlineConfig.from_raw({})
    assert config.deadline_time == time(5, 0)
    assert config.offset_days == 1


@pytest.mark.parametrize(
    "values",
    [
        {"registration_deadline": "5am"},
        {"registration_deadline": "25:00"},
        {"registration_deadline_offset": "one"},
        {"registration_deadline_offset": "-1"},
    ],
)
def test_unparseable_deadline_settings_raise_config_error(values):
    with pytest.raises(ConfigError):
        DeadlineConfig.from_raw(values)
