from __future__ import annotations

import json
from datetime import time

import pytest

from meal_registration.core.exceptions import ConfigError, ValidationError
from meal_registration.cooking.window import CookingWindow
from meal_registration.settings.service import SettingsService

from conftest import InMemorySettings


def _svc(values=None) -> tuple[SettingsService, InMemorySettings]:
    repo = InMemorySettings(values)
    return SettingsService(repo), repo


def test_defaults_when_store_is_empty():
    svc, _ = _svc()
    assert svc.deadline_config().deadline_time == time(5, 0)
    assert svc.deadline_config().offset_days == 1
    assert svc.cooking_days() == CookingWindow(start_day=1, end_day=5)
    auto = svc.auto_reset_config()
    assert not auto.enabled
    assert auto.reset_time == time(0, 0)
    assert auto.last_run == ""


def test_update_deadline_persists_raw_values():
    svc, repo = _svc()
    config = svc.update_deadline(deadline_time="06:30", offset_days="0")

    assert config.deadline_time == time(6, 30)
    assert config.offset_days == 0
    assert repo.values == {"registration_deadline": "06:30", "registration_deadline_offset": "0"}


@pytest.mark.parametrize(
    "deadline_time,offset_days",
    [("6:30", 1), ("24:00", 1), (None, 1), ("06:30", -1), ("06:30", "x")],
)
def test_update_deadline_rejects_bad_input(deadline_time, offset_days):
    svc, repo = _svc()
    with pytest.raises(ValidationError):
        svc.update_deadline(deadline_time=deadline_time, offset_days=offset_days)
    assert repo.values == {}


def test_update_cooking_days_stores_json():
    svc, repo = _svc()
    window = svc.update_cooking_days(start_day=6, end_day=1)

    assert window.wraps
    assert json.loads(repo.values["cooking_days"]) == {"start_day": 6, "end_day": 1}
    assert svc.cooking_days() == window


@pytest.mark.parametrize("start,end", [(7, 1), ("1", 5), (None, 5)])
def test_update_cooking_days_validates_range(start, end):
    svc, _ = _svc()
    with pytest.raises(ValidationError):
        svc.update_cooking_days(start_day=start, end_day=end)


@pytest.mark.parametrize("raw", ["{bad", '{"start_day": 1}', '{"start_day": 1, "end_day": 9}'])
def test_malformed_cooking_days_is_config_error(raw):
    svc, _ = _svc({"cooking_days": raw})
    with pytest.raises(ConfigError):
        svc.cooking_days()


def test_update_auto_reset():
    svc, repo = _svc()
    config = svc.update_auto_reset(enabled=True, reset_time="01:15")

    assert config.enabled
    assert config.reset_time == time(1, 15)
    assert repo.values["auto_reset_enabled"] == "true"

    with pytest.raises(ValidationError):
        svc.update_auto_reset(enabled="yes", reset_time="01:15")
