from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import time
from typing import Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import (
    DEFAULT_AUTO_RESET_TIME,
    DEFAULT_DEADLINE_OFFSET_DAYS,
    DEFAULT_DEADLINE_TIME,
    SETTING_AUTO_RESET_ENABLED,
    SETTING_AUTO_RESET_LAST_RUN,
    SETTING_AUTO_RESET_TIME,
    SETTING_COOKING_DAYS,
    SETTING_REGISTRATION_DEADLINE,
    SETTING_REGISTRATION_DEADLINE_OFFSET,
)
from ..core.exceptions import ConfigError
from ..cooking.window import CookingWindow

CookingDaysConfig = CookingWindow


@dataclass(frozen=True)
class DeadlineConfig:
    """Giờ hết hạn đăng ký + số ngày cộng thêm, đã được parse sẵn."""

    deadline_time: time
    offset_days: int

    @classmethod
    def from_raw(cls, values: Mapping[str, Optional[str]]) -> "DeadlineConfig":
        raw_time = values.get(SETTING_REGISTRATION_DEADLINE) or DEFAULT_DEADLINE_TIME
        raw_offset = values.get(SETTING_REGISTRATION_DEADLINE_OFFSET)
        if raw_offset is None or str(raw_offset).strip() == "":
            raw_offset = str(DEFAULT_DEADLINE_OFFSET_DAYS)

        deadline_time = parse_hhmm(raw_time, field_name=SETTING_REGISTRATION_DEADLINE)
        try:
            offset_days = int(str(raw_offset).strip())
        except ValueError as e:
            raise ConfigError(f"{SETTING_REGISTRATION_DEADLINE_OFFSET} không hợp lệ: {raw_offset!r}") from e
        if offset_days < 0:
            raise ConfigError(f"{SETTING_REGISTRATION_DEADLINE_OFFSET} không được âm: {offset_days}")
        return cls(deadline_time=deadline_time, offset_days=offset_days)

    def to_dict(self) -> dict:
        return {"deadline_time": self.deadline_time.strftime("%H:%M"), "offset_days": self.offset_days}


def cooking_days_from_raw(raw: Optional[str]) -> CookingDaysConfig:
    if raw is None or not str(raw).strip():
        return CookingWindow()
    try:
        data = json.loads(raw)
        return CookingWindow(start_day=data["start_day"], end_day=data["end_day"])
    except (ValueError, TypeError, KeyError) as e:
        raise ConfigError(f"{SETTING_COOKING_DAYS} không hợp lệ: {raw!r}") from e


def cooking_days_to_raw(window: CookingDaysConfig) -> str:
    return json.dumps(window.to_dict())


@dataclass(frozen=True)
class AutoResetConfig:
    enabled: bool
    reset_time: time
    last_run: str = ""

    @classmethod
    def from_raw(cls, values: Mapping[str, Optional[str]]) -> "AutoResetConfig":
        return cls(
            enabled=(values.get(SETTING_AUTO_RESET_ENABLED) or "").strip().lower() == "true",
            reset_time=parse_hhmm(
                values.get(SETTING_AUTO_RESET_TIME) or DEFAULT_AUTO_RESET_TIME,
                field_name=SETTING_AUTO_RESET_TIME,
            ),
            last_run=values.get(SETTING_AUTO_RESET_LAST_RUN) or "",
        )

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "reset_time": self.reset_time.strftime("%H:%M"),
            "last_run": self.last_run,
        }
