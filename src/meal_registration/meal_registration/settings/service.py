from __future__ import annotations

from datetime import datetime

from ..common.logger import get_logger
from ..common.validators import require_day_of_week, require_hhmm, require_non_negative_int
from ..core.constants import (
    SETTING_AUTO_RESET_ENABLED,
    SETTING_AUTO_RESET_LAST_RUN,
    SETTING_AUTO_RESET_TIME,
    SETTING_COOKING_DAYS,
    SETTING_REGISTRATION_DEADLINE,
    SETTING_REGISTRATION_DEADLINE_OFFSET,
)
from ..core.exceptions import ConfigError, ValidationError
from ..cooking.window import CookingWindow
from .model import (
    AutoResetConfig,
    CookingDaysConfig,
    DeadlineConfig,
    cooking_days_from_raw,
    cooking_days_to_raw,
)
from .repository import SettingsRepository

logger = get_logger(__name__)


class SettingsService:
    """Typed access to the administrator settings.

    Every getter reads the store and parses once; callers load what they need at the
    start of an operation and pass the dataclass down explicitly.
    """

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def deadline_config(self) -> DeadlineConfig:
        values = self._settings.get_values([SETTING_REGISTRATION_DEADLINE, SETTING_REGISTRATION_DEADLINE_OFFSET])
        try:
            return DeadlineConfig.from_raw(values)
        except ConfigError:
            logger.error("Invalid deadline settings: %r", values)
            raise

    def cooking_days(self) -> CookingDaysConfig:
        raw = self._settings.get_values([SETTING_COOKING_DAYS]).get(SETTING_COOKING_DAYS)
        try:
            return cooking_days_from_raw(raw)
        except ConfigError:
            logger.error("Invalid cooking_days setting: %r", raw)
            raise

    def auto_reset_config(self) -> AutoResetConfig:
        values = self._settings.get_values(
            [SETTING_AUTO_RESET_ENABLED, SETTING_AUTO_RESET_TIME, SETTING_AUTO_RESET_LAST_RUN]
        )
        return AutoResetConfig.from_raw(values)

    def update_deadline(self, *, deadline_time: str, offset_days: object) -> DeadlineConfig:
        require_hhmm(deadline_time, "Giờ hết hạn")
        offset = require_non_negative_int(offset_days, "Số ngày chênh lệch")
        self._settings.upsert_values(
            {
                SETTING_REGISTRATION_DEADLINE: deadline_time,
                SETTING_REGISTRATION_DEADLINE_OFFSET: str(offset),
            }
        )
        logger.info("Deadline updated: %s (+%d day(s))", deadline_time, offset)
        return self.deadline_config()

    def update_cooking_days(self, *, start_day: object, end_day: object) -> CookingDaysConfig:
        window = CookingWindow(
            start_day=require_day_of_week(start_day, "start_day"),
            end_day=require_day_of_week(end_day, "end_day"),
        )
        self._settings.upsert_values({SETTING_COOKING_DAYS: cooking_days_to_raw(window)})
        logger.info("Cooking days updated: %s", window.to_dict())
        return window

    def update_auto_reset(self, *, enabled: object, reset_time: str) -> AutoResetConfig:
        if not isinstance(enabled, bool):
            raise ValidationError("Giá trị enabled không hợp lệ")
        require_hhmm(reset_time, "Giờ tự động đặt lại")
        self._settings.upsert_values(
            {
                SETTING_AUTO_RESET_ENABLED: "true" if enabled else "false",
                SETTING_AUTO_RESET_TIME: reset_time,
            }
        )
        logger.info("Auto-reset updated: enabled=%s time=%s", enabled, reset_time)
        return self.auto_reset_config()

    def record_auto_reset_run(self, at: datetime) -> None:
        self._settings.upsert_values({SETTING_AUTO_RESET_LAST_RUN: at.isoformat()})
