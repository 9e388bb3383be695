"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta, timezone

# All deadline arithmetic is pinned to Vietnam civil time, whatever the server zone.
CIVIL_TZ = timezone(timedelta(hours=7), name="UTC+07:00")

SETTING_REGISTRATION_DEADLINE = "registration_deadline"
SETTING_REGISTRATION_DEADLINE_OFFSET = "registration_deadline_offset"
SETTING_COOKING_DAYS = "cooking_days"
SETTING_AUTO_RESET_ENABLED = "auto_reset_enabled"
SETTING_AUTO_RESET_TIME = "auto_reset_time"
SETTING_AUTO_RESET_LAST_RUN = "auto_reset_last_run"

DEFAULT_DEADLINE_TIME = "05:00"
DEFAULT_DEADLINE_OFFSET_DAYS = 1
DEFAULT_COOKING_START_DAY = 1
DEFAULT_COOKING_END_DAY = 5
DEFAULT_AUTO_RESET_TIME = "00:00"

AUTO_RESET_TOLERANCE_MINUTES = 30
WEEKLY_SERIES_DAYS = 7
DEFAULT_PAGE_SIZE = 10
DEFAULT_HISTORY_DAYS = 30
MAX_HISTORY_DAYS = 90
# Upper bound on how stale a cached daily summary may be across processes.
DEFAULT_SUMMARY_CACHE_TTL_SECONDS = 30
DEFAULT_TREND_DAYS = 30
MAX_TREND_DAYS = 90
# Cost of one prepared meal (VND), used for the savings KPI.
COST_PER_MEAL_VND = 25000
DEFAULT_ACTIVITY_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Sunday-first short names used by the calendar grid.
DAY_NAMES = ("CN", "T2", "T3", "T4", "T5", "T6", "T7")
UNASSIGNED_DEPARTMENT = "Chưa phân loại"
