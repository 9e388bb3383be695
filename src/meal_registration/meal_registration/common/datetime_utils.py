from __future__ import annotations

from datetime import date, datetime, time, timezone

from ..core.constants import CIVIL_TZ
from ..core.exceptions import ConfigError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str, *, field_name: str = "time") -> time:
    """Parse an HH:MM setting value.

    Raises ConfigError: a stored time that does not parse must abort the operation.
    """
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError as e:
        raise ConfigError(f"{field_name} không hợp lệ: {value!r}") from e


def now_local() -> datetime:
    """Current instant in UTC+07:00.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(CIVIL_TZ)


def today_local() -> date:
    return now_local().date()


def civil_datetime(day: date, at: time) -> datetime:
    """The instant `at` on `day`, interpreted in the fixed UTC+07:00 civil time."""
    return datetime.combine(day, at, tzinfo=CIVIL_TZ)


def as_civil(instant: datetime) -> datetime:
    # Naive datetimes are taken to already be civil time.
    if instant.tzinfo is None:
        return instant.replace(tzinfo=CIVIL_TZ)
    return instant.astimezone(CIVIL_TZ)


def to_db_utc(instant: datetime) -> datetime:
    """MySQL DATETIME columns hold naive UTC."""
    return as_civil(instant).astimezone(timezone.utc).replace(tzinfo=None)


def from_db_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone(CIVIL_TZ)
