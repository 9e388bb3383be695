from __future__ import annotations

import re
from datetime import date

from ..core.exceptions import ValidationError

_HHMM_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def require_hhmm(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not _HHMM_RE.match(value):
        raise ValidationError(f"{field_name} phải có dạng HH:MM (00:00 - 23:59)")
    return value


def require_day_of_week(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise ValidationError(f"{field_name} phải trong khoảng 0-6")
    return value


def require_non_negative_int(value: object, field_name: str) -> int:
    try:
        n = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} phải là số nguyên") from e
    if n < 0:
        raise ValidationError(f"{field_name} không được âm")
    return n


def require_positive_int(value: object, field_name: str) -> int:
    n = require_non_negative_int(value, field_name)
    if n == 0:
        raise ValidationError(f"{field_name} phải lớn hơn 0")
    return n


def require_year_month(year: object, month: object) -> tuple[int, int]:
    """Calendar year/month that `datetime.date` can represent."""
    try:
        y, m = int(year), int(month)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValidationError("Tháng/năm không hợp lệ") from e
    if not date.min.year <= y <= date.max.year:
        raise ValidationError(f"Năm phải trong khoảng {date.min.year}-{date.max.year}")
    if not 1 <= m <= 12:
        raise ValidationError("Tháng không hợp lệ")
    return y, m
