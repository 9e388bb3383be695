from __future__ import annotations

from datetime import date, time, timedelta
from typing import Optional

from ..common.datetime_utils import civil_datetime
from ..common.logger import get_logger
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_ACTIVITY_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ValidationError
from ..roster.repository import RosterRepository
from .model import ActivityLogPage, ActivityLogView
from .repository import ActivityLogRepository

logger = get_logger(__name__)


class ActivityLogService:
    """Admin review of the meal audit trail (late cancellations included)."""

    def __init__(self, activity: ActivityLogRepository, roster: RosterRepository):
        self._activity = activity
        self._roster = roster

    def list_logs(
        self,
        *,
        tenant_id: str,
        action: Optional[str] = None,
        employee_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        page: int = 1,
        page_size: int = DEFAULT_ACTIVITY_PAGE_SIZE,
    ) -> ActivityLogPage:
        """Newest first. The date range is on civil (UTC+07:00) days, both ends included."""
        page = require_positive_int(page, "page")
        page_size = require_positive_int(page_size, "limit")
        if page_size > MAX_PAGE_SIZE:
            raise ValidationError(f"limit tối đa là {MAX_PAGE_SIZE}")
        if from_date and to_date and from_date > to_date:
            raise ValidationError("from_date phải trước to_date")

        entries, total = self._activity.list_page(
            tenant_id=tenant_id,
            action=(action or "").strip() or None,
            employee_id=employee_id or None,
            since=civil_datetime(from_date, time.min) if from_date else None,
            until=civil_datetime(to_date + timedelta(days=1), time.min) if to_date else None,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

        members = {m.employee_id: m for m in self._roster.list_members(tenant_id=tenant_id)}
        items = []
        for entry in entries:
            member = members.get(entry.performed_by)
            items.append(
                ActivityLogView(
                    entry=entry,
                    performer_name=member.full_name if member else None,
                    performer_email=member.email if member else None,
                )
            )
        logger.debug("Activity logs tenant=%s page=%d total=%d", tenant_id, page, total)
        return ActivityLogPage(items=items, page=page, page_size=page_size, total=total)
