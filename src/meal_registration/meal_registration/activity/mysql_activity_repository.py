from __future__ import annotations

import json
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, now_local, parse_iso_date, to_db_utc
from ..core.enums import ActivityAction, OrderStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_column
from .model import ActivityDetails, ActivityLogEntry
from .repository import ActivityLogRepository

_DETAIL_KEYS = {"date", "status", "previous_status", "action_timestamp", "deadline", "is_late", "minutes_late"}


def _details_from_json(data: dict) -> ActivityDetails:
    previous: Optional[str] = data.get("previous_status")
    return ActivityDetails(
        date=parse_iso_date(data["date"]),
        status=OrderStatus(data["status"]),
        previous_status=OrderStatus(previous) if previous else None,
        action_timestamp=datetime.fromisoformat(data["action_timestamp"]),
        deadline=datetime.fromisoformat(data["deadline"]),
        is_late=bool(data.get("is_late")),
        minutes_late=int(data.get("minutes_late") or 0),
        context={k: v for k, v in data.items() if k not in _DETAIL_KEYS},
    )


def _to_entry(r: dict) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=int(r["id"]),
        tenant_id=str(r["tenant_id"]),
        action=ActivityAction(r["action"]),
        performed_by=str(r["performed_by"]),
        target_type=r.get("target_type") or "order",
        details=_details_from_json(load_json_column(r["details"])),
        created_at=from_db_utc(r.get("created_at")),
    )


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: ActivityLogEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(tenant_id, action, performed_by, target_type, target_id, details, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.tenant_id,
                    entry.action.value,
                    entry.performed_by,
                    entry.target_type,
                    entry.performed_by,
                    json.dumps(entry.details.to_json(), ensure_ascii=False),
                    to_db_utc(entry.created_at or now_local()),
                ),
            )
            return int(cur.lastrowid)

    def list_for_date(self, *, tenant_id: str, target_date: date) -> Sequence[ActivityLogEntry]:
        # Filter on details.date rather than created_at so the UTC/UTC+07:00 day boundary does not matter.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, tenant_id, action, performed_by, target_type, details, created_at
                FROM activity_logs
                WHERE tenant_id=%s
                  AND action IN (%s, %s)
                  AND JSON_UNQUOTE(JSON_EXTRACT(details, '$.date'))=%s
                ORDER BY created_at DESC, id DESC
                """,
                (
                    tenant_id,
                    ActivityAction.MEAL_REGISTRATION.value,
                    ActivityAction.MEAL_CANCELLATION.value,
                    target_date.isoformat(),
                ),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_page(
        self,
        *,
        tenant_id: str,
        action: Optional[str] = None,
        employee_id: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[ActivityLogEntry], int]:
        clauses = ["tenant_id=%s", "action IN (%s, %s)"]
        params: list[object] = [tenant_id, ActivityAction.MEAL_REGISTRATION.value, ActivityAction.MEAL_CANCELLATION.value]
        if action:
            clauses.append("LOWER(action) LIKE %s")
            params.append(f"%{action.lower()}%")
        if employee_id:
            clauses.append("performed_by=%s")
            params.append(employee_id)
        if since is not None:
            clauses.append("created_at >= %s")
            params.append(to_db_utc(since))
        if until is not None:
            clauses.append("created_at < %s")
            params.append(to_db_utc(until))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM activity_logs WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT id, tenant_id, action, performed_by, target_type, details, created_at
                FROM activity_logs
                WHERE {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_entry(r) for r in fetchall(cur)], total
