from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import RosterMember
from .repository import RosterRepository

_SELECT = """
    SELECT u.id, u.tenant_id, u.full_name, u.email, u.role, u.department, u.shift,
           u.is_active, g.name AS group_name
    FROM users u
    LEFT JOIN `groups` g ON g.id = u.group_id AND g.tenant_id = u.tenant_id
"""


def _to_member(r: dict) -> RosterMember:
    return RosterMember(
        employee_id=str(r["id"]),
        tenant_id=str(r["tenant_id"]),
        full_name=r.get("full_name") or "",
        email=r.get("email") or "",
        role=r.get("role") or "",
        department=r.get("department"),
        shift=r.get("shift"),
        group_name=r.get("group_name"),
        is_active=r.get("is_active") is None or bool(r.get("is_active")),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_member(self, *, tenant_id: str, employee_id: str) -> Optional[RosterMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE u.tenant_id=%s AND u.id=%s AND u.deleted_at IS NULL",
                (tenant_id, employee_id),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_members(self, *, tenant_id: str) -> Sequence[RosterMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE u.tenant_id=%s AND u.deleted_at IS NULL ORDER BY u.full_name ASC",
                (tenant_id,),
            )
            return [_to_member(r) for r in fetchall(cur)]

    def count_consumers(self, *, tenant_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM users
                WHERE tenant_id=%s AND deleted_at IS NULL AND LOWER(role) <> LOWER(%s)
                """,
                (tenant_id, Role.KITCHEN.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_tenant_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM tenants ORDER BY id")
            return [str(r["id"]) for r in fetchall(cur)]
