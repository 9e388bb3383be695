from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import OrderStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Order
from .repository import OrderRepository

_COLUMNS = "id, tenant_id, user_id, date, status, locked, created_at, updated_at"


def _to_order(r: dict) -> Order:
    return Order(
        order_id=int(r["id"]),
        tenant_id=str(r["tenant_id"]),
        employee_id=str(r["user_id"]),
        date=r["date"],
        status=OrderStatus(r["status"]),
        locked=bool(r.get("locked")),
        created_at=from_db_utc(r.get("created_at")),
        updated_at=from_db_utc(r.get("updated_at")),
    )


class MySQLOrderRepository(OrderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def lookup(self, *, tenant_id: str, employee_id: str, order_date: date) -> Optional[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM orders
                WHERE tenant_id=%s AND user_id=%s AND date=%s
                """,
                (tenant_id, employee_id, order_date),
            )
            r = fetchone(cur)
            return _to_order(r) if r else None

    def upsert(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        order_date: date,
        status: OrderStatus,
        at: datetime,
    ) -> Order:
        stamp = to_db_utc(at)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO orders(tenant_id, user_id, date, status, locked, created_at, updated_at)
                VALUES(%s,%s,%s,%s,0,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), updated_at=VALUES(updated_at)
                """,
                (tenant_id, employee_id, order_date, status.value, stamp, stamp),
            )

            # lastrowid is unreliable on the update branch; re-read by the unique key.
            cur.execute(
                f"SELECT {_COLUMNS} FROM orders WHERE tenant_id=%s AND user_id=%s AND date=%s",
                (tenant_id, employee_id, order_date),
            )
            return _to_order(fetchone(cur))

    def list_for_employee(self, *, tenant_id: str, employee_id: str, start: date, end: date) -> Sequence[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM orders
                WHERE tenant_id=%s AND user_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (tenant_id, employee_id, start, end),
            )
            return [_to_order(r) for r in fetchall(cur)]

    def list_for_date(self, *, tenant_id: str, order_date: date) -> Sequence[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM orders WHERE tenant_id=%s AND date=%s",
                (tenant_id, order_date),
            )
            return [_to_order(r) for r in fetchall(cur)]

    def list_for_range(self, *, tenant_id: str, start: date, end: date) -> Sequence[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM orders
                WHERE tenant_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC, user_id ASC
                """,
                (tenant_id, start, end),
            )
            return [_to_order(r) for r in fetchall(cur)]

    def count_for_consumers(self, *, tenant_id: str, order_date: date, status: OrderStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM orders o
                JOIN users u ON u.id = o.user_id AND u.tenant_id = o.tenant_id
                WHERE o.tenant_id=%s AND o.date=%s AND o.status=%s
                  AND u.deleted_at IS NULL
                  AND LOWER(u.role) <> LOWER(%s)
                """,
                (tenant_id, order_date, status.value, Role.KITCHEN.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def history(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        since: date,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Order], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM orders WHERE tenant_id=%s AND user_id=%s AND date >= %s",
                (tenant_id, employee_id, since),
            )
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM orders
                WHERE tenant_id=%s AND user_id=%s AND date >= %s
                ORDER BY date DESC
                LIMIT %s OFFSET %s
                """,
                (tenant_id, employee_id, since, int(limit), int(offset)),
            )
            return [_to_order(r) for r in fetchall(cur)], total

    def reset_not_eating_before(self, *, tenant_id: str, before: date, at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE orders
                SET status=%s, updated_at=%s
                WHERE tenant_id=%s AND status=%s AND date < %s
                """,
                (OrderStatus.EATING.value, to_db_utc(at), tenant_id, OrderStatus.NOT_EATING.value, before),
            )
            return cur.rowcount
