from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_values(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        if not keys:
            return {}
        placeholders = ",".join(["%s"] * len(keys))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT `key`, value FROM system_settings WHERE `key` IN ({placeholders})",
                tuple(keys),
            )
            return {r["key"]: r["value"] for r in fetchall(cur)}

    def upsert_values(self, values: Mapping[str, str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for key, value in values.items():
                cur.execute(
                    """
                    INSERT INTO system_settings(`key`, value, updated_at)
                    VALUES(%s, %s, UTC_TIMESTAMP())
                    ON DUPLICATE KEY UPDATE value=VALUES(value), updated_at=VALUES(updated_at)
                    """,
                    (key, value),
                )
