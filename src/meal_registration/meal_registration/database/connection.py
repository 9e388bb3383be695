from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector import pooling

# DATETIME columns hold naive UTC; every session must agree.
SESSION_TIME_ZONE = "+00:00"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings-module DB_CONFIG dict."""
        return cls(
            host=str(values["host"]),
            port=int(values.get("port", 3306)),
            user=str(values["user"]),
            password=str(values.get("password", "")),
            database=str(values["database"]),
            pool_size=int(values.get("pool_size", 0) or 0),
        )

    def connect_args(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": "utf8mb4",
            "time_zone": SESSION_TIME_ZONE,
        }


class DatabaseConnection:
    """Process-wide source of MySQL connections.

    Repositories open one connection per operation and close it at the end. With
    `pool_size > 0` connections come from a mysql.connector pool and closing returns
    them to it; otherwise each call dials a fresh connection.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        if config.pool_size > 0:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"meal_registration_{config.database}",
                pool_size=config.pool_size,
                **config.connect_args(),
            )

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def pooled(self) -> bool:
        return self._pool is not None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        if self._pool is None:
            return mysql.connector.connect(**self._config.connect_args())
        cnx = self._pool.get_connection()
        # A pooled session is reset on checkout; put the zone back.
        cnx.time_zone = SESSION_TIME_ZONE
        return cnx
