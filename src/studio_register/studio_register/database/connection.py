from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    """Where the remote mirror lives. ``connect_timeout`` bounds every sync attempt."""

    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 5

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(settings.get("host", "localhost")),
            port=int(settings.get("port", 3306)),
            user=str(settings.get("user", "root")),
            password=str(settings.get("password", "")),
            database=str(settings.get("database", "studio_register")),
            connect_timeout=int(settings.get("connect_timeout", 5)),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Opens a fresh connection per operation; nothing is pooled between sync passes."""

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, with_database: bool = True):
        options: dict[str, Any] = {
            "host": self._config.host,
            "port": self._config.port,
            "user": self._config.user,
            "password": self._config.password,
            "connection_timeout": self._config.connect_timeout,
        }
        if with_database:
            options["database"] = self._config.database
        return mysql.connector.connect(**options)
