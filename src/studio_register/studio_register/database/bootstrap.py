"""Create the remote mirror database and tables from ``database/schema.sql``."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

_LINE_COMMENT_RE = re.compile(r"(?m)^\s*--.*$")
_DB_SCOPE_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")


def schema_statements(sql: str) -> List[str]:
    """DDL statements of a schema file, in order.

    ``CREATE DATABASE``/``USE`` lines are dropped so the file applies to
    whatever database the config names. Statements must not contain string
    literals with semicolons.
    """
    body = _DB_SCOPE_RE.sub("", _LINE_COMMENT_RE.sub("", sql))
    return [stmt.strip() for stmt in body.split(";") if stmt.strip()]


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> int:
    """Apply every statement of ``schema_path``; returns how many ran."""
    ensure_database_exists(config)
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)
    logger.info("Applied %d schema statement(s) to %s", len(statements), config.database)
    return len(statements)


def list_tables(config: DBConfig) -> List[str]:
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
