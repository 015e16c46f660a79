from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Sequence

import mysql.connector

from ..common.datetime_utils import parse_iso, to_iso
from ..core.exceptions import RemoteStoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_rows, from_mysql_datetime, to_mysql_datetime
from .collections import CollectionSpec
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)


class MySQLRemoteStore(RemoteStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def select_all(self, spec: CollectionSpec) -> List[Dict[str, Any]]:
        cols = ", ".join(f"`{c}`" for c in spec.columns)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {cols} FROM `{spec.table}` ORDER BY `updatedAt` DESC")
                rows = fetch_rows(cur)
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"select from {spec.table} failed: {e}") from e
        out: List[Dict[str, Any]] = []
        for row in rows:
            try:
                out.append(self._row_to_wire(spec, row))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable row %s in %s: %s", row.get("id"), spec.table, e)
        return out

    def upsert(self, spec: CollectionSpec, rows: Sequence[Dict[str, Any]]) -> None:
        if not rows:
            return

        cols = ", ".join(f"`{c}`" for c in spec.columns)
        placeholders = ",".join(["%s"] * len(spec.columns))
        updates = ", ".join(f"`{c}`=VALUES(`{c}`)" for c in spec.columns if c != "id")
        sql = f"INSERT INTO `{spec.table}`({cols}) VALUES({placeholders}) ON DUPLICATE KEY UPDATE {updates}"

        params = [self._wire_to_params(spec, r) for r in rows]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.executemany(sql, params)
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"upsert into {spec.table} failed: {e}") from e
        logger.debug("Upserted %d row(s) into %s", len(params), spec.table)

    @staticmethod
    def _wire_to_params(spec: CollectionSpec, row: Dict[str, Any]) -> tuple:
        out: list[Any] = []
        for c in spec.columns:
            value = row.get(c)
            if c == "updatedAt":
                value = to_mysql_datetime(parse_iso(value))
            elif c in spec.json_columns:
                value = json.dumps(value or {})
            elif c in spec.bool_columns:
                value = 1 if value else 0
            out.append(value)
        return tuple(out)

    @staticmethod
    def _row_to_wire(spec: CollectionSpec, row: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(row)
        out["updatedAt"] = to_iso(from_mysql_datetime(row.get("updatedAt")))
        for c in spec.json_columns:
            raw = row.get(c)
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode("utf-8")
            out[c] = json.loads(raw) if isinstance(raw, str) and raw else (raw or {})
        for c in spec.bool_columns:
            out[c] = bool(row.get(c))
        return out
