"""Create the remote mirror schema for the current APP_ENV."""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.studio_register.studio_register.database.bootstrap import apply_schema, list_tables
from src.studio_register.studio_register.database.connection import DBConfig


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = DBConfig.from_mapping(settings.REMOTE_DB_CONFIG)

    applied = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = sorted(list_tables(db_config))
    print(f"OK: {applied} statement(s) -> {db_config.describe()} ({', '.join(tables)})")


if __name__ == "__main__":
    main()
