"""Backup the local store.

Writes every collection (plus the awards meta) into one timestamped JSON
file under ``backups/``.
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.studio_register.studio_register.container import build_container
from src.studio_register.studio_register.sync.collections import ALL_COLLECTIONS


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    if getattr(settings, "LOCAL_STORE", "file") == "memory":
        raise SystemExit("Nothing to back up: the current settings use an in-memory store.")

    container = build_container(settings=settings, online=False)
    prefix = getattr(settings, "STORAGE_PREFIX", "bb_")

    payload = {spec.name: [r.to_dict() for r in container.sync_manager.load_local(spec)] for spec in ALL_COLLECTIONS}
    raw_meta = container.local_store.get(f"{prefix}awards_meta")
    payload["awards_meta"] = json.loads(raw_meta) if raw_meta else {}

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"studio_register_{ts}.json"
    out_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    counts = ", ".join(f"{name}={len(rows)}" for name, rows in payload.items() if isinstance(rows, list))
    print(f"OK: Backup created: {out_file} ({counts})")


if __name__ == "__main__":
    main()
