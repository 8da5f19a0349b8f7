#!/usr/bin/env python3
"""Run one database backup rotation cycle.

Examples:
  BACKUP_DIR=/var/backups/storeledger python backend/scripts/run_backup.py
  python backend/scripts/run_backup.py --backup-dir /tmp/backups --max-count 7
"""

from __future__ import annotations

import argparse
import json
import os
import sys

# Add backend/ to path when run as a script.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_settings
from core.exceptions import StoreLedgerError
from ops.backup import build_rotator


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a database backup and evict the oldest beyond the window")
    parser.add_argument("--backup-dir", help="Override BACKUP_DIR")
    parser.add_argument("--max-count", type=int, help="Override BACKUP_MAX_COUNT")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print the JSON summary")
    args = parser.parse_args(argv)

    overrides = {}
    if args.backup_dir:
        overrides["backup_dir"] = args.backup_dir
    if args.max_count is not None:
        overrides["backup_max_count"] = args.max_count
    settings = get_settings().model_copy(update=overrides)

    try:
        summary = build_rotator(settings).run()
    except StoreLedgerError as exc:
        summary = {"status": "failed", **exc.to_dict()}

    print(json.dumps(summary, indent=2 if args.pretty else None))
    return 0 if summary["status"] == "success" else 1


if __name__ == "__main__":
    raise SystemExit(main())
