#!/usr/bin/env python3
"""Create the limited and admin database logins (PostgreSQL).

Passwords are read from LIMITED_USER_PASSWORD and ADMIN_USER_PASSWORD.

Examples:
  python backend/scripts/provision_roles.py --dry-run
  python backend/scripts/provision_roles.py
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

# Add backend/ to path when run as a script.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_settings
from db.session import build_engine
from ops.principals import apply_statements, provisioning_statements


async def _apply(database_url: str, statements: list[str]) -> int:
    engine = build_engine(database_url)
    try:
        async with engine.begin() as conn:
            return await apply_statements(conn, statements)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Provision database logins and roles")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would run")
    args = parser.parse_args(argv)

    settings = get_settings()
    try:
        statements = provisioning_statements(
            settings.limited_user_name,
            settings.limited_user_password,
            settings.admin_user_name,
            settings.admin_user_password,
        )
    except ValueError as exc:
        print(json.dumps({"status": "failed", "message": str(exc)}))
        return 1

    summary = {
        "status": "success",
        "dry_run": args.dry_run,
        "roles": [settings.limited_user_name, settings.admin_user_name],
        "statement_count": len(statements),
    }
    if not args.dry_run:
        asyncio.run(_apply(settings.database_url, statements))

    print(json.dumps(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
