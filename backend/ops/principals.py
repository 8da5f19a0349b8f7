"""
Principal Provisioning — database logins and role membership (PostgreSQL).

Two accounts:
  limited_user  LOGIN, member of db_datareader + db_datawriter
  admin_user    LOGIN SUPERUSER

Statements are idempotent: roles are created only when missing and
passwords are (re)set on every run. Passwords come from settings and are
never logged.
"""

import re

import structlog
from sqlalchemy.ext.asyncio import AsyncConnection

logger = structlog.get_logger()

READER_ROLE = "db_datareader"
WRITER_ROLE = "db_datawriter"

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid role name '{name}'")
    return name


def _literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _ensure_role(name: str, options: str) -> str:
    return (
        "DO $$ BEGIN "
        f"IF NOT EXISTS (SELECT 1 FROM pg_roles WHERE rolname = {_literal(name)}) THEN "
        f"CREATE ROLE {name} {options}; "
        "END IF; END $$"
    )


def provisioning_statements(
    limited_user: str,
    limited_password: str,
    admin_user: str,
    admin_password: str,
    schema: str = "public",
) -> list[str]:
    """Ordered SQL statements that create the roles and grant their rights."""
    if not limited_password or not admin_password:
        raise ValueError("Both limited and admin passwords must be set")

    limited_user = _identifier(limited_user)
    admin_user = _identifier(admin_user)
    schema = _identifier(schema)

    return [
        # Group roles
        _ensure_role(READER_ROLE, "NOLOGIN"),
        f"GRANT USAGE ON SCHEMA {schema} TO {READER_ROLE}",
        f"GRANT SELECT ON ALL TABLES IN SCHEMA {schema} TO {READER_ROLE}",
        f"ALTER DEFAULT PRIVILEGES IN SCHEMA {schema} GRANT SELECT ON TABLES TO {READER_ROLE}",
        _ensure_role(WRITER_ROLE, "NOLOGIN"),
        f"GRANT USAGE ON SCHEMA {schema} TO {WRITER_ROLE}",
        f"GRANT INSERT, UPDATE, DELETE ON ALL TABLES IN SCHEMA {schema} TO {WRITER_ROLE}",
        f"GRANT USAGE ON ALL SEQUENCES IN SCHEMA {schema} TO {WRITER_ROLE}",
        f"ALTER DEFAULT PRIVILEGES IN SCHEMA {schema} GRANT INSERT, UPDATE, DELETE ON TABLES TO {WRITER_ROLE}",
        # Limited read/write login
        _ensure_role(limited_user, "LOGIN"),
        f"ALTER ROLE {limited_user} WITH LOGIN PASSWORD {_literal(limited_password)}",
        f"GRANT {READER_ROLE} TO {limited_user}",
        f"GRANT {WRITER_ROLE} TO {limited_user}",
        # Full administrative login
        _ensure_role(admin_user, "LOGIN"),
        f"ALTER ROLE {admin_user} WITH LOGIN SUPERUSER PASSWORD {_literal(admin_password)}",
    ]


async def apply_statements(conn: AsyncConnection, statements: list[str]) -> int:
    for statement in statements:
        await conn.exec_driver_sql(statement)
    logger.info("principals.provisioned", statements=len(statements))
    return len(statements)
