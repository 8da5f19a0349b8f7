"""
Shared write path for all tables.

Every insert and update goes through :func:`audited_insert` or
:func:`audited_update`, which is where audit hooks fire. Writes use Core
statements against the mapped tables so that engine constraint errors
surface as ``IntegrityError`` rather than ORM identity conflicts.
"""

from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import Table, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from audit.registry import AuditRegistry, RowImage
from audit.triggers import audit_registry
from core.exceptions import IntegrityViolationError
from core.results import WriteResult

logger = structlog.get_logger()


def row_image(table: Table, row: dict[str, Any]) -> RowImage:
    """Full-width dict image of a candidate row; missing columns become None."""
    unknown = set(row) - set(table.columns.keys())
    if unknown:
        raise ValueError(f"Unknown columns for {table.name}: {sorted(unknown)}")
    return {column.name: row.get(column.name) for column in table.columns}


def single_primary_key(table: Table):
    keys = list(table.primary_key.columns)
    if len(keys) != 1:
        raise ValueError(f"{table.name} has a composite primary key; keyed updates need a single key")
    return keys[0]


def image_query(table: Table, key_column, keys: list, lock: bool = False):
    """SELECT of full rows by key; with ``lock`` the rows stay locked until commit."""
    query = select(table).where(key_column.in_(keys)).order_by(key_column)
    return query.with_for_update() if lock else query


async def fetch_images(db: AsyncSession, table: Table, key_column, keys: list, lock: bool = False) -> list[RowImage]:
    result = await db.execute(image_query(table, key_column, keys, lock=lock))
    return [dict(row._mapping) for row in result.all()]


async def _rollback_with(db: AsyncSession, table: Table, operation: str, exc: IntegrityError) -> WriteResult:
    await db.rollback()
    reason = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning("repository.write_rejected", table=table.name, operation=operation, reason=reason)
    return WriteResult.failure(IntegrityViolationError(table.name, operation, reason))


async def audited_insert(
    db: AsyncSession,
    model,
    rows: Iterable[dict[str, Any]],
    registry: AuditRegistry = audit_registry,
) -> WriteResult[list[RowImage]]:
    """
    Insert a batch of rows into ``model``'s table.

    Order of operations:
      1. before_insert guards see the whole batch; an error aborts with no write
      2. the batch is inserted in one statement
      3. after_insert hooks derive ledger rows, written in the same transaction
      4. commit

    An engine constraint violation at 2 or 3 rolls the whole transaction back.
    """
    table: Table = model.__table__
    images = [row_image(table, row) for row in rows]
    if not images:
        return WriteResult.success([])

    error = registry.check_insert(table.name, images)
    if error is not None:
        logger.warning("repository.insert_guarded", table=table.name, error_code=error.error_code)
        return WriteResult.failure(error)

    try:
        await db.execute(insert(table), images)
        derived = registry.derive_after_insert(table.name, images)
        if derived:
            db.add_all(derived)
            await db.flush()
        await db.commit()
    except IntegrityError as exc:
        return await _rollback_with(db, table, "insert", exc)

    logger.info("repository.inserted", table=table.name, rows=len(images), derived=len(derived))
    return WriteResult.success(images)


async def audited_update(
    db: AsyncSession,
    model,
    keys: Iterable[Any],
    values: dict[str, Any],
    registry: AuditRegistry = audit_registry,
) -> WriteResult[int]:
    """
    Apply the same column values to every row whose primary key is in ``keys``.

    Before- and after-images are read around the UPDATE and matched on the
    primary key. The before-image read locks the rows (FOR UPDATE where the
    dialect supports it) so no concurrent commit lands between it and the
    UPDATE; after_update hooks receive each pair. Returns the number of
    rows updated (0 when no key matched).
    """
    table: Table = model.__table__
    key_column = single_primary_key(table)
    row_image(table, values)
    if key_column.name in values:
        raise ValueError(f"{table.name}.{key_column.name} cannot be changed by an update")

    keys = list(keys)
    if not keys or not values:
        return WriteResult.success(0)

    try:
        before_rows = await fetch_images(db, table, key_column, keys, lock=True)
        if not before_rows:
            await db.rollback()
            return WriteResult.success(0)

        await db.execute(update(table).where(key_column.in_(keys)).values(**values))
        after_rows = await fetch_images(db, table, key_column, keys)

        before_by_key = {row[key_column.name]: row for row in before_rows}
        pairs = [
            (before_by_key[row[key_column.name]], row)
            for row in after_rows
            if row[key_column.name] in before_by_key
        ]
        derived = registry.derive_after_update(table.name, pairs)
        if derived:
            db.add_all(derived)
            await db.flush()
        await db.commit()
    except IntegrityError as exc:
        return await _rollback_with(db, table, "update", exc)

    logger.info("repository.updated", table=table.name, rows=len(pairs), derived=len(derived))
    return WriteResult.success(len(pairs))
