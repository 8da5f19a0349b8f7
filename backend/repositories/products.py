"""
Products repository — guarded inserts, deletes, and supplier links.
"""

from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from audit.registry import AuditRegistry
from audit.triggers import audit_registry
from core.exceptions import IntegrityViolationError
from core.results import WriteResult
from db.models import Product, ProductSupplier
from repositories.base import audited_insert

logger = structlog.get_logger()


async def insert_products(
    db: AsyncSession,
    rows: Iterable[dict[str, Any]],
    registry: AuditRegistry = audit_registry,
) -> WriteResult[list[dict]]:
    """Insert products; the batch is rejected whole if any price is negative."""
    return await audited_insert(db, Product, rows, registry=registry)


async def delete_product(db: AsyncSession, product_id: int) -> WriteResult[int]:
    """
    Delete one product by id.

    No cascade: a product still referenced by sales, the sales log, or a
    supplier link is refused by the engine and reported as an integrity
    violation. Returns the number of rows deleted (0 or 1).
    """
    table = Product.__table__
    try:
        result = await db.execute(delete(table).where(table.c.product_id == product_id))
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        reason = str(exc.orig) if exc.orig is not None else str(exc)
        logger.warning("products.delete_refused", product_id=product_id, reason=reason)
        return WriteResult.failure(IntegrityViolationError("products", "delete", reason))

    logger.info("products.deleted", product_id=product_id, rows=result.rowcount)
    return WriteResult.success(result.rowcount)


async def link_product_suppliers(
    db: AsyncSession,
    links: Iterable[dict[str, Any]],
) -> WriteResult[list[dict]]:
    """Insert (product_id, supplier_id) pairs."""
    return await audited_insert(db, ProductSupplier, links)
