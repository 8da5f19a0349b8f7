"""
Suppliers repository — inserts, audited updates, contact history reads.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from audit.registry import AuditRegistry
from audit.triggers import audit_registry
from core.results import WriteResult
from db.models import Supplier, SupplierContactHistory
from repositories.base import audited_insert, audited_update


async def insert_suppliers(db: AsyncSession, rows: Iterable[dict[str, Any]]) -> WriteResult[list[dict]]:
    return await audited_insert(db, Supplier, rows)


async def update_suppliers(
    db: AsyncSession,
    supplier_ids: Iterable[int],
    values: dict[str, Any],
    registry: AuditRegistry = audit_registry,
) -> WriteResult[int]:
    """
    Set ``values`` on every listed supplier.

    One contact history row is appended per supplier whose contact_info
    changed; updates to other columns leave the history untouched.
    """
    return await audited_update(db, Supplier, supplier_ids, values, registry=registry)


async def get_supplier(db: AsyncSession, supplier_id: int) -> dict | None:
    table = Supplier.__table__
    result = await db.execute(select(table).where(table.c.supplier_id == supplier_id))
    row = result.first()
    return dict(row._mapping) if row else None


async def list_contact_history(db: AsyncSession, supplier_id: int | None = None) -> list[SupplierContactHistory]:
    query = select(SupplierContactHistory)
    if supplier_id is not None:
        query = query.where(SupplierContactHistory.supplier_id == supplier_id)
    result = await db.execute(query.order_by(SupplierContactHistory.history_id))
    return list(result.scalars().all())
