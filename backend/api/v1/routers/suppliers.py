"""
Suppliers Router — supplier records and their contact change history.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, unwrap_or_http
from repositories.suppliers import get_supplier, insert_suppliers, list_contact_history, update_suppliers

router = APIRouter(prefix="/api/v1/suppliers", tags=["suppliers"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class SupplierCreate(BaseModel):
    supplier_id: int
    supplier_name: str | None = Field(None, max_length=100)
    contact_info: str | None = Field(None, max_length=100)


class SupplierUpdate(BaseModel):
    supplier_name: str | None = Field(None, max_length=100)
    contact_info: str | None = Field(None, max_length=100)


class SupplierResponse(SupplierCreate):
    pass


class ContactHistoryResponse(BaseModel):
    history_id: int
    supplier_id: int | None
    old_contact_info: str | None
    new_contact_info: str | None
    change_date: datetime

    model_config = {"from_attributes": True}


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=list[SupplierResponse], status_code=201)
async def create_suppliers(
    suppliers: list[SupplierCreate],
    db: AsyncSession = Depends(get_db),
):
    result = await insert_suppliers(db, [s.model_dump() for s in suppliers])
    return unwrap_or_http(result)


@router.patch("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    update: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a supplier. A contact_info change is recorded in the history."""
    unwrap_or_http(await update_suppliers(db, [supplier_id], update.model_dump(exclude_unset=True)))
    supplier = await get_supplier(db, supplier_id)
    if supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("/{supplier_id}/contact-history", response_model=list[ContactHistoryResponse])
async def get_contact_history(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await list_contact_history(db, supplier_id=supplier_id)
