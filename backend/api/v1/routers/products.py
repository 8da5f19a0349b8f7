"""
Products Router — price lookups, guarded batch inserts, deletes.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, unwrap_or_http
from db.procedures import delete_product_by_id, get_products_above_price
from reporting.queries import products_never_sold
from repositories.products import insert_products, link_product_suppliers

router = APIRouter(prefix="/api/v1/products", tags=["products"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class ProductCreate(BaseModel):
    product_id: int
    product_name: str | None = Field(None, max_length=100)
    # Sign is checked by the insert guard so the whole batch is judged together.
    price: Decimal | None = Field(None, max_digits=10, decimal_places=2)


class ProductResponse(BaseModel):
    product_id: int
    product_name: str | None
    price: Decimal | None

    model_config = {"from_attributes": True}


class ProductSupplierLink(BaseModel):
    supplier_id: int


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/", response_model=list[ProductResponse])
async def list_products_above_price(
    min_price: Decimal = Query(Decimal("0"), description="Exclusive lower bound on price"),
    db: AsyncSession = Depends(get_db),
):
    """Products priced strictly above ``min_price``."""
    return await get_products_above_price(db, min_price)


@router.get("/never-sold", response_model=list[ProductResponse])
async def list_products_never_sold(db: AsyncSession = Depends(get_db)):
    """Products without any sales transaction, highest id first."""
    return await products_never_sold(db)


@router.post("/", response_model=list[ProductResponse], status_code=201)
async def create_products(
    products: list[ProductCreate],
    db: AsyncSession = Depends(get_db),
):
    """Insert a batch of products. Any negative price rejects the whole batch."""
    result = await insert_products(db, [p.model_dump() for p in products])
    return unwrap_or_http(result)


@router.post("/{product_id}/suppliers", status_code=201)
async def add_product_supplier(
    product_id: int,
    link: ProductSupplierLink,
    db: AsyncSession = Depends(get_db),
):
    """Record that a supplier carries this product."""
    result = await link_product_suppliers(db, [{"product_id": product_id, "supplier_id": link.supplier_id}])
    return unwrap_or_http(result)[0]


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a product. Refused with 409 while sales still reference it."""
    deleted = unwrap_or_http(await delete_product_by_id(db, product_id))
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
