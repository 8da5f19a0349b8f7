"""
Customers Router — customer records, contact updates, feedback.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, unwrap_or_http
from db.procedures import update_customer_contact_info
from repositories.customers import insert_customer_feedback, insert_customers

router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class CustomerCreate(BaseModel):
    customer_id: int
    customer_name: str | None = Field(None, max_length=100)
    contact_info: str | None = Field(None, max_length=100)


class ContactInfoUpdate(BaseModel):
    contact_info: str = Field(..., max_length=100)


class FeedbackCreate(BaseModel):
    feedback_id: int
    feedback: str


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=list[CustomerCreate], status_code=201)
async def create_customers(
    customers: list[CustomerCreate],
    db: AsyncSession = Depends(get_db),
):
    result = await insert_customers(db, [c.model_dump() for c in customers])
    return unwrap_or_http(result)


@router.put("/{customer_id}/contact-info")
async def put_contact_info(
    customer_id: int,
    update: ContactInfoUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Overwrite a customer's contact info."""
    updated = unwrap_or_http(await update_customer_contact_info(db, customer_id, update.contact_info))
    if not updated:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"customer_id": customer_id, "rows_updated": updated}


@router.post("/{customer_id}/feedback", status_code=201)
async def add_feedback(
    customer_id: int,
    feedback: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
):
    result = await insert_customer_feedback(db, [{**feedback.model_dump(), "customer_id": customer_id}])
    return unwrap_or_http(result)[0]
