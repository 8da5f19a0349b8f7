"""
Employees Router — staff, store locations, assignments.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, unwrap_or_http
from repositories.staff import assign_employee_locations, insert_employees, insert_store_locations

router = APIRouter(prefix="/api/v1", tags=["employees"])


class EmployeeCreate(BaseModel):
    employee_id: int
    employee_name: str | None = Field(None, max_length=100)
    position: str | None = Field(None, max_length=50)


class StoreLocationCreate(BaseModel):
    location_id: int
    location_name: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=100)


class LocationAssignment(BaseModel):
    location_id: int


@router.post("/employees/", response_model=list[EmployeeCreate], status_code=201)
async def create_employees(
    employees: list[EmployeeCreate],
    db: AsyncSession = Depends(get_db),
):
    return unwrap_or_http(await insert_employees(db, [e.model_dump() for e in employees]))


@router.post("/locations/", response_model=list[StoreLocationCreate], status_code=201)
async def create_locations(
    locations: list[StoreLocationCreate],
    db: AsyncSession = Depends(get_db),
):
    return unwrap_or_http(await insert_store_locations(db, [loc.model_dump() for loc in locations]))


@router.post("/employees/{employee_id}/locations", status_code=201)
async def assign_location(
    employee_id: int,
    assignment: LocationAssignment,
    db: AsyncSession = Depends(get_db),
):
    result = await assign_employee_locations(
        db, [{"employee_id": employee_id, "location_id": assignment.location_id}]
    )
    return unwrap_or_http(result)[0]
