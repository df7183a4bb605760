# billing/api/customers.py

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from billing.db.engine import get_engine
from billing.models.common import ERROR_RESPONSES, MessageResponse
from billing.models.customers import (
    CustomerIn,
    CustomerListResponse,
    CustomerResponse,
)
from billing.services import customers as service

router = APIRouter(prefix="/customers", tags=["customers"], responses=ERROR_RESPONSES)


@router.get("/", response_model=CustomerListResponse)
def list_customers(engine: Engine = Depends(get_engine)):
    """
    Return all customers ordered by id.
    """
    rows = service.list_customers(engine)
    return {"success": True, "data": rows, "count": len(rows)}


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, engine: Engine = Depends(get_engine)):
    return {"success": True, "data": service.get_customer(engine, customer_id)}


@router.post("/", response_model=CustomerResponse, status_code=201)
def create_customer(payload: CustomerIn, engine: Engine = Depends(get_engine)):
    record = service.create_customer(engine, payload.model_dump())
    return {"success": True, "message": "Customer created successfully", "data": record}


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    payload: CustomerIn,
    engine: Engine = Depends(get_engine),
):
    """
    Partial update: only the supplied fields change.
    """
    record = service.update_customer(engine, customer_id, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Customer updated successfully", "data": record}


@router.delete("/{customer_id}", response_model=MessageResponse)
def delete_customer(customer_id: int, engine: Engine = Depends(get_engine)):
    """
    Delete a customer. Refused while invoices still reference it.
    """
    service.delete_customer(engine, customer_id)
    return {"success": True, "message": "Customer deleted successfully"}
