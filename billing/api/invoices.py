# billing/api/invoices.py

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from billing.db.engine import get_engine
from billing.models.common import ERROR_RESPONSES, MessageResponse
from billing.models.invoices import (
    InvoiceIn,
    InvoiceListResponse,
    InvoiceResponse,
)
from billing.services import invoices as service

router = APIRouter(prefix="/invoices", tags=["invoices"], responses=ERROR_RESPONSES)


@router.get("/", response_model=InvoiceListResponse)
def list_invoices(engine: Engine = Depends(get_engine)):
    """
    All invoices, each with its customer's contact details.
    """
    rows = service.list_invoices(engine)
    return {"success": True, "data": rows, "count": len(rows)}


@router.get("/customer/{customer_id}", response_model=InvoiceListResponse)
def list_customer_invoices(customer_id: int, engine: Engine = Depends(get_engine)):
    """
    Invoices of one customer, latest billing period first.
    """
    rows = service.list_invoices_by_customer(engine, customer_id)
    return {"success": True, "data": rows, "count": len(rows)}


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: str, engine: Engine = Depends(get_engine)):
    return {"success": True, "data": service.get_invoice(engine, invoice_id)}


@router.post("/", response_model=InvoiceResponse, status_code=201)
def create_invoice(payload: InvoiceIn, engine: Engine = Depends(get_engine)):
    record = service.create_invoice(engine, payload.model_dump())
    return {"success": True, "message": "Invoice created successfully", "data": record}


@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: str,
    payload: InvoiceIn,
    engine: Engine = Depends(get_engine),
):
    record = service.update_invoice(engine, invoice_id, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Invoice updated successfully", "data": record}


@router.delete("/{invoice_id}", response_model=MessageResponse)
def delete_invoice(invoice_id: str, engine: Engine = Depends(get_engine)):
    """
    Delete an invoice that has no transactions left.
    """
    service.delete_invoice(engine, invoice_id)
    return {"success": True, "message": "Invoice deleted successfully"}
