# billing/models/invoices.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class InvoiceIn(BaseModel):
    customer_id: Optional[int] = None
    billing_period: Optional[str] = None
    invoice_amount: Optional[Decimal] = None
    amount_paid: Optional[Decimal] = None


class InvoiceOut(BaseModel):
    invoice_id: str
    customer_id: int
    billing_period: str
    invoice_amount: Decimal
    amount_paid: Decimal
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: InvoiceOut


class InvoiceListResponse(BaseModel):
    success: bool = True
    data: List[InvoiceOut]
    count: int
