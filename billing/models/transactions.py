# billing/models/transactions.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

TRANSACTION_STATUSES = ("Pending", "Completed", "Failed")
PLATFORMS = ("Nequi", "Daviplata")


class TransactionIn(BaseModel):
    invoice_id: Optional[str] = None
    transaction_datetime: Optional[datetime] = None
    transaction_amount: Optional[Decimal] = None
    transaction_status: Optional[str] = None
    transaction_type: Optional[str] = None
    platform: Optional[str] = None


class TransactionOut(BaseModel):
    transaction_id: str
    invoice_id: str
    transaction_datetime: datetime
    transaction_amount: Decimal
    transaction_status: str
    transaction_type: str
    platform: str
    invoice_amount: Optional[Decimal] = None
    amount_paid: Optional[Decimal] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: TransactionOut


class TransactionListResponse(BaseModel):
    success: bool = True
    data: List[TransactionOut]
    count: int
    platform: Optional[str] = None
    status: Optional[str] = None
