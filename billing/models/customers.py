# billing/models/customers.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CustomerIn(BaseModel):
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None


class CustomerOut(BaseModel):
    customer_id: int
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: CustomerOut


class CustomerListResponse(BaseModel):
    success: bool = True
    data: List[CustomerOut]
    count: int
