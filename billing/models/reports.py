# billing/models/reports.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class CustomerTotalsItem(BaseModel):
    customer_id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    total_invoices: int
    total_invoiced: Decimal
    total_paid: Decimal
    total_pending: Decimal


class CustomerTotalsResponse(BaseModel):
    success: bool = True
    count: int
    data: List[CustomerTotalsItem]


class PendingInvoiceItem(BaseModel):
    invoice_id: str
    billing_period: str
    invoice_amount: Decimal
    amount_paid: Decimal
    pending_amount: Decimal
    customer_id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    transaction_count: int
    last_transaction_date: Optional[datetime] = None


class PendingInvoicesResponse(BaseModel):
    success: bool = True
    count: int
    data: List[PendingInvoiceItem]


class PlatformTransactionItem(BaseModel):
    transaction_id: str
    transaction_datetime: datetime
    transaction_amount: Decimal
    transaction_status: str
    transaction_type: str
    platform: str
    invoice_id: str
    billing_period: str
    invoice_amount: Decimal
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None


class PlatformTransactionsResponse(BaseModel):
    success: bool = True
    platform: str
    count: int
    data: List[PlatformTransactionItem]


class SummaryOut(BaseModel):
    total_customers: int
    total_invoices: int
    total_transactions: int
    total_invoiced: Decimal
    total_paid: Decimal
    total_pending: Decimal
    average_invoice_amount: Optional[Decimal] = None


class PlatformBreakdown(BaseModel):
    platform: str
    transaction_count: int
    total_amount: Decimal
    average_amount: Decimal


class StatusBreakdown(BaseModel):
    transaction_status: str
    count: int
    total_amount: Decimal


class FinancialSummaryResponse(BaseModel):
    success: bool = True
    summary: SummaryOut
    platforms: List[PlatformBreakdown]
    statuses: List[StatusBreakdown]
