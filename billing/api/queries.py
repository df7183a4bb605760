# billing/api/queries.py

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from billing.db.engine import get_engine
from billing.models.common import ErrorResponse
from billing.models.reports import (
    CustomerTotalsResponse,
    FinancialSummaryResponse,
    PendingInvoicesResponse,
    PlatformTransactionsResponse,
)
from billing.services import reports

router = APIRouter(
    prefix="/queries",
    tags=["queries"],
    responses={500: {"model": ErrorResponse}},
)


@router.get("/total-paid-by-customer", response_model=CustomerTotalsResponse)
def total_paid_by_customer(engine: Engine = Depends(get_engine)):
    """
    Invoiced, paid and pending totals for every customer, biggest payer first.
    """
    rows = reports.total_paid_by_customer(engine)
    return {"success": True, "count": len(rows), "data": rows}


@router.get("/pending-invoices", response_model=PendingInvoicesResponse)
def pending_invoices(engine: Engine = Depends(get_engine)):
    """
    Invoices not yet fully paid, largest outstanding balance first.
    """
    rows = reports.pending_invoices(engine)
    return {"success": True, "count": len(rows), "data": rows}


@router.get(
    "/transactions-by-platform/{platform}",
    response_model=PlatformTransactionsResponse,
)
def transactions_by_platform(platform: str, engine: Engine = Depends(get_engine)):
    rows = reports.transactions_by_platform(engine, platform)
    return {"success": True, "platform": platform, "count": len(rows), "data": rows}


@router.get("/financial-summary", response_model=FinancialSummaryResponse)
def financial_summary(engine: Engine = Depends(get_engine)):
    result = reports.financial_summary(engine)
    return {"success": True, **result}
