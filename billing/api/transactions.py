# billing/api/transactions.py

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from billing.db.engine import get_engine
from billing.models.common import ERROR_RESPONSES, MessageResponse
from billing.models.transactions import (
    TransactionIn,
    TransactionListResponse,
    TransactionResponse,
)
from billing.services import transactions as service

router = APIRouter(prefix="/transactions", tags=["transactions"], responses=ERROR_RESPONSES)


@router.get("/", response_model=TransactionListResponse)
def list_transactions(engine: Engine = Depends(get_engine)):
    """
    All transactions, newest first, with invoice balance and customer.
    """
    rows = service.list_transactions(engine)
    return {"success": True, "data": rows, "count": len(rows)}


@router.get("/platform/{platform}", response_model=TransactionListResponse)
def list_platform_transactions(platform: str, engine: Engine = Depends(get_engine)):
    rows = service.list_transactions_by_platform(engine, platform)
    return {"success": True, "data": rows, "count": len(rows), "platform": platform}


@router.get("/status/{status}", response_model=TransactionListResponse)
def list_status_transactions(status: str, engine: Engine = Depends(get_engine)):
    rows = service.list_transactions_by_status(engine, status)
    return {"success": True, "data": rows, "count": len(rows), "status": status}


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, engine: Engine = Depends(get_engine)):
    return {"success": True, "data": service.get_transaction(engine, transaction_id)}


@router.post("/", response_model=TransactionResponse, status_code=201)
def create_transaction(payload: TransactionIn, engine: Engine = Depends(get_engine)):
    """
    Record a payment. A Completed payment is credited to its invoice.
    """
    record = service.create_transaction(engine, payload.model_dump())
    return {"success": True, "message": "Transaction created successfully", "data": record}


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    payload: TransactionIn,
    engine: Engine = Depends(get_engine),
):
    record = service.update_transaction(
        engine, transaction_id, payload.model_dump(exclude_none=True)
    )
    return {"success": True, "message": "Transaction updated successfully", "data": record}


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(transaction_id: str, engine: Engine = Depends(get_engine)):
    """
    Delete a transaction, withdrawing its credit if it was Completed.
    """
    service.delete_transaction(engine, transaction_id)
    return {"success": True, "message": "Transaction deleted successfully"}
