# billing/services/transactions.py
"""
Transaction rules and the balance compensation they drive.

A Completed transaction contributes its amount to its invoice's
`amount_paid`. Every write that changes that contribution (create, delete,
and updates touching status, amount or invoice) adjusts the balance inside
the same database transaction as the row write.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from billing.db.schema import customers, invoices, transactions
from billing.errors import NotFoundError, ReferenceNotFoundError, ValidationError
from billing.models.transactions import PLATFORMS, TRANSACTION_STATUSES
from billing.services.fields import (
    is_missing,
    new_identifier,
    supplied,
    to_datetime,
    to_decimal,
)
from billing.services.invoices import adjust_amount_paid, invoice_exists

logger = logging.getLogger(__name__)

COMPLETED = "Completed"

TRANSACTION_FIELDS = (
    "invoice_id",
    "transaction_datetime",
    "transaction_amount",
    "transaction_status",
    "transaction_type",
    "platform",
)


def _transaction_select():
    return select(
        transactions,
        invoices.c.invoice_amount,
        invoices.c.amount_paid,
        customers.c.customer_id,
        customers.c.customer_name,
        customers.c.customer_email,
    ).select_from(
        transactions.outerjoin(invoices).outerjoin(
            customers, invoices.c.customer_id == customers.c.customer_id
        )
    )


def _fetch_transaction(conn, transaction_id: str):
    row = conn.execute(
        _transaction_select().where(transactions.c.transaction_id == transaction_id)
    ).mappings().first()
    return dict(row) if row is not None else None


def _normalise(changes: dict) -> dict:
    out = dict(changes)
    if "invoice_id" in out:
        out["invoice_id"] = str(out["invoice_id"]).strip()
    if "transaction_datetime" in out:
        out["transaction_datetime"] = to_datetime(
            out["transaction_datetime"], "transaction_datetime"
        )
    if "transaction_amount" in out:
        out["transaction_amount"] = to_decimal(
            out["transaction_amount"], "transaction_amount"
        )
        if out["transaction_amount"] <= 0:
            raise ValidationError("Transaction amount must be greater than 0")
    if "transaction_status" in out and out["transaction_status"] not in TRANSACTION_STATUSES:
        raise ValidationError(
            "Invalid transaction status. Must be one of: " + ", ".join(TRANSACTION_STATUSES)
        )
    if "platform" in out and out["platform"] not in PLATFORMS:
        raise ValidationError("Invalid platform. Must be one of: " + ", ".join(PLATFORMS))
    return out


def _list(engine: Engine, *criteria) -> List[dict]:
    stmt = _transaction_select().where(*criteria).order_by(
        transactions.c.transaction_datetime.desc()
    )
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [dict(row) for row in rows]


def list_transactions(engine: Engine) -> List[dict]:
    return _list(engine)


def list_transactions_by_platform(engine: Engine, platform: str) -> List[dict]:
    return _list(engine, transactions.c.platform == platform)


def list_transactions_by_status(engine: Engine, status: str) -> List[dict]:
    return _list(engine, transactions.c.transaction_status == status)


def get_transaction(engine: Engine, transaction_id: str) -> dict:
    with engine.connect() as conn:
        record = _fetch_transaction(conn, transaction_id)
    if record is None:
        raise NotFoundError("Transaction not found")
    return record


def create_transaction(engine: Engine, data: dict) -> dict:
    if any(is_missing(data.get(name)) for name in TRANSACTION_FIELDS):
        raise ValidationError("Missing required fields: " + ", ".join(TRANSACTION_FIELDS))

    values = _normalise(supplied(data, TRANSACTION_FIELDS))

    with engine.begin() as conn:
        if not invoice_exists(conn, values["invoice_id"]):
            raise ReferenceNotFoundError("Invoice not found")

        transaction_id = new_identifier(conn, transactions.c.transaction_id, "TXN")
        conn.execute(transactions.insert().values(transaction_id=transaction_id, **values))

        if values["transaction_status"] == COMPLETED:
            adjust_amount_paid(conn, values["invoice_id"], values["transaction_amount"])

        record = _fetch_transaction(conn, transaction_id)

    logger.info(
        "Created transaction %s on invoice %s (%s %s via %s)",
        transaction_id,
        values["invoice_id"],
        values["transaction_status"],
        values["transaction_amount"],
        values["platform"],
    )
    return record


def update_transaction(engine: Engine, transaction_id: str, data: dict) -> dict:
    with engine.begin() as conn:
        current = conn.execute(
            select(transactions).where(transactions.c.transaction_id == transaction_id)
        ).mappings().first()
        if current is None:
            raise NotFoundError("Transaction not found")

        changes = _normalise(supplied(data, TRANSACTION_FIELDS))
        if not changes:
            raise ValidationError("No fields to update")

        if "invoice_id" in changes and not invoice_exists(conn, changes["invoice_id"]):
            raise ReferenceNotFoundError("Invoice not found")

        merged = {**current, **changes}

        conn.execute(
            transactions.update()
            .where(transactions.c.transaction_id == transaction_id)
            .values(**changes, updated_at=func.now())
        )

        balance_fields = ("invoice_id", "transaction_amount", "transaction_status")
        if any(merged[name] != current[name] for name in balance_fields):
            if current["transaction_status"] == COMPLETED:
                adjust_amount_paid(
                    conn, current["invoice_id"], -current["transaction_amount"]
                )
            if merged["transaction_status"] == COMPLETED:
                adjust_amount_paid(
                    conn, merged["invoice_id"], merged["transaction_amount"]
                )

        record = _fetch_transaction(conn, transaction_id)

    logger.info("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(changes)))
    return record


def delete_transaction(engine: Engine, transaction_id: str) -> None:
    with engine.begin() as conn:
        current = conn.execute(
            select(transactions).where(transactions.c.transaction_id == transaction_id)
        ).mappings().first()
        if current is None:
            raise NotFoundError("Transaction not found")

        if current["transaction_status"] == COMPLETED:
            adjust_amount_paid(conn, current["invoice_id"], -current["transaction_amount"])

        conn.execute(
            transactions.delete().where(transactions.c.transaction_id == transaction_id)
        )

    logger.info("Deleted transaction %s", transaction_id)
