# billing/services/invoices.py
"""
Invoice rules.

An invoice's `amount_paid` is written directly here and indirectly by the
transaction service. Direct writes must keep 0 <= amount_paid <= invoice_amount.
"""

import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from billing.db.schema import customers, invoices, transactions
from billing.errors import (
    ConflictError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from billing.services.customers import customer_exists
from billing.services.fields import (
    is_missing,
    new_identifier,
    supplied,
    to_decimal,
    to_int,
)

logger = logging.getLogger(__name__)

INVOICE_FIELDS = ("customer_id", "billing_period", "invoice_amount", "amount_paid")
REQUIRED_FIELDS = ("customer_id", "billing_period", "invoice_amount")


def _invoice_select():
    return select(
        invoices,
        customers.c.customer_name,
        customers.c.customer_email,
        customers.c.customer_phone,
    ).select_from(invoices.outerjoin(customers))


def _fetch_invoice(conn, invoice_id: str):
    row = conn.execute(
        _invoice_select().where(invoices.c.invoice_id == invoice_id)
    ).mappings().first()
    return dict(row) if row is not None else None


def invoice_exists(conn, invoice_id) -> bool:
    stmt = select(invoices.c.invoice_id).where(invoices.c.invoice_id == invoice_id)
    return conn.execute(stmt).first() is not None


def check_amounts(invoice_amount: Decimal, amount_paid: Decimal) -> None:
    if invoice_amount <= 0:
        raise ValidationError("Invoice amount must be greater than 0")
    if amount_paid < 0:
        raise ValidationError("Amount paid cannot be negative")
    if amount_paid > invoice_amount:
        raise ValidationError("Amount paid cannot exceed invoice amount")


def _normalise(changes: dict) -> dict:
    out = dict(changes)
    if "customer_id" in out:
        out["customer_id"] = to_int(out["customer_id"], "customer_id")
    if "billing_period" in out:
        out["billing_period"] = str(out["billing_period"]).strip()
    for name in ("invoice_amount", "amount_paid"):
        if name in out:
            out[name] = to_decimal(out[name], name)
    return out


def list_invoices(engine: Engine) -> List[dict]:
    with engine.connect() as conn:
        rows = conn.execute(
            _invoice_select().order_by(invoices.c.invoice_id)
        ).mappings().all()
    return [dict(row) for row in rows]


def list_invoices_by_customer(engine: Engine, customer_id: int) -> List[dict]:
    with engine.connect() as conn:
        rows = conn.execute(
            _invoice_select()
            .where(invoices.c.customer_id == customer_id)
            .order_by(invoices.c.billing_period.desc())
        ).mappings().all()
    return [dict(row) for row in rows]


def get_invoice(engine: Engine, invoice_id: str) -> dict:
    with engine.connect() as conn:
        record = _fetch_invoice(conn, invoice_id)
    if record is None:
        raise NotFoundError("Invoice not found")
    return record


def create_invoice(engine: Engine, data: dict) -> dict:
    if any(is_missing(data.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError(
            "Missing required fields: customer_id, billing_period, invoice_amount"
        )

    values = _normalise(supplied(data, INVOICE_FIELDS))
    values.setdefault("amount_paid", Decimal("0"))
    check_amounts(values["invoice_amount"], values["amount_paid"])

    with engine.begin() as conn:
        if not customer_exists(conn, values["customer_id"]):
            raise ReferenceNotFoundError("Customer not found")

        invoice_id = new_identifier(conn, invoices.c.invoice_id, "INV")
        conn.execute(invoices.insert().values(invoice_id=invoice_id, **values))
        record = _fetch_invoice(conn, invoice_id)

    logger.info(
        "Created invoice %s for customer %s (amount=%s, paid=%s)",
        invoice_id,
        values["customer_id"],
        values["invoice_amount"],
        values["amount_paid"],
    )
    return record


def update_invoice(engine: Engine, invoice_id: str, data: dict) -> dict:
    """
    Partial update. Amount rules are checked against the stored record with
    the supplied values merged over it.
    """
    with engine.begin() as conn:
        current = conn.execute(
            select(invoices).where(invoices.c.invoice_id == invoice_id)
        ).mappings().first()
        if current is None:
            raise NotFoundError("Invoice not found")

        changes = _normalise(supplied(data, INVOICE_FIELDS))
        if not changes:
            raise ValidationError("No fields to update")

        # Amount rules apply only when an amount is being edited
        if "invoice_amount" in changes or "amount_paid" in changes:
            check_amounts(
                changes.get("invoice_amount", current["invoice_amount"]),
                changes.get("amount_paid", current["amount_paid"]),
            )

        if "customer_id" in changes and not customer_exists(conn, changes["customer_id"]):
            raise ValidationError("Customer not found")

        conn.execute(
            invoices.update()
            .where(invoices.c.invoice_id == invoice_id)
            .values(**changes, updated_at=func.now())
        )
        record = _fetch_invoice(conn, invoice_id)

    logger.info("Updated invoice %s (%s)", invoice_id, ", ".join(sorted(changes)))
    return record


def delete_invoice(engine: Engine, invoice_id: str) -> None:
    with engine.begin() as conn:
        if not invoice_exists(conn, invoice_id):
            raise NotFoundError("Invoice not found")

        n_transactions = conn.execute(
            select(func.count())
            .select_from(transactions)
            .where(transactions.c.invoice_id == invoice_id)
        ).scalar_one()
        if n_transactions > 0:
            logger.warning(
                "Refused to delete invoice %s: %s transaction(s) still reference it",
                invoice_id,
                n_transactions,
            )
            raise ConflictError(
                "Cannot delete invoice with related transactions. Delete transactions first."
            )

        conn.execute(invoices.delete().where(invoices.c.invoice_id == invoice_id))

    logger.info("Deleted invoice %s", invoice_id)


def adjust_amount_paid(conn, invoice_id: str, delta: Decimal) -> None:
    """
    Shift an invoice balance by `delta` on the caller's transaction.

    No upper or lower bound is enforced on this path.
    """
    conn.execute(
        invoices.update()
        .where(invoices.c.invoice_id == invoice_id)
        .values(amount_paid=invoices.c.amount_paid + delta, updated_at=func.now())
    )
    logger.info("Adjusted amount_paid of invoice %s by %s", invoice_id, delta)
