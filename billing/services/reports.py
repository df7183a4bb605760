# billing/services/reports.py
"""
Read-only aggregate views over customers, invoices and transactions.
"""

from decimal import Decimal
from typing import List

from sqlalchemy import Numeric, cast, func, select
from sqlalchemy.engine import Engine

from billing.db.schema import customers, invoices, transactions

ZERO = Decimal("0")


def total_paid_by_customer(engine: Engine) -> List[dict]:
    """
    Invoice totals per customer; customers without invoices report zeros.
    """
    total_invoiced = func.coalesce(func.sum(invoices.c.invoice_amount), 0)
    total_paid = func.coalesce(func.sum(invoices.c.amount_paid), 0)

    stmt = (
        select(
            customers.c.customer_id,
            customers.c.customer_name,
            customers.c.customer_email,
            func.count(invoices.c.invoice_id).label("total_invoices"),
            total_invoiced.label("total_invoiced"),
            total_paid.label("total_paid"),
            (total_invoiced - total_paid).label("total_pending"),
        )
        .select_from(customers.outerjoin(invoices))
        .group_by(
            customers.c.customer_id,
            customers.c.customer_name,
            customers.c.customer_email,
        )
        .order_by(total_paid.desc(), customers.c.customer_id)
    )

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    return [dict(row) for row in rows]


def pending_invoices(engine: Engine) -> List[dict]:
    pending_amount = invoices.c.invoice_amount - invoices.c.amount_paid

    stmt = (
        select(
            invoices.c.invoice_id,
            invoices.c.billing_period,
            invoices.c.invoice_amount,
            invoices.c.amount_paid,
            pending_amount.label("pending_amount"),
            customers.c.customer_id,
            customers.c.customer_name,
            customers.c.customer_email,
            customers.c.customer_phone,
            func.count(transactions.c.transaction_id).label("transaction_count"),
            func.max(transactions.c.transaction_datetime).label("last_transaction_date"),
        )
        .select_from(invoices.join(customers).outerjoin(transactions))
        .where(invoices.c.amount_paid < invoices.c.invoice_amount)
        .group_by(
            invoices.c.invoice_id,
            invoices.c.billing_period,
            invoices.c.invoice_amount,
            invoices.c.amount_paid,
            customers.c.customer_id,
            customers.c.customer_name,
            customers.c.customer_email,
            customers.c.customer_phone,
        )
        .order_by(pending_amount.desc(), invoices.c.invoice_id)
    )

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    return [dict(row) for row in rows]


def transactions_by_platform(engine: Engine, platform: str) -> List[dict]:
    """
    Transactions made through `platform`; an unknown platform just matches nothing.
    """
    stmt = (
        select(
            transactions.c.transaction_id,
            transactions.c.transaction_datetime,
            transactions.c.transaction_amount,
            transactions.c.transaction_status,
            transactions.c.transaction_type,
            transactions.c.platform,
            invoices.c.invoice_id,
            invoices.c.billing_period,
            invoices.c.invoice_amount,
            customers.c.customer_name,
            customers.c.customer_email,
        )
        .select_from(transactions.join(invoices).join(customers))
        .where(transactions.c.platform == platform)
        .order_by(transactions.c.transaction_datetime.desc())
    )

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    return [dict(row) for row in rows]


def financial_summary(engine: Engine) -> dict:
    """
    Returns {"summary": {...}, "platforms": [...], "statuses": [...]}.

    Invoice sums are taken over the invoices table on its own so that an
    invoice with several transactions is counted once.
    """
    invoice_stmt = select(
        func.count(invoices.c.invoice_id).label("total_invoices"),
        func.coalesce(func.sum(invoices.c.invoice_amount), 0).label("total_invoiced"),
        func.coalesce(func.sum(invoices.c.amount_paid), 0).label("total_paid"),
        cast(func.avg(invoices.c.invoice_amount), Numeric(12, 2)).label(
            "average_invoice_amount"
        ),
    ).select_from(invoices.join(customers))

    platform_total = func.coalesce(func.sum(transactions.c.transaction_amount), 0)
    platform_stmt = (
        select(
            transactions.c.platform,
            func.count().label("transaction_count"),
            platform_total.label("total_amount"),
            cast(func.avg(transactions.c.transaction_amount), Numeric(12, 2)).label(
                "average_amount"
            ),
        )
        .group_by(transactions.c.platform)
        .order_by(platform_total.desc(), transactions.c.platform)
    )

    status_count = func.count()
    status_stmt = (
        select(
            transactions.c.transaction_status,
            status_count.label("count"),
            func.coalesce(func.sum(transactions.c.transaction_amount), 0).label(
                "total_amount"
            ),
        )
        .group_by(transactions.c.transaction_status)
        .order_by(status_count.desc(), transactions.c.transaction_status)
    )

    with engine.connect() as conn:
        total_customers = conn.execute(
            select(func.count()).select_from(customers)
        ).scalar_one()
        total_transactions = conn.execute(
            select(func.count()).select_from(transactions)
        ).scalar_one()
        invoice_row = conn.execute(invoice_stmt).mappings().one()
        platforms = [dict(row) for row in conn.execute(platform_stmt).mappings().all()]
        statuses = [dict(row) for row in conn.execute(status_stmt).mappings().all()]

    total_invoiced = Decimal(invoice_row["total_invoiced"] or ZERO)
    total_paid = Decimal(invoice_row["total_paid"] or ZERO)

    summary = {
        "total_customers": total_customers,
        "total_invoices": invoice_row["total_invoices"],
        "total_transactions": total_transactions,
        "total_invoiced": total_invoiced,
        "total_paid": total_paid,
        "total_pending": total_invoiced - total_paid,
        "average_invoice_amount": invoice_row["average_invoice_amount"],
    }

    return {"summary": summary, "platforms": platforms, "statuses": statuses}
