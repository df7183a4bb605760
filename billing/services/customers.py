# billing/services/customers.py

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from billing.db.schema import customers, invoices
from billing.errors import ConflictError, NotFoundError, ValidationError
from billing.services.fields import supplied

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ("customer_name", "customer_address", "customer_phone", "customer_email")


def _fetch_customer(conn, customer_id: int):
    row = conn.execute(
        select(customers).where(customers.c.customer_id == customer_id)
    ).mappings().first()
    return dict(row) if row is not None else None


def customer_exists(conn, customer_id) -> bool:
    stmt = select(customers.c.customer_id).where(customers.c.customer_id == customer_id)
    return conn.execute(stmt).first() is not None


def list_customers(engine: Engine) -> List[dict]:
    with engine.connect() as conn:
        rows = conn.execute(
            select(customers).order_by(customers.c.customer_id)
        ).mappings().all()
    return [dict(row) for row in rows]


def get_customer(engine: Engine, customer_id: int) -> dict:
    with engine.connect() as conn:
        record = _fetch_customer(conn, customer_id)
    if record is None:
        raise NotFoundError("Customer not found")
    return record


def create_customer(engine: Engine, data: dict) -> dict:
    values = {name: data.get(name) for name in CUSTOMER_FIELDS}

    with engine.begin() as conn:
        result = conn.execute(customers.insert().values(**values))
        customer_id = result.inserted_primary_key[0]
        record = _fetch_customer(conn, customer_id)

    logger.info("Created customer %s", customer_id)
    return record


def update_customer(engine: Engine, customer_id: int, data: dict) -> dict:
    changes = supplied(data, CUSTOMER_FIELDS)

    with engine.begin() as conn:
        if not customer_exists(conn, customer_id):
            raise NotFoundError("Customer not found")
        if not changes:
            raise ValidationError("No fields to update")

        conn.execute(
            customers.update()
            .where(customers.c.customer_id == customer_id)
            .values(**changes, updated_at=func.now())
        )
        record = _fetch_customer(conn, customer_id)

    logger.info("Updated customer %s (%s)", customer_id, ", ".join(sorted(changes)))
    return record


def delete_customer(engine: Engine, customer_id: int) -> None:
    with engine.begin() as conn:
        if not customer_exists(conn, customer_id):
            raise NotFoundError("Customer not found")

        n_invoices = conn.execute(
            select(func.count())
            .select_from(invoices)
            .where(invoices.c.customer_id == customer_id)
        ).scalar_one()
        if n_invoices > 0:
            logger.warning(
                "Refused to delete customer %s: %s invoice(s) still reference it",
                customer_id,
                n_invoices,
            )
            raise ConflictError(
                "Cannot delete customer with related invoices. Delete invoices first."
            )

        conn.execute(customers.delete().where(customers.c.customer_id == customer_id))

    logger.info("Deleted customer %s", customer_id)
