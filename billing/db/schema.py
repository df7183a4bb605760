# billing/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, DateTime, ForeignKey, CheckConstraint, Text, func
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("customer_id", Integer, primary_key=True, autoincrement=True),
    Column("customer_name", String(255)),
    Column("customer_address", Text),
    Column("customer_phone", String(50)),
    Column("customer_email", String(255)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

invoices = Table(
    "invoices",
    metadata,
    Column("invoice_id", String(50), primary_key=True),
    Column("customer_id", Integer, ForeignKey("customers.customer_id"), nullable=False),
    Column("billing_period", String(50), nullable=False),
    Column("invoice_amount", Numeric(12, 2), nullable=False),
    Column("amount_paid", Numeric(12, 2), nullable=False, server_default="0"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("invoice_amount > 0", name="ck_invoices_invoice_amount_pos"),
)

transactions = Table(
    "transactions",
    metadata,
    Column("transaction_id", String(50), primary_key=True),
    Column("invoice_id", String(50), ForeignKey("invoices.invoice_id"), nullable=False),
    Column("transaction_datetime", DateTime, nullable=False),
    Column("transaction_amount", Numeric(12, 2), nullable=False),
    Column("transaction_status", String(20), nullable=False),
    Column("transaction_type", String(50), nullable=False),
    Column("platform", String(20), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("transaction_amount > 0", name="ck_transactions_amount_pos"),
    CheckConstraint(
        "transaction_status IN ('Pending', 'Completed', 'Failed')",
        name="ck_transactions_status",
    ),
    CheckConstraint("platform IN ('Nequi', 'Daviplata')", name="ck_transactions_platform"),
)
