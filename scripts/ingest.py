# scripts/ingest.py
"""
Bulk-load customers, invoices and transactions from CSV files.

Rows go through the same services as the API, so every validation rule and
balance adjustment applies. Files reference each other by natural keys since
ids are assigned on insert:

  customers.csv     customer_name, customer_address, customer_phone, customer_email
  invoices.csv      invoice_ref, customer_name, billing_period, invoice_amount, amount_paid
  transactions.csv  invoice_ref, transaction_datetime, transaction_amount,
                    transaction_status, transaction_type, platform

Usage:
    python -m scripts.ingest [data_dir]
"""

import csv
import logging
import os
import sys

from sqlalchemy.engine import Engine

from billing.db.engine import get_engine
from billing.errors import LedgerError
from billing.services.customers import create_customer
from billing.services.invoices import create_invoice
from billing.services.transactions import create_transaction

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

DATA_DIR = "data"
MAX_ERROR_EXAMPLES = 5


# ---- Helpers ----

def clean(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def read_rows(path: str):
    if not os.path.exists(path):
        logger.warning("Skipping missing file %s", path)
        return []
    with open(path, newline="") as f:
        return [{key: clean(val) for key, val in row.items()} for row in csv.DictReader(f)]


class LoadStats:
    def __init__(self):
        self.n_rows = 0
        self.n_loaded = 0
        self.n_errors = 0
        self.error_examples = []

    def record_error(self, source: str, row_number: int, error: Exception):
        self.n_errors += 1
        if len(self.error_examples) < MAX_ERROR_EXAMPLES:
            self.error_examples.append(
                {"source": source, "row_number": row_number, "error": str(error)}
            )


def load_customers(engine: Engine, rows, stats: LoadStats) -> dict:
    """Returns customer_name -> customer_id for the rows that loaded."""
    ids_by_name = {}
    for row_number, row in enumerate(rows, start=1):
        stats.n_rows += 1
        try:
            record = create_customer(engine, row)
        except LedgerError as e:
            stats.record_error("customers", row_number, e)
            continue
        stats.n_loaded += 1
        if record["customer_name"]:
            ids_by_name[record["customer_name"]] = record["customer_id"]
    return ids_by_name


def load_invoices(engine: Engine, rows, customer_ids: dict, stats: LoadStats) -> dict:
    """Returns invoice_ref -> generated invoice_id."""
    ids_by_ref = {}
    for row_number, row in enumerate(rows, start=1):
        stats.n_rows += 1
        payload = dict(row)
        payload["customer_id"] = customer_ids.get(row.get("customer_name"))
        try:
            record = create_invoice(engine, payload)
        except LedgerError as e:
            stats.record_error("invoices", row_number, e)
            continue
        stats.n_loaded += 1
        if row.get("invoice_ref"):
            ids_by_ref[row["invoice_ref"]] = record["invoice_id"]
    return ids_by_ref


def load_transactions(engine: Engine, rows, invoice_ids: dict, stats: LoadStats) -> None:
    for row_number, row in enumerate(rows, start=1):
        stats.n_rows += 1
        payload = dict(row)
        payload["invoice_id"] = invoice_ids.get(row.get("invoice_ref"))
        try:
            create_transaction(engine, payload)
        except LedgerError as e:
            stats.record_error("transactions", row_number, e)
            continue
        stats.n_loaded += 1


def load_directory(engine: Engine, data_dir: str = DATA_DIR) -> LoadStats:
    stats = LoadStats()
    customer_ids = load_customers(
        engine, read_rows(os.path.join(data_dir, "customers.csv")), stats
    )
    invoice_ids = load_invoices(
        engine, read_rows(os.path.join(data_dir, "invoices.csv")), customer_ids, stats
    )
    load_transactions(
        engine, read_rows(os.path.join(data_dir, "transactions.csv")), invoice_ids, stats
    )
    return stats


def main():
    data_dir = sys.argv[1] if len(sys.argv) > 1 else DATA_DIR
    stats = load_directory(get_engine(), data_dir)

    logger.info(f"Total CSV rows read:   {stats.n_rows}")
    logger.info(f"Rows loaded:           {stats.n_loaded}")
    logger.info(f"Rows with errors:      {stats.n_errors}")

    if stats.error_examples:
        logger.warning("Example errors:")
        for ex in stats.error_examples:
            logger.warning("%s row %s: %s", ex["source"], ex["row_number"], ex["error"])


if __name__ == "__main__":
    main()
