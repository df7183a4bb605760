# billing/services/fields.py
"""
Input coercion shared by the ledger services.

Payloads reach the services either as pydantic-parsed API bodies or as raw
strings from the CSV ingest, so every field is normalised here before any rule
is checked.
"""

import random
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy import select

from billing.errors import ValidationError

ID_ATTEMPTS = 10


def is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def supplied(data: dict, fields) -> dict:
    """Keep only the recognised fields that carry a value."""
    return {name: data[name] for name in fields if name in data and not is_missing(data[name])}


def to_decimal(value, name: str) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{name} must be a number")
    # NaN and Infinity parse but cannot be compared or stored
    if not result.is_finite():
        raise ValidationError(f"{name} must be a number")
    return result


def to_int(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def to_datetime(value, name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{name} must be an ISO 8601 datetime")


def new_identifier(conn, column, prefix: str) -> str:
    """
    Allocate a `<prefix>-<epoch millis>-<0..999>` id not yet present in `column`.

    The lookup runs on the caller's connection, inside the same transaction
    as the insert that uses the id.
    """
    for _ in range(ID_ATTEMPTS):
        candidate = f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999)}"
        taken = conn.execute(select(column).where(column == candidate)).first()
        if taken is None:
            return candidate
    raise RuntimeError(f"Could not allocate a unique {prefix} identifier")
