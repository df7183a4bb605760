# billing/errors.py
"""
Error taxonomy for the ledger engine.

Each error carries the HTTP status the API layer answers with; the mapping to
the JSON envelope lives in billing.main.
"""


class LedgerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Missing, out-of-range or non-enumerated input."""

    status_code = 400


class NotFoundError(LedgerError):
    """The addressed resource does not exist."""

    status_code = 404


class ReferenceNotFoundError(NotFoundError):
    """A foreign key in the payload points at nothing."""

    status_code = 400


class ConflictError(LedgerError):
    """Delete blocked by dependent rows."""

    status_code = 400
