# Backoffice/src/backoffice/errors.py
"""Domain errors raised by the service layer.

Each error carries the HTTP status the API answers with; the mapping is
applied by the exception handler registered in main.py.
"""


class StoreError(Exception):
    """Base class for all expected failures of a back-office operation."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(StoreError):
    status_code = 404


class ConflictError(StoreError):
    status_code = 409


class ValidationError(StoreError):
    """Out-of-range or malformed field value."""

    status_code = 400


class BusinessRuleError(StoreError):
    """The entity exists and the input is well-formed, but its current state forbids the operation."""

    status_code = 400
