# Backoffice/src/backoffice/services/validation.py
"""Field-level checks shared by the order and coupon services.

All checks raise ValidationError before anything is written.
"""

from datetime import date, datetime

from pydantic import BaseModel

from ..errors import ValidationError


def today() -> date:
    return date.today()


def provided_fields(patch: BaseModel) -> dict:
    """Fields the caller actually sent. Explicit nulls count as omitted."""
    return {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}


def check_positive(field: str, value: float) -> None:
    if value <= 0:
        raise ValidationError(f"{field} must be greater than 0")


def check_percentage(value: float) -> None:
    if value < 0 or value > 100:
        raise ValidationError("Discount must be between 0 and 100")


def check_not_past(field: str, value: datetime) -> None:
    """Reject dates before today. Compared by calendar day, so today itself is accepted."""
    if value.date() < today():
        raise ValidationError(f"{field} cannot be in the past")


def is_expired(value: datetime) -> bool:
    return value.date() < today()
