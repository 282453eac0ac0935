"""
Field parsing shared by the managers. Form posts arrive as strings; the
JSON API and demo seeding pass numbers. Both go through here.
"""

from datetime import datetime, date
import math

from stockplus.buisness.core.exceptions import ValidationError


def require_text(value, label):
    text = (value or '').strip() if isinstance(value, str) or value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def require_choice(value, choices, label):
    if not value:
        raise ValidationError(f"{label} is required")
    if value not in choices:
        raise ValidationError(f"Invalid {label.lower()}: {value}")
    return value


def parse_int(value, label, minimum=None, required=True, default=None):
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{label} is required")
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError
            number = int(value)
        else:
            number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a whole number")
    if minimum is not None and number < minimum:
        if minimum == 1:
            raise ValidationError(f"{label} must be greater than 0")
        raise ValidationError(f"{label} must be at least {minimum}")
    return number


def parse_amount(value, label, required=True, default=None):
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{label} is required")
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        amount = float(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a number")
    if not math.isfinite(amount):
        raise ValidationError(f"{label} must be a number")
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative")
    return amount


def parse_datetime(value, label, default=None):
    """Accepts datetime/date objects or ISO strings ("2024-05-01" or "2024-05-01T08:30")"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} is not a valid date")
