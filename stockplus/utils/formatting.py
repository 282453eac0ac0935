"""
Display formatting helpers shared by templates and report exports.
Amounts are Indonesian Rupiah without decimals, e.g. "Rp 1.500.000".
"""

from datetime import date, datetime


def format_currency(amount) -> str:
    if amount is None:
        amount = 0
    value = int(round(float(amount)))
    grouped = f"{abs(value):,}".replace(",", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}Rp {grouped}"


def format_number(value) -> str:
    return f"{int(value or 0):,}".replace(",", ".")


def format_datetime(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime("%d/%m/%Y %H:%M")


def format_date(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, (datetime, date)):
        return value.strftime("%d/%m/%Y")
    return str(value)


def format_percentage(part, total) -> str:
    # One decimal place; "0" when there is nothing to divide by
    if not total:
        return "0"
    return f"{(part / total) * 100:.1f}"
