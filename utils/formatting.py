"""
Display formatting helpers.

Amounts travel through the console as integer cents; everything here is
cosmetic and never feeds back into a payload except to_cents().
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

CURRENCY_SYMBOL = "₦"

Number = Union[int, float, Decimal, str]

STATUS_COLORS = {
    # Invoice statuses
    "DRAFT": "default",
    "SENT": "processing",
    "PAID": "success",
    "OVERDUE": "error",
    "CANCELLED": "default",

    # Payout statuses
    "PENDING": "warning",
    "PROCESSING": "processing",
    "COMPLETED": "success",
    "FAILED": "error",

    # Employee statuses
    "ACTIVE": "success",
    "SUSPENDED": "warning",
    "TERMINATED": "error",

    # Expense statuses
    "APPROVED": "success",
    "REJECTED": "error",
    "REIMBURSED": "success",
}


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        value = value.replace(",", "").replace(CURRENCY_SYMBOL, "").strip()
    try:
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e


def format_currency(cents: Optional[int]) -> str:
    """
    Render an amount in cents for display.

    >>> format_currency(197500)
    '₦1,975.00'
    """
    if cents is None:
        cents = 0
    amount = (Decimal(int(cents)) / 100).quantize(Decimal("0.01"))
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def format_thousands(value: Number) -> str:
    """Insert thousands separators into a plain number, keeping its decimals."""
    amount = _to_decimal(value)
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,f}"


def to_cents(amount: Number) -> int:
    """Convert a major-unit amount to integer cents, rounding half up."""
    cents = (_to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a major-unit amount."""
    return Decimal(int(cents)) / 100


def status_color(status: Optional[str]) -> str:
    """Badge color for a record status; unknown statuses get the neutral color."""
    if not status:
        return "default"
    return STATUS_COLORS.get(str(status).upper(), "default")


def format_date(value: Union[str, date, datetime, None], fmt: str = "%b %d, %Y") -> str:
    """Render an ISO string, date or datetime for tables; empty values become '-'."""
    if value in (None, ""):
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime(fmt)


def to_iso_datetime(value: Union[date, datetime]) -> str:
    """
    Serialise a form date the way the API expects it: UTC, milliseconds, 'Z'.

    Plain dates are taken as midnight UTC.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def format_countdown(seconds: int) -> str:
    """Render a countdown as m:ss."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
