"""Consistent formatting for report amounts, percentages and dates. Never render raw floats."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

# The base-14 PDF fonts have no peso sign
CURRENCY_PREFIX = "PHP"
NOT_AVAILABLE = "N/A"


def format_currency(value: float, precision: int = 2) -> str:
    amount = f"{abs(value):,.{precision}f}"
    if value < 0:
        return f"-{CURRENCY_PREFIX} {amount}"
    return f"{CURRENCY_PREFIX} {amount}"


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_percent(part: float, whole: float) -> str:
    """Whole-number share of ``part`` in ``whole``; "0%" when ``whole`` is zero."""
    if not whole:
        return "0%"
    return f"{round_half_up(part / whole * 100)}%"


def format_progress(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}%"
    return f"{value:.1f}%"


def format_date(value: Optional[Union[date, datetime]], default: str = NOT_AVAILABLE) -> str:
    """Long date, e.g. "March 5, 2024"."""
    if value is None:
        return default
    return f"{value:%B} {value.day}, {value.year}"


def format_datetime(value: Optional[datetime], default: str = NOT_AVAILABLE) -> str:
    if value is None:
        return default
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{format_date(value)} {hour}:{value.minute:02d} {suffix}"


def format_month(value: date) -> str:
    return value.strftime("%b %Y")


def text_or(value: Optional[str], default: str = NOT_AVAILABLE) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default
