"""
Wire <-> Display Value Codec.

Pure functions converting between the API representation (integer
minor currency units, ISO-8601 UTC instants) and what a screen shows or
collects (decimal strings, formatted currency, calendar dates).

Rounding of user-typed amounts is round-half-away-from-zero
(``Decimal.ROUND_HALF_UP``): ``"3.505"`` becomes 351 cents and
``"-3.505"`` becomes -351.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation
from typing import Optional, Union

__all__: list[str] = [
    "to_display_amount",
    "to_minor_units",
    "format_currency",
    "to_wire_date",
    "from_wire_date",
    "format_date",
]

_MINOR_PER_MAJOR: Decimal = Decimal(100)
_CURRENCY_SYMBOL: str = "$"
_MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _validate_finite(value: Decimal, name: str) -> None:
    """Raise ``ValueError`` if *value* is NaN or +/-Inf."""
    if value.is_nan() or value.is_infinite():
        raise ValueError(f"{name} must be a finite number, got {value!r}.")


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------

def to_minor_units(amount: Union[str, Decimal, int]) -> int:
    """Convert a decimal display amount to an integer count of minor units.

    Args:
        amount: Display value such as ``"3.50"``.  Surrounding whitespace
                is ignored.

    Returns:
        The amount in cents, rounded half away from zero.

    Raises:
        ValueError: If *amount* is empty, not a number, not finite, or
                    too large to express in minor units.
    """
    try:
        value = Decimal(amount.strip() if isinstance(amount, str) else amount)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a decimal amount: {amount!r}.") from exc

    _validate_finite(value, "amount")
    try:
        minor = (value * _MINOR_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except DecimalException as exc:
        # More digits or a larger exponent than the decimal context holds.
        raise ValueError(f"Amount out of range: {amount!r}.") from exc
    return int(minor)


def to_display_amount(minor_units: int) -> str:
    """Render minor units as a decimal string with two fractional digits.

    ``350`` -> ``"3.50"``.  Inverse of :func:`to_minor_units` for values
    with at most two fractional digits (compared as decimals).
    """
    if isinstance(minor_units, bool) or not isinstance(minor_units, int):
        raise TypeError(f"minor_units must be an int, got {type(minor_units).__name__}.")
    return f"{Decimal(minor_units).scaleb(-2):.2f}"


def format_currency(minor_units: int) -> str:
    """Localized presentation string: ``123456`` -> ``"$1,234.56"``.

    Negative values render as ``"-$3.50"``.  Not meant to be parsed back.
    """
    major = Decimal(minor_units).scaleb(-2)
    sign = "-" if major < 0 else ""
    return f"{sign}{_CURRENCY_SYMBOL}{abs(major):,.2f}"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def to_wire_date(value: date, tz: Optional[tzinfo] = None) -> str:
    """Encode a calendar date as the UTC instant of its local midnight.

    Args:
        value: The date picked by the user.  For a ``datetime`` only the
               date portion is used.
        tz: Zone whose midnight is meant; the system local zone when
            omitted.

    Returns:
        ISO-8601 string with millisecond precision and ``Z`` suffix,
        e.g. ``"2026-10-19T04:00:00.000Z"`` for America/New_York.
    """
    if tz is not None:
        midnight = datetime.combine(value, time.min, tzinfo=tz)
    else:
        midnight = datetime.combine(value, time.min).astimezone()
    instant = midnight.astimezone(timezone.utc)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def from_wire_date(value: Union[str, datetime], tz: Optional[tzinfo] = None) -> date:
    """Decode an ISO-8601 instant into the calendar date seen in *tz*.

    Naive timestamps are taken as UTC.  Only the date survives; callers
    must not rely on time-of-day.

    Raises:
        ValueError: If *value* is not an ISO-8601 timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(tz).date()


def format_date(value: Union[str, date], tz: Optional[tzinfo] = None) -> str:
    """``"Oct 19, 2026"`` for a wire instant, ``datetime`` or ``date``."""
    if isinstance(value, (str, datetime)):
        day = from_wire_date(value, tz)
    else:
        day = value
    return f"{_MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"
