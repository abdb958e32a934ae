"""
Value Coercion

Turns loosely-typed spreadsheet / JSON cell values into ints, amounts and
timestamps. Every helper is total: unparseable input yields None (or the
current instant for timestamps), never an exception.
"""

import math
import re
from datetime import date, datetime, time, timezone

from dateutil import parser as date_parser


# Anything that cannot be part of an amount ("€", spaces, letters)
_NON_AMOUNT_CHARS = re.compile(r"[^0-9,.\-]")
# "1.234,56" / "12,60": comma followed by exactly two trailing digits
_DECIMAL_COMMA = re.compile(r",\d{2}$")
# "12,500": comma before exactly three trailing digits groups thousands
_THOUSANDS_COMMA = re.compile(r",\d{3}$")

# Range of the Int64 pieces column
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


# =============================================================================
# NUMBERS
# =============================================================================

def _finite(value) -> float | None:
    try:
        number = float(value)
    except OverflowError:
        # ints past the float range
        return None
    return number if math.isfinite(number) else None


def _parse_float(text: str) -> float | None:
    if not text:
        return None
    try:
        return _finite(text)
    except ValueError:
        return None


def to_number(value) -> float | None:
    """Parse a number, treating comma as the decimal separator."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(value)
    return _parse_float(str(value).strip().replace(",", "."))


def to_int(value) -> int | None:
    """
    Parse a number (comma = decimal separator) and round half up to an int.

    Examples:
        "3"   -> 3
        "2,5" -> 3
        "abc" -> None
    """
    number = to_number(value)
    if number is None:
        return None
    rounded = int(math.floor(number + 0.5))
    if not INT64_MIN <= rounded <= INT64_MAX:
        return None
    return rounded


def to_money(value) -> float | None:
    """
    Parse a currency amount and round to two decimals.

    Every character other than digits, comma, period and minus is stripped.
    A comma followed by exactly two trailing digits is the decimal separator
    ("1.234,56" -> 1234.56); when both separators appear otherwise, commas
    group thousands ("1,234.56" -> 1234.56). A single comma followed by one
    digit is decimal ("1,5" -> 1.5); a comma before a three-digit group, or
    repeated commas, group thousands ("12,500" -> 12500).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = _finite(value)
        return None if number is None else round(number, 2)

    text = _NON_AMOUNT_CHARS.sub("", str(value))
    if _DECIMAL_COMMA.search(text):
        whole, cents = text.rsplit(",", 1)
        text = whole.replace(".", "").replace(",", "") + "." + cents
    elif "," in text and "." in text:
        text = text.replace(",", "")
    elif text.count(",") == 1 and not _THOUSANDS_COMMA.search(text):
        text = text.replace(",", ".")
    else:
        text = text.replace(",", "")

    number = _parse_float(text)
    return None if number is None else round(number, 2)


# =============================================================================
# TIMESTAMPS
# =============================================================================

def format_timestamp(dt: datetime) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2025-03-01T08:30:00.000Z."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        text = str(value).strip()
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            # Spanish exports write 15/01/2025
            dt = date_parser.parse(text, dayfirst=True)

    if dt.tzinfo is None:
        # assume UTC if no tz given
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_timestamp(value, now: datetime | None = None) -> str:
    """
    Normalize a date-like value to ISO-8601 UTC text.

    Invalid or missing values fall back to `now` (the current instant
    when not given).
    """
    try:
        if value is None:
            raise ValueError("missing date")
        return format_timestamp(_parse_datetime(value))
    except (ValueError, TypeError, OverflowError, OSError):
        return format_timestamp(now or datetime.now(timezone.utc))
