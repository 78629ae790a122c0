"""Time-related utility functions."""

import re
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from tva_audit.models.base import ensure_utc


# Round-trip timestamps may carry 7 fractional digits (100ns ticks)
_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """Parse a round-trip formatted absolute timestamp.

    Args:
        value: String like "2014-03-01T12:00:00Z" or
            "2014-03-01T12:00:00.0000000+01:00"

    Returns:
        Timezone-aware UTC datetime; values without an offset are taken as UTC

    Raises:
        ValueError: If the value is not an ISO 8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(r"\1", text)
    return ensure_utc(datetime.fromisoformat(text))


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as "YYYY-MM-DD HH:MM"."""
    return dt.strftime("%Y-%m-%d %H:%M")


def format_duration(td: timedelta) -> str:
    """Format a duration in the general short layout.

    Args:
        td: Duration to format

    Returns:
        String like "0:10:00", "1:2:03:04" (with days) or "-0:00:30.5"
    """
    total_us = td // timedelta(microseconds=1)
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    total_seconds, micros = divmod(total_us, 1_000_000)
    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    text = f"{hours}:{minutes:02d}:{seconds:02d}"
    if days:
        text = f"{days}:{text}"
    if micros:
        text += "." + f"{micros:06d}".rstrip("0")
    return sign + text


def round_half_away(value: float, places: int = 0) -> Decimal:
    """Round to a number of decimal places, halves away from zero."""
    exponent = Decimal(1).scaleb(-places)
    return Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_hours(td: timedelta) -> str:
    """Format a duration as whole hours, e.g. "6 hr"."""
    hours = td.total_seconds() / 3600
    return f"{round_half_away(hours)} hr"


def format_minutes(minutes: float) -> str:
    """Format a minute count with one decimal place, e.g. "12.5"."""
    return str(round_half_away(minutes, 1))
