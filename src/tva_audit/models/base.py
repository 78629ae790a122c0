"""Base model class with common functionality for all audit models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


class AuditModel(BaseModel):
    """Base model class for parsed and derived audit data.

    Instances are immutable once built; each file's results are created
    once and then only read.
    """

    model_config = ConfigDict(
        frozen=True,
        # Reject misspelled fields instead of silently dropping them
        extra="forbid",
    )


def utc_now() -> datetime:
    """Get current time in UTC with timezone awareness.

    Returns:
        Current datetime with UTC timezone
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime has UTC timezone.

    Args:
        dt: Datetime to check/convert

    Returns:
        Datetime with UTC timezone, or None if input is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
