"""Utility functions for TVA Schedule Audit."""

from tva_audit.utils.time_utils import (
    format_duration,
    format_hours,
    format_minutes,
    format_timestamp,
    parse_timestamp,
)

__all__ = [
    "format_duration",
    "format_hours",
    "format_minutes",
    "format_timestamp",
    "parse_timestamp",
]
