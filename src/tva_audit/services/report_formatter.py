"""Report Formatter - renders analysis results as tab-separated lines.

Only errors and files with wrong events produce a line; clean files are
suppressed (their slot is None) so callers can still count them.
"""

from collections.abc import Iterable, Iterator
from typing import Optional

from tva_audit.models import AnalysisResult
from tva_audit.utils.time_utils import (
    format_duration,
    format_hours,
    format_minutes,
    format_timestamp,
)

HEADER_FIELDS = [
    "File #",
    "File",
    "Date",
    "ScheduleHrs",
    "Wrong Events",
    "Of which have reruns",
    "Age of wrong event",
    "Mins since last file",
    "Service Id",
    "Service Name",
]

SEPARATOR = "\t"


class ReportFormatter:
    """Formats AnalysisResults into the audit report."""

    def header(self) -> str:
        return SEPARATOR.join(HEADER_FIELDS)

    def format_result(self, result: AnalysisResult, index: int) -> Optional[str]:
        """Format one result.

        Args:
            result: Result to render
            index: 1-based position of the file in the run

        Returns:
            Report line, or None when the result is clean
        """
        if result.is_error:
            return self._format_error(result, index)
        if result.wrong_events:
            return self._format_wrong(result, index)
        return None

    def format_lines(self, results: Iterable[AnalysisResult]) -> Iterator[Optional[str]]:
        """Yield the header, then one entry (line or None) per result."""
        yield self.header()
        for index, result in enumerate(results, start=1):
            yield self.format_result(result, index)

    def _format_wrong(self, result: AnalysisResult, index: int) -> str:
        fields = [
            str(index),
            result.file_name,
            format_timestamp(result.date),
            format_hours(result.schedule_duration),
            str(len(result.wrong_events)),
            str(result.rerun_wrong_event_count),
            format_duration(result.min_wrong_event_age),
            format_minutes(result.minutes_since_previous_file),
            result.service_id,
            result.service_name,
        ]
        return SEPARATOR.join(fields)

    def _format_error(self, result: AnalysisResult, index: int) -> str:
        fields = [str(index), result.file_name, format_timestamp(result.date)]
        fields += [""] * 6
        fields.append(_single_line(result.service_name))
        return SEPARATOR.join(fields)


def _single_line(text: str) -> str:
    # Error messages must not break the row/column layout
    return " ".join(text.replace(SEPARATOR, " ").splitlines())
