"""Analysis entities - input file handles and per-file audit results."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator

from tva_audit.models.base import AuditModel, ensure_utc
from tva_audit.models.schedule import ScheduleEvent


class CaptureFile(AuditModel):
    """A captured schedule file: display name, capture time and content.

    Content is read on demand from ``path`` unless given in memory.
    """

    name: str
    captured_at: datetime = Field(..., description="Last-modified time of the file (UTC)")
    path: Optional[Path] = None
    content: Optional[bytes] = None

    @field_validator("captured_at")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def _has_source(self) -> "CaptureFile":
        if self.path is None and self.content is None:
            raise ValueError("CaptureFile needs either a path or in-memory content")
        return self

    @classmethod
    def from_path(cls, path: Path) -> "CaptureFile":
        """Build a handle from a file on disk, using its modification time."""
        mtime = path.stat().st_mtime
        return cls(
            name=path.name,
            path=path,
            captured_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
        )

    def read_bytes(self) -> bytes:
        """Return the raw XML content."""
        if self.content is not None:
            return self.content
        return self.path.read_bytes()


class WrongEventInfo(AuditModel):
    """A schedule event that had ended before its file was captured."""

    event: ScheduleEvent
    rerun_count: int = Field(..., ge=0, description="Other events sharing the program id")
    age: timedelta = Field(..., description="Capture time minus event end time")

    @property
    def has_reruns(self) -> bool:
        return self.rerun_count > 0


class AnalysisResult(AuditModel):
    """Outcome of auditing one file.

    Error results have no service_id; service_name then carries the
    failure description.
    """

    file_name: str
    date: datetime = Field(..., description="Capture time of the file")
    previous_file_date: datetime = Field(
        ..., description="Capture time of the preceding file, or a synthetic fallback"
    )
    service_id: Optional[str] = None
    service_name: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    wrong_events: list[WrongEventInfo] = Field(default_factory=list)

    @field_validator("date", "previous_file_date", "start_time", "end_time")
    @classmethod
    def _to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @classmethod
    def success(
        cls,
        file_name: str,
        date: datetime,
        previous_file_date: datetime,
        service_id: str,
        service_name: str,
        start_time: datetime,
        end_time: datetime,
        wrong_events: list[WrongEventInfo],
    ) -> "AnalysisResult":
        """Create a result for a file that parsed and classified cleanly."""
        return cls(
            file_name=file_name,
            date=date,
            previous_file_date=previous_file_date,
            service_id=service_id,
            service_name=service_name,
            start_time=start_time,
            end_time=end_time,
            wrong_events=wrong_events,
        )

    @classmethod
    def error(
        cls,
        file_name: str,
        date: datetime,
        previous_file_date: datetime,
        message: str,
    ) -> "AnalysisResult":
        """Create a result for a file that could not be analysed."""
        return cls(
            file_name=file_name,
            date=date,
            previous_file_date=previous_file_date,
            service_name=f"Error: {message}",
        )

    @property
    def is_error(self) -> bool:
        return self.service_id is None

    @property
    def is_anomalous(self) -> bool:
        """True for successful results with at least one wrong event."""
        return not self.is_error and bool(self.wrong_events)

    @property
    def schedule_duration(self) -> timedelta:
        """Coverage window of the schedule, zero for error results."""
        if self.start_time is None or self.end_time is None:
            return timedelta(0)
        return self.end_time - self.start_time

    @property
    def minutes_since_previous_file(self) -> float:
        return (self.date - self.previous_file_date).total_seconds() / 60

    @property
    def rerun_wrong_event_count(self) -> int:
        """Number of wrong events whose program is shown more than once."""
        return sum(1 for w in self.wrong_events if w.has_reruns)

    @property
    def min_wrong_event_age(self) -> timedelta:
        """Age of the most recently ended wrong event, zero if there are none."""
        if not self.wrong_events:
            return timedelta(0)
        return min(w.age for w in self.wrong_events)

    def same_batch_as_previous(self, batch_gap: timedelta = timedelta(minutes=1)) -> bool:
        """True when the previous file arrived within batch_gap of this one.

        Files delivered in the same batch share (nearly) the same capture time.
        """
        return (self.date - self.previous_file_date) < batch_gap
