"""Schedule entities - the parsed content of one TVA program description."""

from datetime import datetime, timedelta

from pydantic import Field, field_validator

from tva_audit.errors import MalformedDocument, UnknownService
from tva_audit.models.base import AuditModel, ensure_utc


class ServiceInfo(AuditModel):
    """A broadcast service from the ServiceInformationTable."""

    service_id: str
    names: list[str] = Field(..., min_length=1, description="Display names in document order")

    @property
    def longest_name(self) -> str:
        """Longest display name; the first one wins on equal length."""
        return max(self.names, key=len)


class ScheduleEvent(AuditModel):
    """A single published broadcast slot.

    program_id is the CRID of the program content, shared by reruns.
    """

    program_id: str
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


class Schedule(AuditModel):
    """Published schedule for one service over a coverage window."""

    service_id: str
    start_time: datetime
    end_time: datetime
    events: list[ScheduleEvent] = Field(default_factory=list)

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def duration(self) -> timedelta:
        """Length of the coverage window."""
        return self.end_time - self.start_time


class ParsedDocument(AuditModel):
    """A TVA document reduced to its single schedule and the service table."""

    schedule: Schedule
    services: list[ServiceInfo] = Field(default_factory=list)

    def service(self, service_id: str) -> ServiceInfo:
        """Resolve a service by id.

        Raises:
            UnknownService: If no service carries the id
            MalformedDocument: If more than one service carries the id
        """
        matches = [s for s in self.services if s.service_id == service_id]
        if not matches:
            raise UnknownService(f"Service {service_id} not found in ServiceInformationTable.")
        if len(matches) > 1:
            raise MalformedDocument(
                f"Expected exactly one ServiceInformation with serviceId {service_id}; "
                f"{len(matches)} found."
            )
        return matches[0]

    @property
    def schedule_service(self) -> ServiceInfo:
        """The service the schedule belongs to."""
        return self.service(self.schedule.service_id)
