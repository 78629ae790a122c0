"""Shared fixtures for the TVA Schedule Audit tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from tva_audit.models import CaptureFile

TVA_NS = "urn:tva:metadata:2010"

CAPTURE_TIME = datetime(2014, 3, 1, 12, 0, tzinfo=timezone.utc)


def iso(dt: datetime) -> str:
    """Round-trip format as written by the broadcaster feed."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.0000000Z")


def build_tva(
    services: Optional[list[tuple[str, list[str]]]] = None,
    schedules: Optional[list[dict]] = None,
    include_location_table: bool = True,
    include_service_table: bool = True,
) -> bytes:
    """Build a TVA document.

    Args:
        services: (serviceId, names) pairs for the ServiceInformationTable
        schedules: dicts with service_id, start, end and events, where
            events are (crid, start, end) tuples
    """
    if services is None:
        services = [("S1", ["A", "ABC"])]
    if schedules is None:
        schedules = []

    parts = [f'<TVAMain xmlns="{TVA_NS}"><ProgramDescription>']
    if include_service_table:
        parts.append("<ServiceInformationTable>")
        for service_id, names in services:
            parts.append(f'<ServiceInformation serviceId="{service_id}">')
            parts.extend(f"<Name>{name}</Name>" for name in names)
            parts.append("</ServiceInformation>")
        parts.append("</ServiceInformationTable>")
    if include_location_table:
        parts.append("<ProgramLocationTable>")
        for schedule in schedules:
            parts.append(
                f'<Schedule serviceIDRef="{schedule["service_id"]}" '
                f'start="{iso(schedule["start"])}" end="{iso(schedule["end"])}">'
            )
            for crid, start, end in schedule["events"]:
                parts.append(
                    f'<ScheduleEvent><Program crid="{crid}"/>'
                    f"<PublishedStartTime>{iso(start)}</PublishedStartTime>"
                    f"<PublishedEndTime>{iso(end)}</PublishedEndTime>"
                    "</ScheduleEvent>"
                )
            parts.append("</Schedule>")
        parts.append("</ProgramLocationTable>")
    parts.append("</ProgramDescription></TVAMain>")
    return "".join(parts).encode("utf-8")


def schedule_spec(
    events: list[tuple[str, datetime, datetime]],
    service_id: str = "S1",
    start: datetime = CAPTURE_TIME - timedelta(hours=1),
    hours: float = 6,
) -> dict:
    """Schedule description for build_tva."""
    return {
        "service_id": service_id,
        "start": start,
        "end": start + timedelta(hours=hours),
        "events": events,
    }


def make_capture(name: str, captured_at: datetime, content: bytes) -> CaptureFile:
    return CaptureFile(name=name, captured_at=captured_at, content=content)


@pytest.fixture
def stale_document():
    """S1 schedule over 6 hours with one event that ended 10 minutes before capture."""
    return build_tva(
        schedules=[schedule_spec([
            ("crid://a/1", CAPTURE_TIME - timedelta(minutes=40), CAPTURE_TIME - timedelta(minutes=10)),
            ("crid://a/2", CAPTURE_TIME - timedelta(minutes=10), CAPTURE_TIME + timedelta(minutes=20)),
        ])]
    )


@pytest.fixture
def clean_document():
    """S1 schedule whose events are all current or upcoming."""
    return build_tva(
        schedules=[schedule_spec([
            ("crid://a/2", CAPTURE_TIME - timedelta(minutes=3), CAPTURE_TIME + timedelta(minutes=20)),
            ("crid://a/3", CAPTURE_TIME + timedelta(minutes=20), CAPTURE_TIME + timedelta(minutes=50)),
        ])]
    )


@pytest.fixture
def malformed_document():
    """Document without a ProgramLocationTable."""
    return build_tva(include_location_table=False)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep the cached global settings from leaking between tests."""
    monkeypatch.setattr("tva_audit.config._settings", None)
    for name in (
        "TVA_AUDIT_GUARD_MINUTES",
        "TVA_AUDIT_FIRST_FILE_LOOKBACK_HOURS",
        "TVA_AUDIT_BATCH_GAP_SECONDS",
        "TVA_AUDIT_FILE_PATTERN",
        "TVA_AUDIT_EXCLUDE_MARKER",
        "TVA_AUDIT_CAPTURE_YEAR",
        "TVA_AUDIT_MAX_AGE_DAYS",
        "TVA_AUDIT_NAMESPACE",
    ):
        monkeypatch.delenv(name, raising=False)
