"""Tests for audit data models - validation and derived values."""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from tva_audit.errors import MalformedDocument, UnknownService
from tva_audit.models import (
    AnalysisResult,
    CaptureFile,
    ParsedDocument,
    Schedule,
    ScheduleEvent,
    ServiceInfo,
    WrongEventInfo,
    ensure_utc,
    utc_now,
)

T0 = datetime(2014, 3, 1, 12, 0, tzinfo=timezone.utc)


def _event(program_id="crid://a/1", end=T0):
    return ScheduleEvent(program_id=program_id, start_time=end - timedelta(minutes=30), end_time=end)


# =============================================================================
# Base Model Tests
# =============================================================================

class TestBaseModel:
    """Tests for the shared base helpers."""

    def test_utc_now_returns_timezone_aware(self):
        """utc_now() should return timezone-aware datetime."""
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc_naive_datetime(self):
        """ensure_utc() should treat naive datetimes as UTC."""
        result = ensure_utc(datetime(2014, 3, 1, 12, 0))
        assert result == T0

    def test_ensure_utc_converts_offset(self):
        """ensure_utc() should convert other offsets to UTC."""
        cet = timezone(timedelta(hours=1))
        result = ensure_utc(datetime(2014, 3, 1, 13, 0, tzinfo=cet))
        assert result == T0
        assert result.tzinfo == timezone.utc

    def test_ensure_utc_none(self):
        assert ensure_utc(None) is None

    def test_models_are_immutable(self):
        """Parsed entities cannot be changed after creation."""
        service = ServiceInfo(service_id="S1", names=["A"])
        with pytest.raises(ValidationError):
            service.service_id = "S2"


# =============================================================================
# Schedule Tests
# =============================================================================

class TestServiceInfo:
    """Tests for ServiceInfo."""

    def test_longest_name(self):
        service = ServiceInfo(service_id="S1", names=["A", "ABC", "AB"])
        assert service.longest_name == "ABC"

    def test_longest_name_first_wins_on_tie(self):
        service = ServiceInfo(service_id="S1", names=["One", "Two"])
        assert service.longest_name == "One"

    def test_requires_a_name(self):
        with pytest.raises(ValidationError):
            ServiceInfo(service_id="S1", names=[])


class TestSchedule:
    """Tests for Schedule and ScheduleEvent."""

    def test_event_times_normalized_to_utc(self):
        event = ScheduleEvent(
            program_id="crid://a/1",
            start_time=datetime(2014, 3, 1, 11, 0),
            end_time=datetime(2014, 3, 1, 12, 0),
        )
        assert event.end_time == T0
        assert event.duration == timedelta(hours=1)

    def test_duration_is_coverage_window(self):
        schedule = Schedule(service_id="S1", start_time=T0, end_time=T0 + timedelta(hours=6))
        assert schedule.duration == timedelta(hours=6)
        assert schedule.events == []


class TestParsedDocument:
    """Tests for service resolution on ParsedDocument."""

    @pytest.fixture
    def schedule(self):
        return Schedule(service_id="S1", start_time=T0, end_time=T0 + timedelta(hours=6))

    def test_resolves_schedule_service(self, schedule):
        doc = ParsedDocument(
            schedule=schedule,
            services=[
                ServiceInfo(service_id="S0", names=["Other"]),
                ServiceInfo(service_id="S1", names=["A", "ABC"]),
            ],
        )
        assert doc.schedule_service.longest_name == "ABC"

    def test_unknown_service(self, schedule):
        doc = ParsedDocument(schedule=schedule, services=[])
        with pytest.raises(UnknownService, match="Service S1 not found"):
            doc.schedule_service

    def test_duplicate_service(self, schedule):
        doc = ParsedDocument(
            schedule=schedule,
            services=[
                ServiceInfo(service_id="S1", names=["A"]),
                ServiceInfo(service_id="S1", names=["B"]),
            ],
        )
        with pytest.raises(MalformedDocument, match="2 found"):
            doc.service("S1")


# =============================================================================
# Analysis Tests
# =============================================================================

class TestCaptureFile:
    """Tests for CaptureFile."""

    def test_in_memory_content(self):
        capture = CaptureFile(name="a.xml", captured_at=T0, content=b"<x/>")
        assert capture.read_bytes() == b"<x/>"

    def test_needs_path_or_content(self):
        with pytest.raises(ValidationError):
            CaptureFile(name="a.xml", captured_at=T0)

    def test_from_path_uses_mtime(self, tmp_path: Path):
        path = tmp_path / "a.xml"
        path.write_bytes(b"<x/>")
        os.utime(path, (T0.timestamp(), T0.timestamp()))

        capture = CaptureFile.from_path(path)
        assert capture.name == "a.xml"
        assert capture.captured_at == T0
        assert capture.read_bytes() == b"<x/>"


class TestAnalysisResult:
    """Tests for AnalysisResult derived values."""

    def _wrong(self, age_minutes, reruns=0):
        return WrongEventInfo(
            event=_event(end=T0 - timedelta(minutes=age_minutes)),
            rerun_count=reruns,
            age=timedelta(minutes=age_minutes),
        )

    def test_success_result(self):
        result = AnalysisResult.success(
            file_name="a.xml",
            date=T0,
            previous_file_date=T0 - timedelta(minutes=15),
            service_id="S1",
            service_name="ABC",
            start_time=T0,
            end_time=T0 + timedelta(hours=6),
            wrong_events=[self._wrong(30, reruns=2), self._wrong(10)],
        )
        assert not result.is_error
        assert result.is_anomalous
        assert result.schedule_duration == timedelta(hours=6)
        assert result.minutes_since_previous_file == 15.0
        assert result.rerun_wrong_event_count == 1
        assert result.min_wrong_event_age == timedelta(minutes=10)

    def test_error_result(self):
        result = AnalysisResult.error(
            file_name="a.xml",
            date=T0,
            previous_file_date=T0 - timedelta(hours=6),
            message="boom",
        )
        assert result.is_error
        assert not result.is_anomalous
        assert result.service_id is None
        assert result.service_name == "Error: boom"
        assert result.wrong_events == []
        assert result.schedule_duration == timedelta(0)
        assert result.min_wrong_event_age == timedelta(0)

    def test_same_batch_as_previous(self):
        result = AnalysisResult.error(
            file_name="a.xml", date=T0, previous_file_date=T0 - timedelta(seconds=30), message="x"
        )
        assert result.same_batch_as_previous()
        assert not result.same_batch_as_previous(timedelta(seconds=10))

    def test_wrong_event_rejects_negative_reruns(self):
        with pytest.raises(ValidationError):
            WrongEventInfo(event=_event(), rerun_count=-1, age=timedelta(minutes=1))
