"""Data models for TVA Schedule Audit.

All entities use Pydantic for validation and are immutable once built.
- Schedule side: ServiceInfo, ScheduleEvent, Schedule, ParsedDocument
- Audit side: CaptureFile, WrongEventInfo, AnalysisResult
"""

from tva_audit.models.base import AuditModel, utc_now, ensure_utc
from tva_audit.models.schedule import (
    ParsedDocument,
    Schedule,
    ScheduleEvent,
    ServiceInfo,
)
from tva_audit.models.analysis import AnalysisResult, CaptureFile, WrongEventInfo

__all__ = [
    # Base
    "AuditModel",
    "utc_now",
    "ensure_utc",
    # Schedule
    "ServiceInfo",
    "ScheduleEvent",
    "Schedule",
    "ParsedDocument",
    # Analysis
    "CaptureFile",
    "WrongEventInfo",
    "AnalysisResult",
]
