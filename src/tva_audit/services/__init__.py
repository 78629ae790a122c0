"""Services for TVA Schedule Audit.

Components:
- TvaParser: Map a TVA document onto the schedule model
- AnomalyClassifier: Find events that ended before capture
- ScheduleAnalyzer: Audit files in capture order, carrying the previous date
- ReportFormatter: Render results as tab-separated report lines
- FileScanner: Select and order capture files in a directory tree
- AuditOrchestrator: Coordinate a full audit run
"""

from tva_audit.services.tva_parser import TvaParser
from tva_audit.services.anomaly_classifier import AnomalyClassifier
from tva_audit.services.schedule_analyzer import ScheduleAnalyzer
from tva_audit.services.report_formatter import ReportFormatter
from tva_audit.services.file_scanner import FileScanner
from tva_audit.services.pipeline import AuditOrchestrator

__all__ = [
    "TvaParser",
    "AnomalyClassifier",
    "ScheduleAnalyzer",
    "ReportFormatter",
    "FileScanner",
    "AuditOrchestrator",
]
