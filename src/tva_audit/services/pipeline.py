"""Audit Orchestrator - coordinates a complete audit run.

Responsible for:
- Scanning the input directory for capture files
- Running the sequential analysis over them
- Writing the report to a text stream
- Progress callbacks for CLI display
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, TextIO

from tva_audit.config import Settings
from tva_audit.models import AnalysisResult, CaptureFile

logger = logging.getLogger(__name__)


@dataclass
class AuditSummary:
    """Counts collected over one audit run."""

    files_scanned: int = 0
    files_reported: int = 0
    anomalous_files: int = 0
    error_files: int = 0
    wrong_events: int = 0
    batches: int = 0
    duration_seconds: float = 0.0


class ProgressCallbacks(Protocol):
    """Protocol for progress callbacks."""

    def on_scan_complete(self, root: Path, count: int) -> None:
        """Called once the candidate files are known."""
        ...

    def on_file_processed(self, index: int, result: AnalysisResult, line: Optional[str]) -> None:
        """Called for every file, including those without a report line."""
        ...

    def on_complete(self, summary: AuditSummary) -> None:
        """Called when the run has finished."""
        ...


@dataclass
class DefaultProgressCallbacks:
    """Default no-op progress callbacks."""

    def on_scan_complete(self, root: Path, count: int) -> None:
        pass

    def on_file_processed(self, index: int, result: AnalysisResult, line: Optional[str]) -> None:
        pass

    def on_complete(self, summary: AuditSummary) -> None:
        pass


class AuditOrchestrator:
    """Runs scan, analysis and report formatting for one directory."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        callbacks: Optional[ProgressCallbacks] = None,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Audit settings; environment defaults when omitted
            callbacks: Progress callbacks; no-op when omitted
        """
        self.settings = settings or Settings()
        self.callbacks = callbacks or DefaultProgressCallbacks()

        # Initialize services lazily
        self._scanner = None
        self._analyzer = None
        self._formatter = None

    @property
    def scanner(self):
        """Get or create FileScanner."""
        if self._scanner is None:
            from tva_audit.services.file_scanner import FileScanner

            self._scanner = FileScanner(self.settings)
        return self._scanner

    @property
    def analyzer(self):
        """Get or create ScheduleAnalyzer."""
        if self._analyzer is None:
            from tva_audit.services.anomaly_classifier import AnomalyClassifier
            from tva_audit.services.schedule_analyzer import ScheduleAnalyzer
            from tva_audit.services.tva_parser import TvaParser

            self._analyzer = ScheduleAnalyzer(
                parser=TvaParser(self.settings.tva_namespace),
                classifier=AnomalyClassifier(self.settings.guard_interval),
                first_file_lookback=self.settings.first_file_lookback,
            )
        return self._analyzer

    @property
    def formatter(self):
        """Get or create ReportFormatter."""
        if self._formatter is None:
            from tva_audit.services.report_formatter import ReportFormatter

            self._formatter = ReportFormatter()
        return self._formatter

    def run(self, root: str | Path, out: TextIO) -> AuditSummary:
        """Audit every candidate file below root.

        Args:
            root: Directory to scan
            out: Stream receiving the report

        Returns:
            AuditSummary of the run

        Raises:
            FileNotFoundError, NotADirectoryError: If root cannot be scanned
        """
        root = Path(root)
        files = self.scanner.scan(root)
        self.callbacks.on_scan_complete(root, len(files))
        return self.run_files(files, out)

    def run_files(self, files: Iterable[CaptureFile], out: TextIO) -> AuditSummary:
        """Audit an already ordered sequence of capture files.

        The header is always written, even for an empty sequence.
        """
        start = time.time()
        summary = AuditSummary()

        out.write(self.formatter.header() + "\n")

        results = self.analyzer.analyze(files)
        for index, result in enumerate(results, start=1):
            line = self.formatter.format_result(result, index)
            if line is not None:
                out.write(line + "\n")
            self._count(summary, result, line)
            self.callbacks.on_file_processed(index, result, line)

        summary.duration_seconds = time.time() - start
        logger.info(
            "Audited %d files: %d anomalous, %d errors",
            summary.files_scanned, summary.anomalous_files, summary.error_files,
        )
        self.callbacks.on_complete(summary)
        return summary

    def _count(self, summary: AuditSummary, result: AnalysisResult, line: Optional[str]) -> None:
        summary.files_scanned += 1
        if line is not None:
            summary.files_reported += 1
        if result.is_error:
            summary.error_files += 1
        elif result.is_anomalous:
            summary.anomalous_files += 1
            summary.wrong_events += len(result.wrong_events)
        if summary.files_scanned == 1 or not result.same_batch_as_previous(self.settings.batch_gap):
            summary.batches += 1
