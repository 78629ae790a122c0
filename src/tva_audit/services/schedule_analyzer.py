"""Schedule Analyzer - audits capture files in order, one result per file.

Responsible for:
- Parsing and classifying each file in capture-time order
- Carrying the previous file's capture date into the next result
- Turning any per-file failure into an error result so the run continues
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import timedelta
from typing import Optional

from tva_audit.models import AnalysisResult, CaptureFile
from tva_audit.services.anomaly_classifier import DEFAULT_GUARD_INTERVAL, AnomalyClassifier
from tva_audit.services.tva_parser import TvaParser

logger = logging.getLogger(__name__)

DEFAULT_FIRST_FILE_LOOKBACK = timedelta(hours=6)


class ScheduleAnalyzer:
    """Folds an ordered file sequence into a same-length result sequence."""

    def __init__(
        self,
        parser: Optional[TvaParser] = None,
        classifier: Optional[AnomalyClassifier] = None,
        first_file_lookback: timedelta = DEFAULT_FIRST_FILE_LOOKBACK,
    ):
        """Initialize the analyzer.

        Args:
            parser: Document parser (default: TVA 2010 namespace)
            classifier: Wrong-event classifier (default: 5 minute guard)
            first_file_lookback: Assumed gap before the first file of a run
        """
        self.parser = parser or TvaParser()
        self.classifier = classifier or AnomalyClassifier(DEFAULT_GUARD_INTERVAL)
        self.first_file_lookback = first_file_lookback

    def analyze(self, files: Iterable[CaptureFile]) -> Iterator[AnalysisResult]:
        """Analyze files in the given order.

        Files must already be sorted ascending by capture time. Yields
        exactly one result per file, in input order.
        """
        previous: Optional[AnalysisResult] = None
        for capture in files:
            previous = self.analyze_file(capture, previous)
            yield previous

    def analyze_file(
        self,
        capture: CaptureFile,
        previous: Optional[AnalysisResult] = None,
    ) -> AnalysisResult:
        """Analyze a single file given the result of the file before it.

        Never raises for problems with the file itself; those become an
        error result whose service_name starts with "Error: ".
        """
        date = capture.captured_at
        if previous is None:
            previous_file_date = date - self.first_file_lookback
        else:
            previous_file_date = previous.date

        try:
            document = self.parser.parse_bytes(capture.read_bytes())
            schedule = document.schedule
            service = document.schedule_service
            wrong_events = self.classifier.classify(schedule, date)
        except Exception as e:
            logger.warning("Could not analyze %s: %s", capture.name, e)
            return AnalysisResult.error(
                file_name=capture.name,
                date=date,
                previous_file_date=previous_file_date,
                message=str(e),
            )

        result = AnalysisResult.success(
            file_name=capture.name,
            date=date,
            previous_file_date=previous_file_date,
            service_id=schedule.service_id,
            service_name=service.longest_name,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            wrong_events=wrong_events,
        )
        logger.debug(
            "%s: %s, %d wrong events", capture.name, result.service_id, len(wrong_events)
        )
        return result
