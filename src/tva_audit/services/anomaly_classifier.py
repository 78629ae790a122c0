"""Anomaly Classifier - finds events that ended before their file was captured.

An event is wrong when its published end lies more than a guard interval
before the capture time. The guard absorbs the race between the feed
generating the schedule and the file being written.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta

from tva_audit.models import Schedule, WrongEventInfo

logger = logging.getLogger(__name__)

DEFAULT_GUARD_INTERVAL = timedelta(minutes=5)


class AnomalyClassifier:
    """Classifies stale schedule events and counts their reruns."""

    def __init__(self, guard_interval: timedelta = DEFAULT_GUARD_INTERVAL):
        """Initialize the classifier.

        Args:
            guard_interval: How long before capture an event must have ended
        """
        if guard_interval < timedelta(0):
            raise ValueError("guard_interval must not be negative")
        self.guard_interval = guard_interval

    def reference_time(self, captured_at: datetime) -> datetime:
        """Latest end time an event may have without being counted as wrong."""
        return captured_at - self.guard_interval

    def classify(self, schedule: Schedule, captured_at: datetime) -> list[WrongEventInfo]:
        """Find the wrong events of a schedule.

        Args:
            schedule: Parsed schedule of the file
            captured_at: Capture time of the file

        Returns:
            WrongEventInfo per wrong event, in schedule order
        """
        reference = self.reference_time(captured_at)
        occurrences = Counter(event.program_id for event in schedule.events)

        wrong = [
            WrongEventInfo(
                event=event,
                rerun_count=occurrences[event.program_id] - 1,
                age=captured_at - event.end_time,
            )
            for event in schedule.events
            if event.end_time < reference
        ]

        if wrong:
            logger.debug(
                "%d of %d events of %s ended before %s",
                len(wrong), len(schedule.events), schedule.service_id, reference.isoformat(),
            )
        return wrong
