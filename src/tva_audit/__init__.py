"""TVA Schedule Audit.

Scans a directory of captured TVA schedule-metadata files and reports
files whose published schedule contains events that had already ended
before the file itself was written:
- Capture-time ordered ingestion of schedule files
- Per-file parsing of the TVA program description
- Stale-event detection with rerun classification
- Tab-separated diagnostic report for human review
"""

__version__ = "0.1.0"
