"""File Scanner - selects and orders the capture files of a directory tree."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from tva_audit.config import Settings
from tva_audit.models import CaptureFile, utc_now

logger = logging.getLogger(__name__)


class FileScanner:
    """Finds candidate TVA files and sorts them by capture time."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the scanner.

        Args:
            settings: Selection settings (pattern, exclusions, cutoffs)
        """
        self.settings = settings or Settings()

    def scan(self, root: str | Path) -> list[CaptureFile]:
        """Collect capture files below root.

        Args:
            root: Directory to search recursively

        Returns:
            CaptureFiles sorted ascending by capture time, then name

        Raises:
            FileNotFoundError: If root does not exist
            NotADirectoryError: If root is not a directory
        """
        root = Path(root)
        if not root.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        captures = [
            CaptureFile.from_path(path)
            for path in root.rglob(self.settings.file_pattern)
            if path.is_file() and not self._is_excluded(path)
        ]
        captures = [c for c in captures if self._in_range(c)]
        captures.sort(key=lambda c: (c.captured_at, c.name))

        logger.info("Found %d candidate files below %s", len(captures), root)
        return captures

    def _is_excluded(self, path: Path) -> bool:
        marker = self.settings.exclude_marker
        return bool(marker) and marker in path.name

    def _in_range(self, capture: CaptureFile) -> bool:
        if (
            self.settings.capture_year is not None
            and capture.captured_at.year != self.settings.capture_year
        ):
            return False
        if self.settings.max_age_days is not None:
            cutoff = utc_now() - timedelta(days=self.settings.max_age_days)
            if capture.captured_at < cutoff:
                return False
        return True
