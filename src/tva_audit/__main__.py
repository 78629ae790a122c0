"""CLI Runner for TVA Schedule Audit.

Usage:
    tva-audit scan [PATH] [--guard-minutes 5] [--lookback-hours 6]
    tva-audit scan /data/tva --year 2014 --output report.tsv
    tva-audit --verbose scan /data/tva
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from tva_audit import __version__

# The report owns stdout; everything else goes to stderr
console = Console(stderr=True, highlight=False)


def setup_logging(verbose: bool) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


class ConsoleProgress:
    """Progress callbacks printing one dot per audited file."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def on_scan_complete(self, root: Path, count: int) -> None:
        console.print(f"{count} (possible) TVA files")

    def on_file_processed(self, index: int, result, line: Optional[str]) -> None:
        if not self.quiet:
            console.print(".", end="", soft_wrap=True)

    def on_complete(self, summary) -> None:
        if not self.quiet and summary.files_scanned:
            console.print()
        console.print(
            f"[green]Audited {summary.files_scanned} files[/green] from "
            f"{summary.batches} batches: {summary.anomalous_files} with wrong events "
            f"({summary.wrong_events} events), {summary.error_files} errors "
            f"in {summary.duration_seconds:.1f}s"
        )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """TVA Schedule Audit.

    Find captured schedule files that publish events which had already
    ended when the file was written.
    """
    setup_logging(verbose)


@cli.command("scan")
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option("--guard-minutes", type=float, default=None,
              help="Minutes an event must have ended before capture [default: 5]")
@click.option("--lookback-hours", type=float, default=None,
              help="Assumed gap before the first file [default: 6]")
@click.option("--pattern", default=None, help="File glob to scan for [default: *.xml]")
@click.option("--exclude", default=None, help="Skip files whose name contains this marker")
@click.option("--year", type=int, default=None, help="Only files captured in this year")
@click.option("--max-age-days", type=float, default=None, help="Only files newer than this")
@click.option("--output", "-o", default="-", help="Report file (default: stdout)")
@click.option("--quiet", "-q", is_flag=True, help="Do not print progress dots")
def scan(path: Path, guard_minutes: Optional[float], lookback_hours: Optional[float],
         pattern: Optional[str], exclude: Optional[str], year: Optional[int],
         max_age_days: Optional[float], output: str, quiet: bool):
    """Audit the TVA files below PATH and print the report."""
    from tva_audit.config import get_settings
    from tva_audit.services.pipeline import AuditOrchestrator

    overrides = {
        "guard_minutes": guard_minutes,
        "first_file_lookback_hours": lookback_hours,
        "file_pattern": pattern,
        "exclude_marker": exclude,
        "capture_year": year,
        "max_age_days": max_age_days,
    }
    settings = get_settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    if settings.guard_minutes < 0 or settings.first_file_lookback_hours < 0:
        console.print("[red]Error:[/red] guard and lookback must not be negative")
        sys.exit(1)

    orchestrator = AuditOrchestrator(settings, callbacks=ConsoleProgress(quiet))

    console.print(f"Scanning {path}")
    try:
        with click.open_file(output, "w", encoding="utf-8") as out:
            orchestrator.run(path, out)
    except (FileNotFoundError, NotADirectoryError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
