"""
TaskGuard Console Reporter

Generates human-readable colored console output.
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

import click

from taskguard import __version__
from taskguard.core.finding import Severity
from taskguard.core.summary import ScanSummary
from taskguard.sources.tasks import ReadFailure


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)


# Severity colors
SEVERITY_COLORS = {
    Severity.CRITICAL: "bright_red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}


class ConsoleReporter:
    """Prints a formatted security report to the console."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(
        self,
        summary: ScanSummary,
        failures: Sequence[ReadFailure] = (),
        elapsed: Optional[float] = None,
    ) -> None:
        """
        Print the full scan report.

        Args:
            summary: Summary of the scan.
            failures: Files that could not be read.
            elapsed: Scan duration in seconds.
        """
        self._print_header(elapsed)
        self._print_severity_summary(summary)

        if summary.total:
            self._print_detailed_findings(summary)
        if failures:
            self._print_failures(failures)

        self._print_footer(summary)

    def _print_header(self, elapsed: Optional[float]) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo(click.style("  TaskGuard Security Scan Report", fg="bright_white", bold=True))
        _safe_echo(click.style(f"  Version: {__version__}", fg="white"))
        _safe_echo(click.style(f"  Target: {self.target}", fg="white"))
        if elapsed is not None:
            _safe_echo(click.style(f"  Duration: {elapsed:.2f}s", fg="bright_black"))
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

    def _print_severity_summary(self, summary: ScanSummary) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Findings Summary:", fg="bright_white", bold=True))
        for sev in Severity.ordered():
            _safe_echo(
                click.style(f"     {sev.name:10s}: ", fg=SEVERITY_COLORS[sev])
                + click.style(str(summary.count(sev)), fg="white")
            )
        _safe_echo(click.style(f"     {'TOTAL':10s}: ", fg="bright_white") + str(summary.total))

    def _print_detailed_findings(self, summary: ScanSummary) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Detailed Findings:", fg="bright_white", bold=True))
        _safe_echo(click.style("-" * 55, fg="bright_black"))

        idx = 0
        for sev in Severity.ordered():
            color = SEVERITY_COLORS[sev]
            for finding in summary.by_severity.get(sev, []):
                idx += 1
                _safe_echo("")
                _safe_echo(
                    click.style(f"  {idx}. ", fg="white")
                    + click.style(f" {sev.name} ", fg=color, bold=True)
                    + click.style(f" {finding.rule_name}", fg="bright_white")
                )
                _safe_echo(click.style(f"      Rule: {finding.rule_id}", fg="bright_black"))
                _safe_echo(click.style(f"      Location: {finding.location}", fg="bright_black"))
                _safe_echo(click.style(f"      {finding.description}", fg="white"))
                _safe_echo(click.style(f"      Match: {finding.match}", fg="bright_black"))

    def _print_failures(self, failures: Sequence[ReadFailure]) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Unreadable Files:", fg="bright_white", bold=True))
        for failure in failures:
            _safe_echo(click.style(f"    [!] {failure.path}: {failure.message}", fg="yellow"))

    def _print_footer(self, summary: ScanSummary) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

        if not summary.passed:
            _safe_echo(
                click.style(
                    "  [X] FAILED - Critical or high severity issues found",
                    fg="bright_red",
                    bold=True,
                )
            )
        elif not summary.total:
            _safe_echo(
                click.style("  [OK] PASSED - No security issues found", fg="green", bold=True)
            )
        else:
            _safe_echo(
                click.style(
                    "  [!] PASSED with warnings - Review security findings above",
                    fg="yellow",
                    bold=True,
                )
            )

        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo("")
