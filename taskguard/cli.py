"""
TaskGuard CLI

Command-line interface for running security scans over task repositories.

Commands:
    taskguard scan [ROOT] [FOLDERS]...  - Scan all tasks, or only FOLDERS
    taskguard init                      - Create a default config file
    taskguard rules                     - List the built-in detection rules
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from taskguard import __version__
from taskguard.core.config import (
    CONFIG_FILENAME,
    OUTPUT_FORMATS,
    TaskGuardConfig,
    generate_default_config,
)
from taskguard.core.errors import ConfigurationError
from taskguard.core.finding import Severity
from taskguard.core.rules import DEFAULT_REGISTRY
from taskguard.core.scanner import ContentScanner
from taskguard.core.summary import ScanSummary
from taskguard.integrations.github import (
    emit_annotations,
    is_github_actions,
    write_step_summary,
)
from taskguard.reporting.console import ConsoleReporter, _safe_echo
from taskguard.reporting.json_reporter import JSONReporter
from taskguard.reporting.markdown import MarkdownReporter
from taskguard.reporting.sarif import SARIFReporter
from taskguard.sources.tasks import TaskRepository

EXIT_CONFIG_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version=__version__, prog_name="TaskGuard")
def cli() -> None:
    """
    TaskGuard - Task Content Security Scanner

    Detect prompt injection, dangerous commands, data exfiltration,
    hardcoded credentials and privilege escalation in task definitions.
    """
    pass


# ═══════════════════════════════════════════════════════
#  taskguard scan
# ═══════════════════════════════════════════════════════
@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False), default=".")
@click.argument("folders", nargs=-1)
@click.option("--format", "-f", "output_format", type=click.Choice(list(OUTPUT_FORMATS)),
              default=None, help="Output format (default: markdown).")
@click.option("--json", "as_json", is_flag=True, help="Shortcut for --format json.")
@click.option("--output", "-o", "output_file", type=click.Path(), default=None,
              help="Write report to a file.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Number of files to scan in parallel.")
@click.option("--ci", is_flag=True, help="Enable CI mode (GitHub Actions annotations, etc.).")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .taskguard.yaml configuration file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
def scan(
    root: str,
    folders: tuple,
    output_format: Optional[str],
    as_json: bool,
    output_file: Optional[str],
    workers: Optional[int],
    ci: bool,
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """Scan task folders for security issues.

    Exits 0 when no critical or high findings are present, 1 otherwise and
    2 on a configuration error.

    Examples:

        taskguard scan

        taskguard scan . my-task other-task --json

        taskguard scan --format sarif --output results.sarif --ci
    """
    _configure_logging(verbose)
    target = Path(root).resolve()

    try:
        # ── Load configuration ──
        cfg_path = Path(config_path) if config_path else target / CONFIG_FILENAME
        config = TaskGuardConfig.load(cfg_path)

        # CLI flags override config
        fmt = "json" if as_json else (output_format or config.output.format)
        out_file = output_file or config.output.file

        repository = TaskRepository(
            target, tasks_dir=config.tasks_dir, exclude_files=config.scan.exclude_files
        )
        if folders:
            _safe_echo(f"Scanning folders: {', '.join(folders)}", err=True)
            loaded = repository.load(folders)
        else:
            _safe_echo("Scanning all tasks...", err=True)
            loaded = repository.load()

        for failure in loaded.failures:
            _safe_echo(click.style(f"Error scanning {failure.path}: {failure.message}", fg="yellow"),
                       err=True)

        # ── Run scanner ──
        scanner = ContentScanner(DEFAULT_REGISTRY, workers=workers or config.scan.workers)
        t0 = time.time()
        findings = scanner.scan(loaded.documents)
        elapsed = time.time() - t0
    except ConfigurationError as exc:
        _safe_echo(click.style(f"  [X] Configuration error: {exc}", fg="red"), err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    summary = ScanSummary.from_findings(findings)

    # ── Report ──
    if fmt == "console":
        ConsoleReporter(target=str(target)).report(summary, loaded.failures, elapsed)
        if out_file:
            # Also write JSON when console + output file
            JSONReporter().report(summary, output_file=out_file)
    else:
        if fmt == "json":
            reporter = JSONReporter()
        elif fmt == "sarif":
            reporter = SARIFReporter(target=str(target))
        else:
            reporter = MarkdownReporter(target=str(target))
        text = reporter.report(summary, output_file=out_file)
        if not out_file:
            _safe_echo(text)

    # ── CI integrations ──
    if ci or is_github_actions():
        emit_annotations(list(summary.findings), force=ci)
        write_step_summary(summary, str(target), force=ci)

    # ── Exit code ──
    sys.exit(summary.exit_code)


# ═══════════════════════════════════════════════════════
#  taskguard init
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--path", "-p", "target_path", type=click.Path(), default=".",
              help="Directory to create the config file in.")
def init(target_path: str) -> None:
    """Create a default .taskguard.yaml."""
    target = Path(target_path).resolve()
    target.mkdir(parents=True, exist_ok=True)

    config_file = target / CONFIG_FILENAME

    if config_file.exists():
        _safe_echo(click.style(f"  [!] {config_file} already exists, skipping.", fg="yellow"))
    else:
        config_file.write_text(generate_default_config(), encoding="utf-8")
        _safe_echo(click.style(f"  [+] Created {config_file}", fg="green"))

    _safe_echo("")
    _safe_echo("  Run 'taskguard scan' to start scanning.")


# ═══════════════════════════════════════════════════════
#  taskguard rules
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--severity", "-s", type=click.Choice([s.value for s in Severity.ordered()],
              case_sensitive=False), default=None, help="Only list rules of this severity.")
def rules(severity: Optional[str]) -> None:
    """List the built-in detection rules."""
    wanted = Severity.from_string(severity) if severity else None

    for sev, tier in DEFAULT_REGISTRY.tiers():
        if wanted and sev is not wanted:
            continue
        _safe_echo(click.style(f"{sev.name}", bold=True))
        for rule in tier:
            _safe_echo(f"  {rule.id:22s} {rule.name}")
            _safe_echo(click.style(f"  {'':22s} {rule.description}", fg="bright_black"))
        _safe_echo("")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
