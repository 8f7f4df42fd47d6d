"""
TaskGuard GitHub Actions Integration

Provides helpers for running TaskGuard in GitHub Actions:
- Workflow annotations (errors for critical/high, warnings otherwise)
- Step summary output
- Environment detection
"""

from __future__ import annotations

import logging
import os

from taskguard.core.finding import Finding, Severity
from taskguard.core.summary import ScanSummary

logger = logging.getLogger(__name__)

SEVERITY_EMOJI = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🟢",
}


def is_github_actions() -> bool:
    """Check if currently running inside GitHub Actions."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def format_annotation(finding: Finding) -> str:
    """
    GitHub annotation line for one finding:
    ::error file={name},line={line},title={title}::{message}
    """
    level = "error" if finding.severity.blocking else "warning"
    params = [
        f"file={finding.file}",
        f"line={finding.line}",
        f"title={finding.rule_id} - {finding.rule_name}",
    ]
    return f"::{level} {','.join(params)}::{finding.description}: {finding.match}"


def emit_annotations(findings: list[Finding], force: bool = False) -> None:
    """Print one workflow annotation per finding."""
    if not (force or is_github_actions()):
        return

    for finding in findings:
        print(format_annotation(finding))


def render_step_summary(summary: ScanSummary, target: str) -> str:
    lines = [
        "## 🔒 TaskGuard Security Scan Results\n",
        f"**Target:** `{target}`\n",
        "| Severity | Count |",
        "|----------|-------|",
    ]
    for sev in Severity.ordered():
        lines.append(f"| {SEVERITY_EMOJI[sev]} {sev.name} | {summary.count(sev)} |")
    lines.append(f"| **TOTAL** | **{summary.total}** |")
    lines.append("")

    if not summary.passed:
        lines.append("### ❌ Scan Status: FAILED")
        lines.append("Critical or high severity issues must be resolved before merging.")
    elif summary.total:
        lines.append("### ⚠️ Scan Status: PASSED WITH WARNINGS")
        lines.append("Review the findings below.")
    else:
        lines.append("### ✅ Scan Status: PASSED")
        lines.append("No security issues found.")

    lines.append("")

    if summary.total:
        lines.append("<details><summary>📋 Top Findings (click to expand)</summary>\n")
        sorted_findings = sorted(summary.findings, key=lambda f: f.severity.rank)
        for i, f in enumerate(sorted_findings[:20], start=1):
            lines.append(f"{i}. **{f.severity.name}** - {f.rule_name} ({f.rule_id})")
            lines.append(f"   - Location: `{f.location}`")
        lines.append("\n</details>")

    return "\n".join(lines) + "\n"


def write_step_summary(summary: ScanSummary, target: str, force: bool = False) -> None:
    """
    Append a summary to the GitHub Actions step summary.
    This appears on the workflow run page.
    """
    if not (force or is_github_actions()):
        return

    summary_file = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_file:
        return

    try:
        with open(summary_file, "a", encoding="utf-8") as fh:
            fh.write(render_step_summary(summary, target))
    except OSError as exc:
        logger.warning("Could not write step summary to %s: %s", summary_file, exc)
