"""
TaskGuard Markdown Reporter

Generates the tiered markdown report posted on pull requests:
summary table, pass/fail status, then one section per severity.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from taskguard.core.finding import Severity
from taskguard.core.summary import ScanStatus, ScanSummary

SEVERITY_LABELS = {
    Severity.CRITICAL: "🔴 Critical",
    Severity.HIGH: "🟠 High",
    Severity.MEDIUM: "🟡 Medium",
    Severity.LOW: "🟢 Low",
}

STATUS_LINES = {
    ScanStatus.FAILED: "> ❌ **FAILED**: Critical or high severity issues found",
    ScanStatus.WARNING: "> ⚠️ **WARNING**: Medium severity issues found - review recommended",
    ScanStatus.PASSED_WITH_NOTES: "> ✅ **PASSED with notes**: Low severity issues found",
    ScanStatus.PASSED: "> ✅ **PASSED**: No security issues found",
}


class MarkdownReporter:
    """Generates markdown scan reports."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(self, summary: ScanSummary, output_file: Optional[str] = None) -> str:
        lines = ["# Security Scan Report", "", f"**Target:** `{self.target}`", ""]

        lines += ["## Summary", "", "| Severity | Count |", "|----------|-------|"]
        for severity in Severity.ordered():
            lines.append(f"| {SEVERITY_LABELS[severity]} | {summary.count(severity)} |")
        lines += [f"| **Total** | **{summary.total}** |", ""]

        lines += [STATUS_LINES[summary.status], ""]

        for severity in Severity.ordered():
            group = summary.by_severity.get(severity, [])
            if not group:
                continue
            lines += [f"## {SEVERITY_LABELS[severity]} Issues", ""]
            for finding in group:
                lines.append(f"### {finding.rule_id}: {finding.rule_name}")
                lines.append(f"- **File:** {finding.location}")
                lines.append(f"- **Description:** {finding.description}")
                lines.append(f"- **Match:** `{finding.match}`")
                lines.append("")

        report = "\n".join(lines)

        if output_file:
            Path(output_file).write_text(report, encoding="utf-8")

        return report
