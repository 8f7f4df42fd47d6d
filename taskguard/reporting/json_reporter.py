"""
TaskGuard JSON Reporter

Generates the machine-readable result consumed by CI:
{
    "passed": true,
    "summary": {"critical": n, "high": n, "medium": n, "low": n, "total": n},
    "findings": [...]
}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from taskguard.core.summary import ScanSummary


class JSONReporter:
    """Generates JSON-formatted scan reports."""

    def report(self, summary: ScanSummary, output_file: Optional[str] = None) -> str:
        """
        Generate JSON report.

        Args:
            summary: Summary of the scan, including every finding.
            output_file: Optional file path to write the report to.

        Returns:
            The JSON string.
        """
        report_data = {
            "passed": summary.passed,
            "summary": summary.counts(),
            "findings": [f.to_dict() for f in summary.findings],
        }

        json_str = json.dumps(report_data, indent=2, ensure_ascii=False)

        if output_file:
            Path(output_file).write_text(json_str, encoding="utf-8")

        return json_str
