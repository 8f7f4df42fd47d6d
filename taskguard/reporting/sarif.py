"""
TaskGuard SARIF Reporter

Generates SARIF 2.1.0 (Static Analysis Results Interchange Format) output
for GitHub Code Scanning and other SARIF viewers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from taskguard import __version__
from taskguard.core.finding import Severity
from taskguard.core.summary import ScanSummary

SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"

# SARIF severity level mapping
SARIF_LEVEL_MAP = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "note",
}

SECURITY_SEVERITY_SCORES = {
    Severity.CRITICAL: "9.5",
    Severity.HIGH: "7.5",
    Severity.MEDIUM: "5.0",
    Severity.LOW: "2.5",
}


class SARIFReporter:
    """Generates SARIF 2.1.0-formatted scan reports."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(self, summary: ScanSummary, output_file: Optional[str] = None) -> str:
        """
        Generate SARIF report.

        Args:
            summary: Summary of the scan, including every finding.
            output_file: Optional file path to write the report to.

        Returns:
            The SARIF JSON string.
        """
        rules_map: dict[str, dict] = {}
        rule_index: dict[str, int] = {}
        results: list[dict] = []

        for finding in summary.findings:
            level = SARIF_LEVEL_MAP[finding.severity]

            if finding.rule_id not in rules_map:
                rule_index[finding.rule_id] = len(rules_map)
                rules_map[finding.rule_id] = {
                    "id": finding.rule_id,
                    "name": finding.rule_name,
                    "shortDescription": {"text": finding.rule_name},
                    "fullDescription": {"text": finding.description},
                    "defaultConfiguration": {"level": level},
                    "properties": {
                        "security-severity": SECURITY_SEVERITY_SCORES[finding.severity],
                        "tags": ["security", finding.severity.value],
                    },
                }

            results.append(
                {
                    "ruleId": finding.rule_id,
                    "ruleIndex": rule_index[finding.rule_id],
                    "level": level,
                    "message": {"text": f"{finding.description}: {finding.match}"},
                    "locations": [
                        {
                            "physicalLocation": {
                                "artifactLocation": {
                                    "uri": finding.file.replace("\\", "/"),
                                    "uriBaseId": "%SRCROOT%",
                                },
                                "region": {
                                    "startLine": max(1, finding.line),
                                    "startColumn": 1,
                                },
                            }
                        }
                    ],
                }
            )

        source_root = Path(self.target).resolve().as_uri().rstrip("/") + "/"
        sarif = {
            "$schema": SARIF_SCHEMA,
            "version": "2.1.0",
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": "TaskGuard",
                            "version": __version__,
                            "rules": list(rules_map.values()),
                        }
                    },
                    "originalUriBaseIds": {
                        "%SRCROOT%": {"uri": source_root}
                    },
                    "results": results,
                    "columnKind": "utf16CodeUnits",
                }
            ],
        }

        sarif_str = json.dumps(sarif, indent=2, ensure_ascii=False)

        if output_file:
            Path(output_file).write_text(sarif_str, encoding="utf-8")

        return sarif_str
