"""
TaskGuard Scan Summary

Groups findings by severity and decides whether a scan passed. Critical
and high findings fail a scan; medium and low findings only inform it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from taskguard.core.finding import Finding, Severity


class ScanStatus(Enum):
    FAILED = "failed"
    WARNING = "warning"
    PASSED_WITH_NOTES = "passed_with_notes"
    PASSED = "passed"


@dataclass(frozen=True)
class ScanSummary:
    findings: tuple[Finding, ...] = ()
    by_severity: dict[Severity, list[Finding]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # by_severity is always derived from findings.
        findings = tuple(self.findings)
        grouped: dict[Severity, list[Finding]] = {sev: [] for sev in Severity.ordered()}
        for finding in findings:
            grouped[finding.severity].append(finding)
        object.__setattr__(self, "findings", findings)
        object.__setattr__(self, "by_severity", grouped)

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "ScanSummary":
        return cls(findings=tuple(findings))

    def count(self, severity: Severity) -> int:
        return len(self.by_severity.get(severity, []))

    @property
    def total(self) -> int:
        return sum(self.count(sev) for sev in Severity.ordered())

    @property
    def passed(self) -> bool:
        return not any(self.count(sev) for sev in Severity.ordered() if sev.blocking)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    @property
    def status(self) -> ScanStatus:
        if not self.passed:
            return ScanStatus.FAILED
        if self.count(Severity.MEDIUM):
            return ScanStatus.WARNING
        if self.count(Severity.LOW):
            return ScanStatus.PASSED_WITH_NOTES
        return ScanStatus.PASSED

    def counts(self) -> dict[str, int]:
        """Per-severity counts plus total, keyed by lowercase name."""
        result = {sev.value: self.count(sev) for sev in Severity.ordered()}
        result["total"] = self.total
        return result
