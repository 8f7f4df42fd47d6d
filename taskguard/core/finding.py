"""
TaskGuard Finding Model

A Finding represents one confirmed (non-suppressed) rule match in one
task file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

MAX_MATCH_LENGTH = 100


class Severity(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        """Parse a severity from a string (case-insensitive)."""
        return cls[value.upper()]

    @classmethod
    def ordered(cls) -> list["Severity"]:
        """All severities, most severe first."""
        return [cls.CRITICAL, cls.HIGH, cls.MEDIUM, cls.LOW]

    @property
    def rank(self) -> int:
        return Severity.ordered().index(self)

    @property
    def blocking(self) -> bool:
        """Whether a finding at this severity fails a scan."""
        return self in (Severity.CRITICAL, Severity.HIGH)

    def __ge__(self, other: "Severity") -> bool:
        return self.rank <= other.rank

    def __gt__(self, other: "Severity") -> bool:
        return self.rank < other.rank

    def __le__(self, other: "Severity") -> bool:
        return not self.__gt__(other)

    def __lt__(self, other: "Severity") -> bool:
        return not self.__ge__(other)


def truncate_match(text: str, limit: int = MAX_MATCH_LENGTH) -> str:
    """Cut matched text to at most ``limit`` characters.

    Python strings index by code point, so a multi-byte character is never
    split.
    """
    return text[:limit]


@dataclass(frozen=True)
class Finding:
    severity: Severity
    rule_id: str
    rule_name: str
    description: str
    file: str
    line: int
    match: str

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"

    def display(self) -> str:
        """Human-readable output for console printing."""
        parts = [
            f"[{self.severity.name}] {self.rule_name}",
            f"  Rule: {self.rule_id}",
            f"  Location: {self.location}",
            f"  {self.description}",
            f"  Match: {self.match}",
        ]
        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to a dictionary for JSON serialization."""
        return {
            "severity": self.severity.value,
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "description": self.description,
            "file": self.file,
            "line": self.line,
            "match": self.match,
        }
