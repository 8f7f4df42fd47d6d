"""
TaskGuard Rule Registry

The built-in catalog of detection rules, grouped into four severity tiers.
Rules are frozen records; the registry is built once and shared read-only
between scans and worker threads.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator, Optional

from taskguard.core.errors import ConfigurationError
from taskguard.core.finding import Severity


@lru_cache(maxsize=None)
def _compile(source: str) -> re.Pattern:
    return re.compile(source, re.IGNORECASE)


@dataclass(frozen=True)
class PatternSpec:
    """A case-insensitive regular expression.

    Compiled patterns hold no search position; every call to ``finditer`` or
    ``search`` starts its own cursor.
    """

    source: str

    def compile(self) -> re.Pattern:
        return _compile(self.source)

    def __str__(self) -> str:
        return self.source


def _specs(*sources: str) -> tuple[PatternSpec, ...]:
    return tuple(PatternSpec(source) for source in sources)


@dataclass(frozen=True)
class Rule:
    id: str
    name: str
    severity: Severity
    patterns: tuple[PatternSpec, ...]
    description: str
    skip_patterns: tuple[PatternSpec, ...] = field(default_factory=tuple)

    def compiled(self) -> list[tuple[PatternSpec, re.Pattern]]:
        """Compile every match pattern, in declaration order."""
        return [(spec, self._compile(spec)) for spec in self.patterns]

    def compiled_skips(self) -> list[re.Pattern]:
        return [self._compile(spec) for spec in self.skip_patterns]

    def _compile(self, spec: PatternSpec) -> re.Pattern:
        try:
            return spec.compile()
        except re.error as exc:
            raise ConfigurationError(
                f"Rule {self.id}: invalid pattern {spec.source!r}: {exc}",
                rule_id=self.id,
                pattern=spec.source,
            ) from exc


SECURITY_RULES: tuple[Rule, ...] = (
    # ── Critical ──
    Rule(
        id="PROMPT_INJECTION_001",
        name="Instruction Override Attempt",
        severity=Severity.CRITICAL,
        patterns=_specs(
            r"ignore\s+(all\s+)?(previous|above|prior)\s+(instructions?|prompts?|rules?|guidelines?)",
            r"disregard\s+(all\s+)?(previous|above|prior)",
            r"forget\s+(all\s+)?(previous|above|prior|everything)",
            r"override\s+(all\s+)?(previous|above|prior|system)",
        ),
        description="Detected attempt to override AI instructions",
    ),
    Rule(
        id="PROMPT_INJECTION_002",
        name="System Prompt Extraction",
        severity=Severity.CRITICAL,
        patterns=_specs(
            r"what\s+(is|are)\s+(your|the)\s+(system\s+)?prompt",
            r"show\s+(me\s+)?(your|the)\s+(system\s+)?prompt",
            r"reveal\s+(your|the)\s+(system\s+)?prompt",
            r"print\s+(your|the)\s+(system\s+)?prompt",
        ),
        description="Detected attempt to extract system prompts",
    ),
    Rule(
        id="MALICIOUS_CMD_001",
        name="Dangerous System Command",
        severity=Severity.CRITICAL,
        patterns=_specs(
            r"rm\s+-rf\s+/(?!tmp)",
            r"rmdir\s+/s\s+/q\s+[a-z]:\\",
            r"format\s+[a-z]:\s*/[qy]",
            r"del\s+/[fqs]\s+[a-z]:\\",
            r"mkfs\s+",
            r"dd\s+if=.*of=/dev/",
        ),
        description="Detected potentially destructive system command",
    ),
    Rule(
        id="DATA_EXFIL_001",
        name="Data Exfiltration Pattern",
        severity=Severity.CRITICAL,
        patterns=_specs(
            r"curl\s+.*-d\s+.*\$\(",
            r"wget\s+.*--post-data",
            r"curl\s+.*@.*/etc/passwd",
            r"curl\s+.*@.*\.ssh/id_rsa",
        ),
        description="Detected potential data exfiltration attempt",
    ),
    Rule(
        id="SHELL_INJECT_001",
        name="Remote Code Execution",
        severity=Severity.CRITICAL,
        patterns=_specs(
            r"curl\s+.*\|\s*sh",
            r"wget\s+.*\|\s*sh",
            r"curl\s+.*\|\s*bash",
            r"wget\s+.*\|\s*bash",
            r"\$\(curl\s+",
            r"\$\(wget\s+",
        ),
        description="Detected remote code execution pattern",
    ),
    # ── High ──
    Rule(
        id="ROLE_HIJACK_001",
        name="Role Hijacking Attempt",
        severity=Severity.HIGH,
        patterns=_specs(
            r"you\s+are\s+now\s+(a|an|the)",
            r"from\s+now\s+on,?\s+you\s+(are|will\s+be)",
            r"pretend\s+(you\s+are|to\s+be)",
            r"act\s+as\s+(if\s+you|a|an|the)",
            r"roleplay\s+as",
        ),
        description="Detected attempt to change AI role",
    ),
    Rule(
        id="JAILBREAK_001",
        name="Jailbreak Attempt",
        severity=Severity.HIGH,
        patterns=_specs(
            r"\bDAN\b",
            r"do\s+anything\s+now",
            r"jailbreak",
            r"\bunlocked\s+mode\b",
            r"developer\s+mode\s+(enabled|activated|on)",
        ),
        description="Detected potential jailbreak attempt",
    ),
    Rule(
        id="CREDENTIAL_001",
        name="Hardcoded Credentials",
        severity=Severity.HIGH,
        patterns=_specs(
            r"""password\s*[=:]\s*["'][^"'$<{\[\]]+["']""",
            r"""api[_-]?key\s*[=:]\s*["'][^"'$<{\[\]]+["']""",
            r"""secret[_-]?key\s*[=:]\s*["'][^"'$<{\[\]]+["']""",
            r"""access[_-]?token\s*[=:]\s*["'][^"'$<{\[\]]+["']""",
            r"""private[_-]?key\s*[=:]\s*["'][^"'$<{\[\]]+["']""",
        ),
        description="Detected potential hardcoded credentials",
        skip_patterns=_specs(
            r"<your-",
            r"\$\{",
            r"your-.*-here",
            r"example",
            r"placeholder",
            r"xxx",
            r"\*\*\*",
        ),
    ),
    # ── Medium ──
    Rule(
        id="ENCODING_001",
        name="Encoded Content",
        severity=Severity.MEDIUM,
        patterns=_specs(
            r"base64[_-]?decode",
            r"atob\s*\(",
            r"btoa\s*\(",
            r"""Buffer\.from\s*\([^)]+,\s*['"]base64['"]\)""",
        ),
        description="Detected base64 encoding/decoding which could hide malicious content",
    ),
    Rule(
        id="EVAL_001",
        name="Dynamic Code Execution",
        severity=Severity.MEDIUM,
        patterns=_specs(
            r"\beval\s*\(",
            r"\bexec\s*\(",
            r"""Function\s*\(\s*["']""",
            r"new\s+Function\s*\(",
            r"""setTimeout\s*\(\s*["']""",
            r"""setInterval\s*\(\s*["']""",
        ),
        description="Detected dynamic code execution pattern",
    ),
    # ── Low ──
    Rule(
        id="OVERRIDE_001",
        name="Configuration Override",
        severity=Severity.LOW,
        patterns=_specs(
            r"--no-verify",
            r"--skip-validation",
            r"-f\s+--force",
            r"--allow-root",
        ),
        description="Detected security bypass flags",
    ),
    Rule(
        id="SUDO_001",
        name="Elevated Privilege Request",
        severity=Severity.LOW,
        patterns=_specs(
            r"\bsudo\s+",
            r"\bsu\s+-\s+",
            r"Run\s+as\s+administrator",
        ),
        description="Detected request for elevated privileges",
    ),
)


class RuleRegistry:
    """
    Read-only catalog of rules.

    Iteration yields rules tier by tier (critical, high, medium, low) and in
    declaration order within a tier.
    """

    def __init__(self, rules: tuple[Rule, ...] = SECURITY_RULES) -> None:
        # sorted() is stable, so declaration order survives inside a tier
        self._rules: tuple[Rule, ...] = tuple(sorted(rules, key=lambda r: r.severity.rank))

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def tier(self, severity: Severity) -> list[Rule]:
        return [rule for rule in self._rules if rule.severity is severity]

    def tiers(self) -> list[tuple[Severity, list[Rule]]]:
        """All four tiers in priority order, empty tiers included."""
        return [(severity, self.tier(severity)) for severity in Severity.ordered()]

    def get(self, rule_id: str) -> Optional[Rule]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def validate(self) -> None:
        """
        Check the catalog before a scan.

        Raises:
            ConfigurationError: on a duplicate rule id, a rule without
                patterns, or any pattern that does not compile.
        """
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ConfigurationError(f"Duplicate rule id: {rule.id}", rule_id=rule.id)
            seen.add(rule.id)
            if not rule.patterns:
                raise ConfigurationError(f"Rule {rule.id} has no patterns", rule_id=rule.id)
            rule.compiled()
            rule.compiled_skips()


DEFAULT_REGISTRY = RuleRegistry()
