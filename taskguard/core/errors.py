"""
TaskGuard Errors

Configuration errors abort a scan. Read errors stay with the task source
and are reported next to findings, never as findings.
"""

from __future__ import annotations

from typing import Optional


class TaskGuardError(Exception):
    """Base exception for all TaskGuard errors."""


class ConfigurationError(TaskGuardError):
    """Raised when a rule pattern or a configuration value is unusable."""

    def __init__(self, message: str, rule_id: Optional[str] = None, pattern: Optional[str] = None):
        self.rule_id = rule_id
        self.pattern = pattern
        super().__init__(message)


class DocumentReadError(TaskGuardError):
    """Raised when a task file cannot be read or decoded."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)
