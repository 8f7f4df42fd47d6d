"""
TaskGuard Configuration Management

Loads and manages configuration from .taskguard.yaml files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from taskguard.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".taskguard.yaml"

DEFAULT_TASKS_DIR = "tasks"

OUTPUT_FORMATS = ("markdown", "console", "json", "sarif")


@dataclass
class OutputConfig:
    format: str = "markdown"
    file: Optional[str] = None


@dataclass
class ScanConfig:
    workers: int = 1
    exclude_files: list[str] = field(default_factory=list)


@dataclass
class TaskGuardConfig:
    """Root configuration object for TaskGuard."""

    tasks_dir: str = DEFAULT_TASKS_DIR
    output: OutputConfig = field(default_factory=OutputConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "TaskGuardConfig":
        """Load configuration from a YAML file, falling back to defaults."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
            return cls()

        if not isinstance(raw, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", config_path)
            return cls()

        return cls._from_dict(raw)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "TaskGuardConfig":
        """Build config from a parsed YAML dictionary."""
        output_data = _section(data, "output")
        fmt = output_data.get("format", "markdown")
        if fmt not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format {fmt!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        output = OutputConfig(format=fmt, file=output_data.get("file"))

        scan_data = _section(data, "scan")
        try:
            workers = int(scan_data.get("workers", 1))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"scan.workers must be an integer: {exc}") from exc
        scan = ScanConfig(
            workers=max(1, workers),
            exclude_files=_string_list(scan_data.get("exclude_files"), "scan.exclude_files"),
        )

        return cls(
            tasks_dir=str(data.get("tasks_dir", DEFAULT_TASKS_DIR)),
            output=output,
            scan=scan,
        )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a mapping section, treating a missing or empty one as {}."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{key} must be a mapping, got {type(value).__name__}")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{key} must be a list of strings, got {value!r}")
    return list(value)


def generate_default_config() -> str:
    """Generate a default .taskguard.yaml configuration file content."""
    return """\
# TaskGuard Configuration

# Directory (relative to the scanned root) holding one folder per task
tasks_dir: tasks

# Output settings
output:
  format: markdown  # markdown, console, json, sarif
  # file: taskguard-report.md

# Scan settings
scan:
  workers: 1
  exclude_files:
    - "*.png"
    - "*.jpg"
"""
