"""
TaskGuard - Content Security Scanner for Task Repositories

Rule-based scanner for task definitions and their reference files that detects:
- Prompt injection and role hijacking phrasing
- Destructive system commands
- Data exfiltration and remote code execution idioms
- Hardcoded credentials
- Dynamic code execution and privilege escalation flags

Licensed under the Apache License 2.0
"""

__version__ = "1.0.0"


__all__ = [
    "__version__",
]
