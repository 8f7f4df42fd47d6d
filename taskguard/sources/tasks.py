"""
TaskGuard Task Source

Discovers task folders and loads their files as documents for the content
scanner. A task folder is a directory under the tasks directory that holds
a task.md file.

Read failures are collected as ReadFailure records and never mixed with
security findings.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from taskguard.core.config import DEFAULT_TASKS_DIR
from taskguard.core.errors import DocumentReadError
from taskguard.core.scanner import Document

logger = logging.getLogger(__name__)

TASK_MARKER = "task.md"


@dataclass(frozen=True)
class ReadFailure:
    path: str
    message: str


@dataclass
class LoadResult:
    documents: List[Document] = field(default_factory=list)
    failures: List[ReadFailure] = field(default_factory=list)


class TaskRepository:
    """A repository root containing a tasks directory."""

    def __init__(
        self,
        root: Path,
        tasks_dir: str = DEFAULT_TASKS_DIR,
        exclude_files: Iterable[str] = (),
    ) -> None:
        self.root = Path(root)
        self.tasks_path = self.root / tasks_dir
        self.exclude_files = list(exclude_files)

    def discover(self) -> List[str]:
        """Names of all task folders, sorted."""
        if not self.tasks_path.is_dir():
            logger.warning("No tasks directory found at %s", self.tasks_path)
            return []

        return sorted(
            entry.name
            for entry in self.tasks_path.iterdir()
            if entry.is_dir()
            and not entry.name.startswith(".")
            and (entry / TASK_MARKER).is_file()
        )

    def load(self, folders: Optional[Iterable[str]] = None) -> LoadResult:
        """
        Load documents for a scan.

        Args:
            folders: Task folder names for a targeted scan. These are taken
                as given (no task.md required); names that are not
                directories are skipped. When omitted, every discovered
                task is loaded.

        Returns:
            LoadResult with the documents in scan order and any read failures.
        """
        names = list(folders) if folders is not None else self.discover()
        result = LoadResult()

        for name in names:
            task_path = self.tasks_path / name
            if not task_path.is_dir():
                logger.debug("Skipping %s: not a task directory", task_path)
                continue

            for file_path in self._iter_files(task_path):
                try:
                    result.documents.append(self._read(file_path))
                except DocumentReadError as exc:
                    logger.warning("Error scanning %s: %s", exc.path, exc)
                    result.failures.append(ReadFailure(path=exc.path, message=str(exc)))

        return result

    def _iter_files(self, task_path: Path) -> Iterator[Path]:
        for file_path in sorted(task_path.iterdir()):
            if not file_path.is_file():
                continue
            if self._is_excluded(file_path):
                logger.debug("Excluded %s", file_path)
                continue
            yield file_path

    def _is_excluded(self, file_path: Path) -> bool:
        return any(fnmatch.fnmatch(file_path.name, pattern) for pattern in self.exclude_files)

    def _identity(self, file_path: Path) -> str:
        try:
            return file_path.relative_to(self.root).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _read(self, file_path: Path) -> Document:
        identity = self._identity(file_path)
        try:
            with open(file_path, encoding="utf-8", newline="") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentReadError(str(exc), path=identity) from exc
        return Document(identity=identity, content=content)
