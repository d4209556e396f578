"""File-system collaborator consumed by the scanner.

The scanner only needs three operations, so they are expressed as a
``Protocol``: tests and host editors can hand in their own implementation
without touching the disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol

from codesift.index.schema import DEFAULT_SKIP_DIRS

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Minimal file access used while building an index."""

    def list_files(self, root: Path) -> list[Path]:
        """Return every file under *root*, recursively."""

    def read_file(self, path: Path) -> str:
        """Return the text of *path*.  Raises ``OSError`` on failure."""

    def to_project_relative(self, path: Path) -> str:
        """Return *path* relative to the project directory, POSIX separators."""


class LocalFileSystem:
    """``FileSystem`` backed by ``pathlib``.

    Parameters
    ----------
    project_dir:
        Directory that relative paths are computed against.  Usually the
        parent of the scanned root (e.g. project root while scanning
        ``Assets/``), so paths read like ``Assets/Scripts/Ship.cs``.
    skip_dirs:
        Directory names pruned while walking.  Empty by default, so every
        folder under the root is listed.
    """

    def __init__(
        self,
        project_dir: Path,
        skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    ) -> None:
        self._project_dir = project_dir.resolve()
        self._skip_dirs = frozenset(skip_dirs)

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def list_files(self, root: Path) -> list[Path]:
        result: list[Path] = []
        root = root.resolve()
        for path in sorted(root.rglob("*")):
            rel_parts = path.relative_to(root).parts
            if any(part in self._skip_dirs for part in rel_parts[:-1]):
                continue
            if path.is_file():
                result.append(path)
        return result

    def read_file(self, path: Path) -> str:
        # newline="" keeps \r\n so stored content matches the bytes on disk
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def to_project_relative(self, path: Path) -> str:
        resolved = path.resolve()
        try:
            return resolved.relative_to(self._project_dir).as_posix()
        except ValueError:
            logger.debug("%s is outside %s, keeping absolute path", resolved, self._project_dir)
            return resolved.as_posix()
