"""ProjectScanner — build a fresh IndexStore from a source tree.

One full pass, never incremental:

  1. validate the root directory
  2. list files, keep recognised extensions (optionally cap the file size)
  3. per file: read → split lines → extract symbols → extract imports
  4. add the file to the new store in a single call

File reads and the pure extraction work run in a worker thread
(``asyncio.to_thread``); every store write happens back on the calling task,
so there is exactly one writer.  Every ``yield_every`` files the scanner
awaits ``asyncio.sleep(0)`` to keep a single-threaded host responsive.
Yielding never changes the resulting index.

A file that cannot be read or analysed is logged and left out; it never
aborts the scan.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from codesift.index.errors import IndexConfigError, RebuildCancelledError
from codesift.index.extractor import (
    SymbolTable,
    build_source_file,
    extract_imports,
    extract_symbols,
)
from codesift.index.filesystem import FileSystem, LocalFileSystem
from codesift.index.schema import DEFAULT_EXTENSIONS, SourceFile
from codesift.index.store import IndexStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class CancelToken:
    """Cooperative cancellation flag checked between files."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class FileAnalysis:
    source: SourceFile
    symbols: SymbolTable
    imports: list[str]


def analyze_source(path: str, content: str) -> FileAnalysis:
    """Run every extraction step over one file's text."""
    return FileAnalysis(
        source=build_source_file(path, content),
        symbols=extract_symbols(content),
        imports=extract_imports(content),
    )


class ProjectScanner:
    """Scan a root directory into a new :class:`IndexStore`.

    Parameters
    ----------
    root_dir:
        Directory to walk (e.g. a Unity project's ``Assets/``).
    file_system:
        File access collaborator.  Defaults to ``LocalFileSystem`` rooted at
        ``root_dir``'s parent so paths keep the root's name as prefix.
    extensions:
        Recognised file suffixes, compared case-insensitively.
    yield_every:
        Number of files between cooperative yields.  ``0`` disables yielding.
    max_file_size_kb:
        Files larger than this are skipped.  ``0`` means no limit.
    """

    def __init__(
        self,
        root_dir: Path,
        file_system: FileSystem | None = None,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        yield_every: int = 50,
        max_file_size_kb: int = 0,
    ) -> None:
        self._root_dir = root_dir
        self._fs: FileSystem = file_system or LocalFileSystem(root_dir.resolve().parent)
        self._extensions = frozenset(ext.lower() for ext in extensions)
        self._yield_every = yield_every
        self._max_bytes = max_file_size_kb * 1024

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    # ── Public API ────────────────────────────────────────────────────────────

    async def scan(
        self,
        cancel_token: CancelToken | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> IndexStore:
        """Return a newly built store for the whole tree.

        Raises ``IndexConfigError`` if the root is unusable and
        ``RebuildCancelledError`` if *cancel_token* fires mid-scan.
        """
        self._check_root()
        files = self._collect_files()
        store = IndexStore()
        total = len(files)

        for i, abs_path in enumerate(files, start=1):
            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Scan cancelled after %d/%d files", i - 1, total)
                raise RebuildCancelledError(f"scan of {self._root_dir} cancelled")

            analysis = await self._analyze_file(abs_path)
            if analysis is None:
                store.mark_skipped()
            else:
                store.add_file(analysis.source, analysis.symbols, analysis.imports)

            if progress_callback is not None:
                try:
                    progress_callback(i, total, abs_path.name)
                except Exception as exc:
                    logger.debug("Progress callback error: %s", exc)

            if self._yield_every and i % self._yield_every == 0:
                logger.debug("Codebase analysis progress: %d/%d files", i, total)
                await asyncio.sleep(0)

        store.mark_built()
        logger.info("Codebase scan complete: %d files analysed, %d skipped", len(store), total - len(store))
        return store

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _check_root(self) -> None:
        root = self._root_dir
        if not root.exists():
            raise IndexConfigError(f"Root directory does not exist: {root}")
        if not root.is_dir():
            raise IndexConfigError(f"Root path is not a directory: {root}")

    def _collect_files(self) -> list[Path]:
        """Return recognised files under the root, in listing order."""
        result: list[Path] = []
        try:
            candidates = self._fs.list_files(self._root_dir)
        except OSError as exc:
            raise IndexConfigError(f"Cannot list {self._root_dir}: {exc}") from exc

        for path in candidates:
            if path.suffix.lower() not in self._extensions:
                continue
            if self._max_bytes:
                try:
                    if path.stat().st_size > self._max_bytes:
                        logger.debug("Skipping large file: %s", path)
                        continue
                except OSError as exc:
                    logger.debug("Cannot stat %s: %s", path, exc)
                    continue
            result.append(path)
        return result

    def _read_and_analyze(self, abs_path: Path) -> FileAnalysis:
        content = self._fs.read_file(abs_path)
        rel = self._fs.to_project_relative(abs_path)
        return analyze_source(rel, content)

    async def _analyze_file(self, abs_path: Path) -> FileAnalysis | None:
        """Read and analyse one file off the loop.  Returns None if it must be skipped."""
        try:
            return await asyncio.to_thread(self._read_and_analyze, abs_path)
        except Exception as exc:
            logger.warning("Error analyzing file %s: %s", abs_path, exc)
            return None
