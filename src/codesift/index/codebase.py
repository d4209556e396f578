"""CodebaseContext — the index object handed to planners, prompt builders and UI.

Owns one published :class:`IndexStore` generation and the rebuild lifecycle:

  rebuild_index()  — full clear-and-rescan into a *new* store, then publish
  search() / find_symbol() / get_*()  — read the currently published store

A rebuild never edits the published store in place.  Readers keep seeing the
previous generation until the new one is complete, then the reference is
swapped in one assignment.  Starting a rebuild cancels any rebuild still in
flight; the stale one stops at its next file boundary and raises
``RebuildCancelledError`` to its own caller.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from codesift.index.extractor import SymbolTable
from codesift.index.filesystem import FileSystem
from codesift.index.query import QueryEngine
from codesift.index.scanner import CancelToken, ProgressCallback, ProjectScanner
from codesift.index.schema import DEFAULT_EXTENSIONS, IndexStats, SearchResult
from codesift.index.store import IndexStore

if TYPE_CHECKING:
    from codesift.core.config import IndexConfig

logger = logging.getLogger(__name__)


class CodebaseContext:
    """In-memory codebase index with search and symbol lookup.

    Parameters
    ----------
    root_dir:
        Directory scanned on every rebuild.
    file_system:
        Optional file access collaborator (see ``codesift.index.filesystem``).
    extensions:
        Recognised source suffixes.
    yield_every:
        Files between cooperative yields during a rebuild.
    max_file_size_kb:
        Per-file size cap, ``0`` for none.
    """

    def __init__(
        self,
        root_dir: Path,
        file_system: FileSystem | None = None,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        yield_every: int = 50,
        max_file_size_kb: int = 0,
    ) -> None:
        self._scanner = ProjectScanner(
            root_dir,
            file_system=file_system,
            extensions=extensions,
            yield_every=yield_every,
            max_file_size_kb=max_file_size_kb,
        )
        self._store = IndexStore()
        self._engine = QueryEngine(self._store)
        self._rebuild_lock = asyncio.Lock()
        self._pending: CancelToken | None = None

    @classmethod
    def from_config(
        cls,
        config: IndexConfig,
        file_system: FileSystem | None = None,
    ) -> CodebaseContext:
        """Build a context from an ``IndexConfig``."""
        return cls(
            Path(config.root_dir),
            file_system=file_system,
            extensions=config.extensions,
            yield_every=config.yield_every,
            max_file_size_kb=config.max_file_size_kb,
        )

    @property
    def root_dir(self) -> Path:
        return self._scanner.root_dir

    # ── Rebuild ───────────────────────────────────────────────────────────────

    async def rebuild_index(
        self,
        progress_callback: ProgressCallback | None = None,
    ) -> IndexStats:
        """Rescan the whole tree and publish the result.

        Raises ``IndexConfigError`` for a bad root and
        ``RebuildCancelledError`` if a newer rebuild supersedes this one.
        In both cases the previously published index stays in place.
        """
        if self._pending is not None:
            self._pending.cancel()
        token = CancelToken()
        self._pending = token

        async with self._rebuild_lock:
            try:
                store = await self._scanner.scan(
                    cancel_token=token,
                    progress_callback=progress_callback,
                )
            finally:
                if self._pending is token:
                    self._pending = None

            self._publish(store)

        stats = store.stats()
        logger.info(
            "Codebase context initialized: %d files analyzed, %d symbols",
            stats.total_files, stats.total_symbols,
        )
        return stats

    def rebuild_index_sync(
        self,
        progress_callback: ProgressCallback | None = None,
    ) -> IndexStats:
        """Blocking wrapper around :meth:`rebuild_index` for non-async callers."""
        return asyncio.run(self.rebuild_index(progress_callback=progress_callback))

    def _publish(self, store: IndexStore) -> None:
        # Engine and store are swapped together; readers grab self._engine once.
        self._engine = QueryEngine(store)
        self._store = store

    # ── Queries ───────────────────────────────────────────────────────────────

    def search(self, query: str, max_results: int = 20) -> list[SearchResult]:
        return self._engine.search(query, max_results)

    def search_with_context(
        self,
        query: str,
        max_results: int = 20,
        context_lines: int = 2,
    ) -> list[SearchResult]:
        return self._engine.search_with_context(query, max_results, context_lines)

    def find_symbol(self, name: str) -> list[SearchResult]:
        return self._engine.find_symbol(name)

    def get_line_content(self, path: str, line: int) -> str | None:
        return self._engine.get_line_content(path, line)

    def get_file_content(
        self,
        path: str,
        start_line: int = 1,
        end_line: int | None = None,
    ) -> str | None:
        return self._engine.get_file_content(path, start_line, end_line)

    def list_analyzed_files(self) -> list[str]:
        return list(self._store.analyzed_files)

    def get_symbols(self, path: str) -> SymbolTable:
        return self._store.get_symbols(path)

    def get_imports(self, path: str) -> list[str]:
        return self._store.get_imports(path)

    def find_importers(self, module: str) -> list[str]:
        """Return files whose import list contains *module* exactly."""
        return [path for path, mods in self._store.iter_imports() if module in mods]

    def stats(self) -> IndexStats:
        return self._store.stats()

    def is_indexed(self) -> bool:
        return len(self._store) > 0
