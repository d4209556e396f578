"""IndexStore — the in-memory tables behind one index generation.

Four tables are kept per generation:

  files     — path → SourceFile (content + line array)
  symbols   — path → {name: [line, ...]}
  imports   — path → [module, ...]
  analyzed  — set of indexed paths

``add_file()`` is the only mutator and writes all four together, so a reader
can never see a file's content without its symbols.  A store is filled once
by the scanner and then treated as read-only; a rebuild produces a new store
rather than editing the published one.
"""

from __future__ import annotations

import time
from collections import Counter
from pathlib import PurePosixPath
from typing import Iterator

from codesift.index.extractor import SymbolTable
from codesift.index.schema import IndexStats, SourceFile


class IndexStore:
    """Holds per-file content, symbol tables and import lists."""

    def __init__(self) -> None:
        self._files: dict[str, SourceFile] = {}
        self._symbols: dict[str, SymbolTable] = {}
        self._imports: dict[str, list[str]] = {}
        self._analyzed: set[str] = set()
        self._skipped = 0
        self._built_at: float | None = None

    # ── Mutation (scanner only) ───────────────────────────────────────────────

    def add_file(
        self,
        source: SourceFile,
        symbols: SymbolTable,
        imports: list[str],
    ) -> None:
        """Record one scanned file.  Re-adding a path replaces its entry."""
        self._files[source.path] = source
        self._symbols[source.path] = symbols
        self._imports[source.path] = imports
        self._analyzed.add(source.path)

    def mark_skipped(self) -> None:
        self._skipped += 1

    def mark_built(self) -> None:
        self._built_at = time.time()

    def clear(self) -> None:
        self._files.clear()
        self._symbols.clear()
        self._imports.clear()
        self._analyzed.clear()
        self._skipped = 0
        self._built_at = None

    # ── Accessors ─────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    @property
    def analyzed_files(self) -> tuple[str, ...]:
        """Indexed paths in scan order."""
        return tuple(p for p in self._files if p in self._analyzed)

    def get_file(self, path: str) -> SourceFile | None:
        return self._files.get(path)

    def get_symbols(self, path: str) -> SymbolTable:
        """Return a copy of *path*'s symbol table (empty if unknown)."""
        return {name: list(lines) for name, lines in self._symbols.get(path, {}).items()}

    def get_imports(self, path: str) -> list[str]:
        return list(self._imports.get(path, []))

    def iter_files(self) -> Iterator[SourceFile]:
        """Yield stored files in scan order."""
        yield from self._files.values()

    def iter_symbol_tables(self) -> Iterator[tuple[str, SymbolTable]]:
        """Yield ``(path, table)`` pairs in scan order.  Tables are not copied."""
        yield from self._symbols.items()

    def iter_imports(self) -> Iterator[tuple[str, list[str]]]:
        yield from self._imports.items()

    def stats(self) -> IndexStats:
        by_ext = Counter(
            PurePosixPath(path).suffix.lower() or "(none)" for path in self._files
        )
        return IndexStats(
            total_files=len(self._files),
            total_symbols=sum(
                len(lines) for table in self._symbols.values() for lines in table.values()
            ),
            total_imports=sum(len(mods) for mods in self._imports.values()),
            skipped_files=self._skipped,
            files_by_extension=dict(by_ext),
            last_indexed_at=self._built_at,
        )
