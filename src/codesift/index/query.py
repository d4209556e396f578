"""QueryEngine — free-text search and symbol lookup over an IndexStore.

Queries are read-only and never touch the file system.  Two kinds:

  search(query, max_results)  — case-insensitive substring match per line,
                                scored and ranked
  find_symbol(name)           — exact, case-sensitive definition lookup

``search`` stops scanning as soon as ``max_results`` hits are collected and
only then ranks them, so with a small cap the hits come from whichever files
were indexed first rather than from the best matches overall.
"""

from __future__ import annotations

import re

from codesift.index.extractor import split_lines
from codesift.index.schema import (
    BASE_SCORE,
    BOUNDARY_BONUS,
    OCCURRENCE_BONUS,
    SYMBOL_SCORE,
    WORD_BONUS,
    SearchResult,
)
from codesift.index.store import IndexStore


def relevance_score(line: str, query: str) -> float:
    """Score a matching *line* for a lower-cased *query*.

    base + whole-word bonus + word-boundary bonus + per-occurrence bonus.
    """
    lowered = line.lower()
    score = BASE_SCORE

    if f" {query} " in lowered:
        score += WORD_BONUS

    if re.search(r"\b" + re.escape(query), lowered):
        score += BOUNDARY_BONUS

    score += lowered.count(query) * OCCURRENCE_BONUS
    return score


class QueryEngine:
    """Answer queries against a single :class:`IndexStore` generation."""

    def __init__(self, store: IndexStore) -> None:
        self._store = store

    # ── Free-text search ──────────────────────────────────────────────────────

    def search(self, query: str, max_results: int = 20) -> list[SearchResult]:
        """Return up to *max_results* matching lines, highest score first.

        Ties keep discovery order.  Empty query or empty index → ``[]``.
        """
        if not query or max_results <= 0:
            return []

        needle = query.lower()
        results: list[SearchResult] = []

        for source in self._store.iter_files():
            if needle not in source.content.lower():
                continue
            for lineno, line in enumerate(split_lines(source.content), start=1):
                if needle not in line.lower():
                    continue
                results.append(SearchResult(
                    file_path=source.path,
                    line_number=lineno,
                    line=line.strip(),
                    relevance_score=relevance_score(line, needle),
                ))
                if len(results) >= max_results:
                    break
            if len(results) >= max_results:
                break

        # sorted() is stable, so equal scores stay in discovery order
        return sorted(results, key=lambda r: r.relevance_score, reverse=True)

    def search_with_context(
        self,
        query: str,
        max_results: int = 20,
        context_lines: int = 2,
    ) -> list[SearchResult]:
        """Like :meth:`search`, with ``context`` holding the surrounding lines."""
        hits = self.search(query, max_results)
        return [
            SearchResult(
                file_path=hit.file_path,
                line_number=hit.line_number,
                line=hit.line,
                relevance_score=hit.relevance_score,
                context=self.get_file_content(
                    hit.file_path,
                    hit.line_number - context_lines,
                    hit.line_number + context_lines,
                ) or "",
            )
            for hit in hits
        ]

    # ── Symbol lookup ─────────────────────────────────────────────────────────

    def find_symbol(self, name: str) -> list[SearchResult]:
        """Return every recorded declaration of *name*, file order then line order."""
        results: list[SearchResult] = []
        for path, table in self._store.iter_symbol_tables():
            lines = table.get(name)
            if not lines:
                continue
            for lineno in lines:
                text = self.get_line_content(path, lineno)
                results.append(SearchResult(
                    file_path=path,
                    line_number=lineno,
                    line=text if text is not None else f"Definition of {name}",
                    relevance_score=SYMBOL_SCORE,
                ))
        return results

    # ── Content accessors ─────────────────────────────────────────────────────

    def get_line_content(self, path: str, line: int) -> str | None:
        """Return 1-based *line* of *path*, or None if file or line is unknown."""
        source = self._store.get_file(path)
        if source is None:
            return None
        return source.line(line)

    def get_file_content(
        self,
        path: str,
        start_line: int = 1,
        end_line: int | None = None,
    ) -> str | None:
        """Return lines *start_line*..*end_line* (inclusive, 1-based) of *path*.

        The range is clamped to the file; line terminators are preserved, so
        the default range returns the stored content unchanged.  Returns None
        for an unknown file or an empty clamped range.
        """
        source = self._store.get_file(path)
        if source is None:
            return None

        start = max(1, start_line)
        end = source.line_count if end_line is None else min(source.line_count, end_line)
        if start > end:
            return None
        return "".join(source.lines[start - 1:end])
