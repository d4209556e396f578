"""IndexContextEnricher — compact codebase context for LLM prompts.

Emits short, token-efficient strings built from a ``CodebaseContext``:

  • get_project_summary()   — one-liner stats (files, symbols, extensions)
  • get_context(query)      — summary + symbol definitions + top search hits

When the index is empty the methods return empty strings so callers can
safely include the output without guarding against None.
"""

from __future__ import annotations

import logging
import re

from codesift.index.codebase import CodebaseContext
from codesift.index.schema import SearchResult

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][\w.]*")


class IndexContextEnricher:
    """Read from ``CodebaseContext`` and produce compact context strings.

    Parameters
    ----------
    codebase:
        Built (or building) index; the caller owns its lifecycle.
    max_search_hits:
        Cap on free-text hits listed in :meth:`get_context`.
    """

    def __init__(self, codebase: CodebaseContext, max_search_hits: int = 8) -> None:
        self._codebase = codebase
        self._max_search_hits = max_search_hits

    def is_indexed(self) -> bool:
        return self._codebase.is_indexed()

    def get_project_summary(self) -> str:
        """Return a one-line summary, or an empty string if nothing is indexed."""
        stats = self._codebase.stats()
        if stats.total_files == 0:
            return ""

        parts: list[str] = [
            f"{stats.total_files} files",
            f"{stats.total_symbols} symbols",
            f"{stats.total_imports} imports",
        ]
        if stats.files_by_extension:
            ext_parts = ", ".join(
                f"{cnt} {ext}"
                for ext, cnt in sorted(
                    stats.files_by_extension.items(), key=lambda kv: (-kv[1], kv[0])
                )
            )
            parts.append(f"extensions: {ext_parts}")

        return "Codebase index: " + " · ".join(parts) + "."

    def find_definitions(self, query: str) -> list[SearchResult]:
        """Look up every identifier-looking term of *query* as a symbol."""
        seen: set[tuple[str, int]] = set()
        results: list[SearchResult] = []
        for term in _IDENTIFIER_RE.findall(query):
            for hit in self._codebase.find_symbol(term):
                key = (hit.file_path, hit.line_number)
                if key in seen:
                    continue
                seen.add(key)
                results.append(hit)
        return results

    def get_context(self, query: str = "", max_chars: int = 3000) -> str:
        """Return a compact context block for prompt injection.

        Truncates at *max_chars* to stay token-budget-friendly.
        """
        if not self.is_indexed():
            return ""

        lines: list[str] = [self.get_project_summary()]

        if query.strip():
            definitions = self.find_definitions(query)
            if definitions:
                lines.append("Definitions:")
                for hit in definitions:
                    lines.append(f"  - `{hit.file_path}:{hit.line_number}` {hit.line.strip()}")

            hits = self._codebase.search(query.strip(), self._max_search_hits)
            if hits:
                lines.append(f"Matches for `{query.strip()}`:")
                for hit in hits:
                    lines.append(f"  - `{hit.file_path}:{hit.line_number}` {hit.line}")

        result = "\n".join(lines)
        if len(result) > max_chars:
            result = result[: max_chars - 3] + "..."
        logger.debug("Built codebase context: %d chars for query %r", len(result), query)
        return result
