"""Codebase index module — in-memory symbol tables and free-text search."""

from codesift.index.codebase import CodebaseContext
from codesift.index.context_enricher import IndexContextEnricher
from codesift.index.errors import IndexConfigError, RebuildCancelledError
from codesift.index.schema import IndexStats, SearchResult, SourceFile

__all__ = [
    "CodebaseContext",
    "IndexContextEnricher",
    "IndexConfigError",
    "RebuildCancelledError",
    "IndexStats",
    "SearchResult",
    "SourceFile",
]
