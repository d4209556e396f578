"""Immutable dataclass models for the in-memory codebase index."""

from __future__ import annotations

from dataclasses import dataclass, field


# ── Scan configuration defaults ───────────────────────────────────────────────

DEFAULT_EXTENSIONS: tuple[str, ...] = (".cs", ".js", ".shader", ".compute")

# Nothing under the scanned root is pruned unless configured.
DEFAULT_SKIP_DIRS: tuple[str, ...] = ()

# Relevance scoring for free-text search
BASE_SCORE = 10.0
WORD_BONUS = 50.0          # query occurs as a whitespace-delimited word
BOUNDARY_BONUS = 30.0      # query starts at a regex word boundary
OCCURRENCE_BONUS = 5.0     # per non-overlapping occurrence on the line
SYMBOL_SCORE = 100.0       # exact symbol-definition hit


def strip_line_ending(line: str) -> str:
    """Drop a single trailing ``\\r\\n`` or ``\\n``."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


# ── Dataclass models ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SourceFile:
    """Snapshot of one scanned file.

    ``lines`` keeps each line's terminator so the stored content can be
    reassembled verbatim from any line range.
    """

    path: str                   # project-relative, POSIX separators
    content: str
    lines: tuple[str, ...]

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, number: int) -> str | None:
        """Return 1-based line *number* without its terminator, or None."""
        if number < 1 or number > len(self.lines):
            return None
        return strip_line_ending(self.lines[number - 1])


@dataclass(frozen=True)
class SearchResult:
    """A single hit produced by a query.  Never stored in the index."""

    file_path: str
    line_number: int            # 1-based
    line: str
    relevance_score: float = 0.0
    context: str = ""


@dataclass(frozen=True)
class IndexStats:
    """Snapshot statistics of one index generation."""

    total_files: int
    total_symbols: int          # recorded declaration sites
    total_imports: int
    skipped_files: int = 0
    files_by_extension: dict[str, int] = field(default_factory=dict)
    last_indexed_at: float | None = None   # Unix timestamp, None if never built
