"""Index query tools: free-text search, symbol lookup, line-range read."""

from __future__ import annotations

from typing import Any

from codesift.index.schema import SearchResult
from codesift.tools.base import BaseTool, ToolParameter, ToolResult


def _format_hits(hits: list[SearchResult]) -> str:
    return "\n".join(
        f"{h.file_path}:{h.line_number}: {h.line}  (score {h.relevance_score:g})"
        for h in hits
    )


class CodebaseSearchTool(BaseTool):
    """Ranked case-insensitive substring search over indexed files."""

    @property
    def name(self) -> str:
        return "codebase_search"

    @property
    def description(self) -> str:
        return (
            "Case-insensitive text search across the indexed codebase. "
            "Returns matching lines with paths, line numbers and relevance scores."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="query",
                type="string",
                description="Text to search for.",
            ),
            ToolParameter(
                name="max_results",
                type="integer",
                description="Maximum number of results.",
                required=False,
                default=20,
                minimum=1,
            ),
        ]

    async def _run(self, **kwargs: Any) -> ToolResult:
        hits = self._codebase.search(kwargs["query"], kwargs["max_results"])
        if not hits:
            return ToolResult(output="No matches found.", metadata={"count": 0})
        return ToolResult(output=_format_hits(hits), metadata={"count": len(hits)})


class FindSymbolTool(BaseTool):
    """Exact lookup of type, method, property and field declarations."""

    @property
    def name(self) -> str:
        return "find_symbol"

    @property
    def description(self) -> str:
        return (
            "Find where a symbol is declared. Types are namespace-qualified "
            "(e.g. 'App.Player'); methods, properties and fields use the bare name."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="name",
                type="string",
                description="Exact, case-sensitive symbol name.",
            ),
        ]

    async def _run(self, **kwargs: Any) -> ToolResult:
        name: str = kwargs["name"]
        hits = self._codebase.find_symbol(name)
        if not hits:
            return ToolResult(output=f"Symbol not found: {name}", metadata={"count": 0})
        return ToolResult(output=_format_hits(hits), metadata={"count": len(hits)})


class ReadLinesTool(BaseTool):
    """Read an inclusive line range from an indexed file."""

    @property
    def name(self) -> str:
        return "read_lines"

    @property
    def description(self) -> str:
        return "Read lines of an indexed file by project-relative path (1-based, inclusive)."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Project-relative path as listed by the index.",
            ),
            ToolParameter(
                name="start_line",
                type="integer",
                description="First line to read.",
                required=False,
                default=1,
                minimum=1,
            ),
            ToolParameter(
                name="end_line",
                type="integer",
                description="Last line to read (defaults to end of file).",
                required=False,
                minimum=1,
            ),
        ]

    async def _run(self, **kwargs: Any) -> ToolResult:
        path: str = kwargs["path"]
        start: int = kwargs["start_line"]
        end: int | None = kwargs["end_line"]

        content = self._codebase.get_file_content(path, start, end)
        if content is None:
            return ToolResult(
                output="", success=False, error=f"No content for {path} lines {start}-{end or 'end'}"
            )
        return ToolResult(output=content, metadata={"path": path, "start_line": start})
