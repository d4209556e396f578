"""Rich-based output rendering for the CLI."""

from __future__ import annotations

from pathlib import PurePosixPath

from rich.console import Console
from rich.markdown import Markdown
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from codesift.index.schema import IndexStats, SearchResult

_LEXERS: dict[str, str] = {
    ".cs": "csharp",
    ".js": "javascript",
    ".shader": "glsl",
    ".compute": "hlsl",
}


class Renderer:
    """Renders index results to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def markdown(self, text: str) -> None:
        self.console.print(Markdown(text))

    def results(self, title: str, hits: list[SearchResult]) -> None:
        """Render search or symbol hits as a table."""
        if not hits:
            self.info("No results.")
            return
        table = Table(title=title, show_lines=False)
        table.add_column("Score", justify="right", style="cyan", no_wrap=True)
        table.add_column("Location", style="magenta", no_wrap=True)
        table.add_column("Line")
        for hit in hits:
            table.add_row(
                f"{hit.relevance_score:g}",
                f"{hit.file_path}:{hit.line_number}",
                hit.line.strip(),
            )
        self.console.print(table)

    def code(self, path: str, content: str, start_line: int = 1) -> None:
        """Render a file excerpt with syntax highlighting."""
        lexer = _LEXERS.get(PurePosixPath(path).suffix.lower(), "text")
        syntax = Syntax(
            content.rstrip("\n"),
            lexer,
            theme="monokai",
            line_numbers=True,
            start_line=start_line,
        )
        self.console.print(syntax)

    def stats(self, stats: IndexStats) -> None:
        self.success(
            f"Indexed {stats.total_files} files · {stats.total_symbols} symbols · "
            f"{stats.total_imports} imports"
        )
        if stats.skipped_files:
            self.warning(f"{stats.skipped_files} file(s) could not be read and were skipped")
        if stats.files_by_extension:
            ext_str = ", ".join(
                f"{cnt} {ext}"
                for ext, cnt in sorted(stats.files_by_extension.items(), key=lambda kv: -kv[1])
            )
            self.info(f"Extensions: {ext_str}")

    def error(self, message: str) -> None:
        self.console.print(Text(f"Error: {message}", style="bold red"))

    def info(self, message: str) -> None:
        self.console.print(Text(message, style="dim"))

    def success(self, message: str) -> None:
        self.console.print(Text(message, style="bold green"))

    def warning(self, message: str) -> None:
        self.console.print(Text(f"Warning: {message}", style="yellow"))
