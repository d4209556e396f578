"""codesift - codebase indexing and search for AI coding assistants."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

_HELP = """\
Usage: codesift index   [--dir <project>]
       codesift search  <query> [--max <n>] [--context] [--dir <project>]
       codesift symbol  <name> [--dir <project>]
       codesift show    <path> [--start <line>] [--end <line>] [--dir <project>]
       codesift files   [--dir <project>]
       codesift context <query> [--dir <project>]

Every command rebuilds the in-memory index first; nothing is persisted.
The scanned root is index.root_dir from config (default: <project>/Assets).

Options:
  --dir <path>     Project directory (default: current directory)
  --max <n>        Maximum search results (default: search.max_results)
  --context        Show surrounding lines for each search hit
  --start <line>   First line to show (1-based)
  --end <line>     Last line to show (inclusive)
  --help, -h       Show this help message and exit
"""

_COMMANDS = ("index", "search", "symbol", "show", "files", "context")


@dataclass
class CLIArgs:
    """Arguments parsed from the command line."""

    command: str
    positional: str = ""
    project_dir: Path | None = None
    max_results: int | None = None
    with_context: bool = False
    start_line: int = 1
    end_line: int | None = None


def main(argv: list[str] | None = None) -> None:
    """Entry point for the codesift CLI."""
    load_dotenv()
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or "--help" in args or "-h" in args:
        print(_HELP)
        sys.exit(0)

    parsed = _parse_args(args)
    sys.exit(_run(parsed))


def _usage_error(message: str) -> NoReturn:
    print(message)
    print("Run 'codesift --help' for usage.")
    sys.exit(1)


def _parse_int(flag: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        _usage_error(f"{flag} expects an integer, got {value!r}")


def _parse_args(args: list[str]) -> CLIArgs:
    """Parse sub-command and flags from argv."""
    command = args[0]
    if command not in _COMMANDS:
        _usage_error(f"Unknown command: {command}")

    parsed = CLIArgs(command=command)
    positional: list[str] = []
    i = 1
    while i < len(args):
        arg = args[i]
        if arg == "--dir" and i + 1 < len(args):
            parsed.project_dir = Path(args[i + 1])
            i += 2
        elif arg == "--max" and i + 1 < len(args):
            parsed.max_results = _parse_int(arg, args[i + 1])
            i += 2
        elif arg == "--start" and i + 1 < len(args):
            parsed.start_line = _parse_int(arg, args[i + 1])
            i += 2
        elif arg == "--end" and i + 1 < len(args):
            parsed.end_line = _parse_int(arg, args[i + 1])
            i += 2
        elif arg == "--context":
            parsed.with_context = True
            i += 1
        elif arg.startswith("--"):
            _usage_error(f"Unknown argument: {arg}")
        else:
            positional.append(arg)
            i += 1

    needs_positional = command in ("search", "symbol", "show", "context")
    if needs_positional and not positional:
        _usage_error(f"'{command}' needs an argument")
    if not needs_positional and positional:
        _usage_error(f"Unexpected argument: {positional[0]}")
    parsed.positional = " ".join(positional)
    return parsed


def _configure_logging(level: str) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=False)],
    )


def _run(args: CLIArgs) -> int:
    """Build the index and execute *args.command*.  Returns an exit code."""
    from pydantic import ValidationError

    from codesift.cli.renderer import Renderer
    from codesift.core.config import EnvSettings, load_config
    from codesift.index.codebase import CodebaseContext
    from codesift.index.context_enricher import IndexContextEnricher
    from codesift.index.errors import IndexConfigError
    from codesift.index.filesystem import LocalFileSystem

    _configure_logging(EnvSettings().log_level)
    renderer = Renderer()

    project_dir = (args.project_dir or Path.cwd()).resolve()
    try:
        config = load_config(project_dir)
    except ValidationError as exc:
        renderer.error(f"Invalid configuration: {exc}")
        return 2
    file_system = LocalFileSystem(project_dir, skip_dirs=config.index.skip_dirs)
    codebase = CodebaseContext.from_config(config.index, file_system=file_system)

    try:
        with renderer.console.status(f"Indexing {codebase.root_dir} ..."):
            stats = codebase.rebuild_index_sync()
    except IndexConfigError as exc:
        renderer.error(str(exc))
        return 2

    if args.command == "index":
        renderer.stats(stats)
        return 0

    if args.command == "files":
        for path in codebase.list_analyzed_files():
            renderer.console.print(path, highlight=False)
        return 0

    if args.command == "search":
        max_results = (
            args.max_results if args.max_results is not None else config.search.max_results
        )
        if args.with_context:
            hits = codebase.search_with_context(
                args.positional, max_results, config.search.context_lines
            )
            for hit in hits:
                renderer.info(f"{hit.file_path}:{hit.line_number}  (score {hit.relevance_score:g})")
                start = max(1, hit.line_number - config.search.context_lines)
                renderer.code(hit.file_path, hit.context, start_line=start)
            if not hits:
                renderer.info("No results.")
        else:
            hits = codebase.search(args.positional, max_results)
            renderer.results(f"Search: {args.positional}", hits)
        return 0

    if args.command == "symbol":
        renderer.results(f"Symbol: {args.positional}", codebase.find_symbol(args.positional))
        return 0

    if args.command == "show":
        content = codebase.get_file_content(args.positional, args.start_line, args.end_line)
        if content is None:
            renderer.error(f"Nothing to show for {args.positional}")
            return 1
        renderer.code(args.positional, content, start_line=max(1, args.start_line))
        return 0

    # context
    enricher = IndexContextEnricher(codebase)
    text = enricher.get_context(args.positional, max_chars=config.search.context_max_chars)
    renderer.markdown(text or "_Index is empty._")
    return 0


if __name__ == "__main__":
    main()
