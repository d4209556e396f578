"""Regex-based symbol and import extraction for C#-style source files.

This is a deliberate textual approximation, not a parser:

  • no brace or scope tracking — a namespace declaration applies to every
    following line of the file, so a top-level type declared *after* a
    namespace block is still recorded under that namespace;
  • no distinction between declarations and usages — a call such as
    ``return Foo(x);`` can register ``Foo`` as a method;
  • the four declaration patterns are independent, so one line may be
    recorded under several of them.

Only type names are namespace-qualified.  Methods, properties and fields are
always recorded under their bare identifier.

All functions here are pure and never touch the file system, which lets the
scanner run them in a worker thread.
"""

from __future__ import annotations

import re

from codesift.index.schema import SourceFile

SymbolTable = dict[str, list[int]]

_LINE_SPLIT = re.compile(r"\r\n|\n")
_LINE_SPLIT_KEEPENDS = re.compile(r"(?<=\n)")

_NAMESPACE_RE = re.compile(r"namespace\s+([^{]+)")
_USING_RE = re.compile(r"using\s+([^;]+);")

_MODIFIERS = r"(public|private|protected|internal|static)?"

# Each entry: (pattern, qualify_with_namespace).  Tested in this order on
# every line; the identifier is the last capture group.
_DECLARATION_PATTERNS: list[tuple[re.Pattern[str], bool]] = [
    (re.compile(r"class\s+(\w+)"), True),                                   # type
    (re.compile(_MODIFIERS + r"\s*\w+\s+(\w+)\s*\("), False),               # method
    (re.compile(_MODIFIERS + r"\s*\w+\s+(\w+)\s*\{\s*get"), False),          # property
    (re.compile(_MODIFIERS + r"\s*\w+\s+(\w+)\s*;"), False),                # field
]


def split_lines(content: str) -> list[str]:
    """Split *content* on ``\\r\\n`` or ``\\n``.

    A trailing newline yields a final empty element, and empty content
    yields ``[""]``.
    """
    return _LINE_SPLIT.split(content)


def split_lines_keepends(content: str) -> tuple[str, ...]:
    """Same segmentation as :func:`split_lines`, terminators kept."""
    return tuple(_LINE_SPLIT_KEEPENDS.split(content))


def build_source_file(path: str, content: str) -> SourceFile:
    """Wrap *content* into a :class:`SourceFile` snapshot."""
    return SourceFile(path=path, content=content, lines=split_lines_keepends(content))


def extract_symbols(content: str) -> SymbolTable:
    """Return ``{name: [line, ...]}`` for every declaration-looking line.

    Line numbers are 1-based and appended in scan order; a name declared on
    several lines keeps every line.
    """
    symbols: SymbolTable = {}
    current_namespace = ""

    for lineno, line in enumerate(split_lines(content), start=1):
        ns_match = _NAMESPACE_RE.search(line)
        if ns_match:
            current_namespace = ns_match.group(1).strip()

        for pattern, qualify in _DECLARATION_PATTERNS:
            m = pattern.search(line)
            if not m:
                continue
            name = m.group(pattern.groups)
            if qualify and current_namespace:
                name = f"{current_namespace}.{name}"
            symbols.setdefault(name, []).append(lineno)

    return symbols


def extract_imports(content: str) -> list[str]:
    """Return every ``using X;`` module name in source order, duplicates kept."""
    return [m.group(1).strip() for m in _USING_RE.finditer(content)]
