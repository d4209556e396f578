"""codesift - codebase indexing and search for AI coding assistants."""

__version__ = "0.1.0"
