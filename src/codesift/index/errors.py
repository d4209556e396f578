"""Exceptions raised by the index subsystem."""

from __future__ import annotations


class IndexConfigError(ValueError):
    """The configured scan root is missing or is not a directory."""


class RebuildCancelledError(RuntimeError):
    """A rebuild was superseded by a newer one before it finished."""
