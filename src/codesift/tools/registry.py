"""Tool registry bound to a single codebase index."""

from __future__ import annotations

import json
import logging
from typing import Any

from codesift.index.codebase import CodebaseContext
from codesift.tools.base import BaseTool, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """The tools one assistant may call against one ``CodebaseContext``."""

    def __init__(self, codebase: CodebaseContext) -> None:
        self._codebase = codebase
        self._tools: dict[str, BaseTool] = {}

    @classmethod
    def for_codebase(cls, codebase: CodebaseContext) -> ToolRegistry:
        """Create a registry holding the built-in index tools."""
        from codesift.tools.codebase import CodebaseSearchTool, FindSymbolTool, ReadLinesTool

        registry = cls(codebase)
        for tool_cls in (CodebaseSearchTool, FindSymbolTool, ReadLinesTool):
            registry.register(tool_cls(codebase))
        return registry

    @property
    def codebase(self) -> CodebaseContext:
        return self._codebase

    def register(self, tool: BaseTool) -> None:
        """Register *tool*.  It must query this registry's codebase."""
        if tool.codebase is not self._codebase:
            raise ValueError(f"Tool {tool.name!r} is bound to a different codebase")
        if tool.name in self._tools:
            raise ValueError(f"Tool {tool.name!r} is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def get_openai_schemas(self, tool_names: list[str] | None = None) -> list[dict[str, Any]]:
        """Get OpenAI function schemas for *tool_names* (or every tool)."""
        tools = (
            [self._tools[n] for n in tool_names if n in self._tools]
            if tool_names
            else list(self._tools.values())
        )
        return [t.to_openai_schema() for t in tools]

    async def dispatch(self, name: str, arguments: str | dict[str, Any] | None = None) -> ToolResult:
        """Run a model tool call.  *arguments* may be the raw JSON string."""
        tool = self._tools.get(name)
        if tool is None:
            available = ", ".join(self._tools) or "none"
            return ToolResult(
                output="", success=False, error=f"Unknown tool: {name} (available: {available})"
            )

        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as exc:
                return ToolResult(output="", success=False, error=f"Invalid JSON arguments: {exc}")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return ToolResult(output="", success=False, error="Tool arguments must be an object")

        logger.debug("Dispatching %s(%s)", name, arguments)
        return await tool.call(arguments)
