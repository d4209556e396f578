"""Base interface for agent-facing index tools.

A tool is bound to one ``CodebaseContext`` and answers a single kind of
query against its published index.  Arguments arrive from a model's tool
call, so ``execute`` binds them against the declared ``parameters`` first:

  unknown name        → error result
  missing required    → error result
  absent optional     → declared default
  "integer" value     → int (numeric strings accepted, bounded by ``minimum``)
  "string" value      → must already be a str
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from codesift.index.codebase import CodebaseContext


class ToolArgumentError(ValueError):
    """A tool call's arguments do not match the declared parameters."""


@dataclass(frozen=True)
class ToolParameter:
    """Describes a single tool parameter."""

    name: str
    type: str  # "string" or "integer"
    description: str
    required: bool = True
    default: Any = None
    minimum: int | None = None


@dataclass(frozen=True)
class ToolResult:
    """Result of a tool execution."""

    output: str
    success: bool = True
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def _coerce(param: ToolParameter, value: Any) -> Any:
    if param.type == "integer":
        if isinstance(value, bool):
            raise ToolArgumentError(f"{param.name} must be an integer, got {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ToolArgumentError(f"{param.name} must be an integer, got {value!r}") from None
        if param.minimum is not None and number < param.minimum:
            raise ToolArgumentError(f"{param.name} must be >= {param.minimum}, got {number}")
        return number
    if param.type == "string" and not isinstance(value, str):
        raise ToolArgumentError(f"{param.name} must be a string, got {value!r}")
    return value


class BaseTool(ABC):
    """A read-only query over a ``CodebaseContext`` exposed to an LLM."""

    def __init__(self, codebase: CodebaseContext) -> None:
        self._codebase = codebase

    @property
    def codebase(self) -> CodebaseContext:
        return self._codebase

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name (e.g. 'find_symbol')."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for the LLM."""

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of parameters this tool accepts."""

    def bind_arguments(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Validate *arguments* and return them typed, with defaults filled in."""
        declared = {p.name: p for p in self.parameters}
        unknown = sorted(set(arguments) - set(declared))
        if unknown:
            raise ToolArgumentError(f"Unknown parameter(s): {', '.join(unknown)}")
        missing = [p.name for p in self.parameters if p.required and p.name not in arguments]
        if missing:
            raise ToolArgumentError(f"Missing parameter(s): {', '.join(missing)}")

        bound: dict[str, Any] = {}
        for param in self.parameters:
            value = arguments.get(param.name, param.default)
            bound[param.name] = None if value is None else _coerce(param, value)
        return bound

    async def execute(self, **kwargs: Any) -> ToolResult:
        """Run the tool.  Errors are reported in the result, never raised."""
        return await self.call(kwargs)

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        """Like :meth:`execute`, with arguments as a mapping."""
        try:
            bound = self.bind_arguments(arguments)
        except ToolArgumentError as e:
            return ToolResult(output="", success=False, error=str(e))
        if not self._codebase.is_indexed():
            return ToolResult(
                output="",
                success=False,
                error=f"Index for {self._codebase.root_dir} is empty; rebuild it first",
            )
        try:
            return await self._run(**bound)
        except Exception as e:
            return ToolResult(output="", success=False, error=str(e))

    @abstractmethod
    async def _run(self, **kwargs: Any) -> ToolResult:
        """Internal implementation, called with bound arguments only."""

    def to_openai_schema(self) -> dict[str, Any]:
        """Convert to OpenAI function-calling schema."""
        properties: dict[str, Any] = {}
        required: list[str] = []

        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type, "description": param.description}
            if param.default is not None:
                prop["default"] = param.default
            if param.minimum is not None:
                prop["minimum"] = param.minimum
            properties[param.name] = prop
            if param.required:
                required.append(param.name)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": required,
                },
            },
        }
