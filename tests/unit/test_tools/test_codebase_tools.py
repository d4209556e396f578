"""Tests for the index query tools and their registry."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from codesift.index.codebase import CodebaseContext
from codesift.tools.codebase import CodebaseSearchTool, FindSymbolTool, ReadLinesTool
from codesift.tools.registry import ToolRegistry


@pytest.fixture()
def codebase(unity_project: Path) -> CodebaseContext:
    ctx = CodebaseContext(unity_project / "Assets")
    ctx.rebuild_index_sync()
    return ctx


@pytest.fixture()
def registry(codebase: CodebaseContext) -> ToolRegistry:
    return ToolRegistry.for_codebase(codebase)


class TestRegistry:
    def test_default_tools(self, registry: ToolRegistry) -> None:
        assert registry.list_names() == ["codebase_search", "find_symbol", "read_lines"]

    def test_unknown_tool(self, registry: ToolRegistry) -> None:
        assert registry.get("bash") is None

    def test_openai_schemas(self, registry: ToolRegistry) -> None:
        schemas = registry.get_openai_schemas()
        search = next(s for s in schemas if s["function"]["name"] == "codebase_search")
        params = search["function"]["parameters"]
        assert params["required"] == ["query"]
        assert params["properties"]["max_results"] == {
            "type": "integer",
            "description": "Maximum number of results.",
            "default": 20,
            "minimum": 1,
        }

    def test_schemas_for_selected_tools(self, registry: ToolRegistry) -> None:
        schemas = registry.get_openai_schemas(["find_symbol", "bash"])
        assert [s["function"]["name"] for s in schemas] == ["find_symbol"]

    def test_rejects_tool_for_other_codebase(self, registry: ToolRegistry, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="different codebase"):
            registry.register(FindSymbolTool(CodebaseContext(tmp_path)))

    def test_rejects_duplicate_name(self, registry: ToolRegistry) -> None:
        with pytest.raises(ValueError, match="already registered"):
            registry.register(FindSymbolTool(registry.codebase))


class TestDispatch:
    def test_json_arguments(self, registry: ToolRegistry) -> None:
        result = asyncio.run(registry.dispatch("find_symbol", '{"name": "TakeDamage"}'))
        assert result.success is True
        assert "Assets/Scripts/Ship.cs:10" in result.output

    def test_dict_arguments_with_numeric_strings(self, registry: ToolRegistry) -> None:
        result = asyncio.run(
            registry.dispatch("read_lines", {"path": "Assets/Mover.js", "start_line": "1", "end_line": "1"})
        )
        assert result.output == "// legacy mover script\n"

    def test_unknown_tool(self, registry: ToolRegistry) -> None:
        result = asyncio.run(registry.dispatch("bash", "{}"))
        assert result.success is False
        assert "Unknown tool: bash" in result.error
        assert "codebase_search" in result.error

    def test_invalid_json(self, registry: ToolRegistry) -> None:
        result = asyncio.run(registry.dispatch("find_symbol", "{name: Ship"))
        assert result.success is False
        assert result.error.startswith("Invalid JSON arguments")

    def test_non_object_arguments(self, registry: ToolRegistry) -> None:
        result = asyncio.run(registry.dispatch("find_symbol", '["Ship"]'))
        assert result.success is False

    def test_argument_named_like_self(self, registry: ToolRegistry) -> None:
        result = asyncio.run(registry.dispatch("find_symbol", {"self": 1, "name": "Ship"}))
        assert result.success is False
        assert "Unknown parameter(s): self" in result.error


class TestArgumentBinding:
    def test_defaults_filled(self, codebase: CodebaseContext) -> None:
        bound = ReadLinesTool(codebase).bind_arguments({"path": "Assets/Mover.js"})
        assert bound == {"path": "Assets/Mover.js", "start_line": 1, "end_line": None}

    def test_below_minimum(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="x", max_results=0))
        assert result.success is False
        assert "max_results must be >= 1" in result.error

    def test_bool_is_not_an_integer(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="x", max_results=True))
        assert result.success is False

    def test_string_type_checked(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(FindSymbolTool(codebase).execute(name=42))
        assert result.error == "name must be a string, got 42"

    def test_empty_index_reported(self, tmp_path: Path) -> None:
        result = asyncio.run(FindSymbolTool(CodebaseContext(tmp_path)).execute(name="Ship"))
        assert result.success is False
        assert "rebuild it first" in result.error



class TestCodebaseSearchTool:
    def test_hits(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="health"))
        assert result.success is True
        assert "Assets/Scripts/Ship.cs:8" in result.output
        assert result.metadata["count"] == 2

    def test_max_results(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="public", max_results=2))
        assert result.metadata["count"] == 2

    def test_no_matches(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="zzz_missing"))
        assert result.success is True
        assert result.output == "No matches found."

    def test_missing_query(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute())
        assert result.success is False
        assert "query" in result.error

    def test_bad_max_results_reported(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(CodebaseSearchTool(codebase).execute(query="x", max_results="lots"))
        assert result.success is False
        assert result.error


class TestFindSymbolTool:
    def test_found(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(FindSymbolTool(codebase).execute(name="Game.Ships.Ship"))
        assert result.success is True
        assert "Assets/Scripts/Ship.cs:6" in result.output
        assert "score 100" in result.output

    def test_not_found(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(FindSymbolTool(codebase).execute(name="Ship"))
        assert result.output == "Symbol not found: Ship"
        assert result.metadata["count"] == 0


class TestReadLinesTool:
    def test_range(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(
            ReadLinesTool(codebase).execute(path="Assets/Mover.js", start_line=2, end_line=3)
        )
        assert result.success is True
        assert result.output == "function Update() {\n    transform.Translate(0, 0, speed);\n"

    def test_whole_file(self, codebase: CodebaseContext, unity_project: Path) -> None:
        result = asyncio.run(ReadLinesTool(codebase).execute(path="Assets/Mover.js"))
        expected = (unity_project / "Assets" / "Mover.js").read_text(encoding="utf-8")
        assert result.output == expected

    def test_unknown_path(self, codebase: CodebaseContext) -> None:
        result = asyncio.run(ReadLinesTool(codebase).execute(path="Assets/Nope.cs"))
        assert result.success is False
        assert "Assets/Nope.cs" in result.error
