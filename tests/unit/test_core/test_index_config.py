"""Tests for the configuration system."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from codesift.core.config import (
    CodesiftConfig,
    IndexConfig,
    SearchConfig,
    _deep_merge,
    _resolve_env_vars,
    load_config,
    load_yaml_config,
)


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project dir with HOME and cwd pointed away from real user config."""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for var in ("CODESIFT_ROOT_DIR", "CODESIFT_MAX_RESULTS", "CODESIFT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return project


class TestDeepMerge:
    def test_nested_merge(self):
        base = {"index": {"root_dir": "Assets", "yield_every": 50}}
        override = {"index": {"yield_every": 10}}
        assert _deep_merge(base, override) == {"index": {"root_dir": "Assets", "yield_every": 10}}

    def test_does_not_mutate_base(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"y": 2}})
        assert base == {"a": {"x": 1}}


class TestResolveEnvVars:
    def test_substitutes_set_variable(self, monkeypatch):
        monkeypatch.setenv("GAME_ROOT", "/games/space")
        assert _resolve_env_vars({"root_dir": "${GAME_ROOT}/Assets"}) == {
            "root_dir": "/games/space/Assets"
        }

    def test_keeps_unset_placeholder(self, monkeypatch):
        monkeypatch.delenv("NOPE_NOT_SET", raising=False)
        assert _resolve_env_vars(["${NOPE_NOT_SET}"]) == ["${NOPE_NOT_SET}"]


class TestModels:
    def test_defaults(self):
        config = CodesiftConfig()
        assert config.index.root_dir == "Assets"
        assert config.index.extensions == [".cs", ".js", ".shader", ".compute"]
        assert config.index.yield_every == 50
        assert config.index.max_file_size_kb == 0
        assert config.search.max_results == 20

    def test_extensions_normalized(self):
        config = IndexConfig(extensions=["CS", ".Shader"])
        assert config.extensions == [".cs", ".shader"]

    def test_rejects_negative_yield(self):
        with pytest.raises(ValidationError):
            IndexConfig(yield_every=-1)

    def test_rejects_zero_max_results(self):
        with pytest.raises(ValidationError):
            SearchConfig(max_results=0)


class TestLoadYaml:
    def test_missing_file(self, tmp_path):
        assert load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml_config(path) == {}


class TestLoadConfig:
    def test_relative_root_resolved_against_project(self, isolated: Path):
        config = load_config(isolated)
        assert Path(config.index.root_dir) == isolated / "Assets"

    def test_project_config_overrides(self, isolated: Path):
        cfg_dir = isolated / ".codesift"
        cfg_dir.mkdir()
        (cfg_dir / "config.yaml").write_text(
            "index:\n  root_dir: Scripts\n  extensions: [cs]\nsearch:\n  max_results: 5\n",
            encoding="utf-8",
        )
        config = load_config(isolated)
        assert Path(config.index.root_dir) == isolated / "Scripts"
        assert config.index.extensions == [".cs"]
        assert config.search.max_results == 5
        assert config.index.yield_every == 50

    def test_global_config_below_project(self, isolated: Path, tmp_path: Path):
        global_dir = tmp_path / "home" / ".codesift"
        global_dir.mkdir()
        (global_dir / "config.yaml").write_text(
            "search:\n  max_results: 7\n  context_lines: 4\n", encoding="utf-8",
        )
        project_dir = isolated / ".codesift"
        project_dir.mkdir()
        (project_dir / "config.yaml").write_text("search:\n  max_results: 3\n", encoding="utf-8")
        config = load_config(isolated)
        assert config.search.max_results == 3
        assert config.search.context_lines == 4

    def test_env_overrides(self, isolated: Path, monkeypatch):
        monkeypatch.setenv("CODESIFT_ROOT_DIR", "/abs/Assets")
        monkeypatch.setenv("CODESIFT_MAX_RESULTS", "9")
        config = load_config(isolated)
        assert config.index.root_dir == "/abs/Assets"
        assert config.search.max_results == 9

    def test_env_max_results_validated(self, isolated: Path, monkeypatch):
        monkeypatch.setenv("CODESIFT_MAX_RESULTS", "0")
        with pytest.raises(ValidationError):
            load_config(isolated)

    def test_no_directories_skipped_by_default(self, isolated: Path):
        assert load_config(isolated).index.skip_dirs == []
