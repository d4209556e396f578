"""Configuration system for codesift using Pydantic."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codesift.index.schema import DEFAULT_EXTENSIONS, DEFAULT_SKIP_DIRS


class IndexConfig(BaseModel):
    """What to scan and how."""

    root_dir: str = "Assets"
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    skip_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    yield_every: int = Field(default=50, ge=0)
    max_file_size_kb: int = Field(default=0, ge=0)  # 0 = unlimited

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value]


class SearchConfig(BaseModel):
    """Query defaults."""

    max_results: int = Field(default=20, ge=1)
    context_lines: int = Field(default=2, ge=0)
    context_max_chars: int = Field(default=3000, ge=100)


class CodesiftConfig(BaseModel):
    """Root configuration model."""

    index: IndexConfig = Field(default_factory=IndexConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)


class EnvSettings(BaseSettings):
    """Environment variable overrides."""

    model_config = SettingsConfigDict(
        env_prefix="CODESIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root_dir: str | None = None
    max_results: int | None = None
    log_level: str = "INFO"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, override wins on conflicts."""
    result = {**base}
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file, return empty dict if not found."""
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _resolve_env_vars(value: Any) -> Any:
    """Recursively replace ${ENV_VAR} references with actual env values.

    If an env var is not set, the placeholder is preserved as-is.
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{(\w+)\}")
        return pattern.sub(
            lambda m: os.environ.get(m.group(1), m.group(0)),
            value,
        )
    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def load_config(project_dir: Path | None = None) -> CodesiftConfig:
    """Load configuration with layered precedence.

    Order (later overrides earlier):
    1. Built-in defaults (Pydantic defaults)
    2. configs/default.yaml (shipped with package)
    3. ~/.codesift/config.yaml (global user config)
    4. .codesift/config.yaml (project-level config)
    5. Environment variables

    Environment overrides are merged before validation, so they obey the
    same bounds as YAML values.  A relative ``index.root_dir`` is resolved
    against *project_dir*.
    """
    project_root = project_dir or Path.cwd()
    package_config_dir = Path(__file__).parent.parent.parent.parent / "configs"
    global_config_dir = Path.home() / ".codesift"
    project_config_dir = project_root / ".codesift"

    merged: dict[str, Any] = {}

    for config_path in [
        package_config_dir / "default.yaml",
        global_config_dir / "config.yaml",
        project_config_dir / "config.yaml",
    ]:
        layer = load_yaml_config(config_path)
        merged = _deep_merge(merged, layer)

    env = EnvSettings()
    if env.root_dir:
        merged = _deep_merge(merged, {"index": {"root_dir": env.root_dir}})
    if env.max_results is not None:
        merged = _deep_merge(merged, {"search": {"max_results": env.max_results}})

    config = CodesiftConfig(**_resolve_env_vars(merged))

    root = Path(config.index.root_dir)
    if not root.is_absolute():
        config = config.model_copy(
            update={"index": config.index.model_copy(update={"root_dir": str(project_root / root)})}
        )

    return config
