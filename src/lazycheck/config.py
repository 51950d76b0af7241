# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and layered loading.

Sources are merged in precedence order: built-in defaults, the
``[tool.lazycheck]`` table of ``pyproject.toml``, then ``.lazycheck.toml`` in
the project root. CLI overrides are applied last by the caller.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .annotations import DEFAULT_TYPEDEF_NAME
from .checker import CompilerOptions
from .errors import ConfigError
from .scanner import DEFAULT_DEFINE_GETTERS

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lazycheck"
PROJECT_CONFIG_NAME: Final[str] = ".lazycheck.toml"
DEFAULT_TARGET: Final[str] = "src/index.js"
DEFAULT_ENTRIES: Final[tuple[str, ...]] = ("src/index.js", "src/module.js", "src/index.d.ts")


class LazycheckConfig(BaseModel):
    """Resolved settings for one lazycheck run."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    target: str = DEFAULT_TARGET
    entries: list[str] = Field(default_factory=lambda: list(DEFAULT_ENTRIES))
    define_getters: str = DEFAULT_DEFINE_GETTERS
    typedef_name: str = DEFAULT_TYPEDEF_NAME
    tsc: str = "tsc"
    compiler_options: CompilerOptions = Field(default_factory=CompilerOptions)

    @field_validator("target", "define_getters", "typedef_name", "tsc")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("entries")
    @classmethod
    def _has_entries(cls, value: list[str]) -> list[str]:
        cleaned = [entry.strip() for entry in value if entry.strip()]
        if not cleaned:
            raise ValueError("at least one entry file is required")
        return cleaned


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def load_fragments(root: Path) -> list[tuple[str, Mapping[str, Any]]]:
    """Return the configuration fragments found under ``root`` in precedence order."""

    fragments: list[tuple[str, Mapping[str, Any]]] = []
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        tool_section = _read_toml(pyproject).get(PYPROJECT_TOOL_KEY)
        section = tool_section.get(PYPROJECT_SECTION_KEY) if isinstance(tool_section, Mapping) else None
        if isinstance(section, Mapping):
            fragments.append((str(pyproject), section))
    project_file = root / PROJECT_CONFIG_NAME
    if project_file.is_file():
        fragments.append((str(project_file), _read_toml(project_file)))
    return fragments


def _merge(base: dict[str, Any], fragment: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in fragment.items():
        normalised = key.replace("-", "_")
        current = merged.get(normalised)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[normalised] = {**current, **value}
        else:
            merged[normalised] = value
    return merged


def load_config(root: Path, *, overrides: Mapping[str, Any] | None = None) -> LazycheckConfig:
    """Load configuration for ``root``.

    Args:
        root: Project root searched for ``pyproject.toml`` and ``.lazycheck.toml``.
        overrides: Values taking precedence over every file, typically CLI flags.

    Returns:
        LazycheckConfig: Validated configuration.

    Raises:
        ConfigError: If a file cannot be parsed or a value is invalid.
    """

    data: dict[str, Any] = {}
    for _source, fragment in load_fragments(root):
        data = _merge(data, fragment)
    if overrides:
        data = _merge(data, {key: value for key, value in overrides.items() if value is not None})
    try:
        return LazycheckConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {_describe(exc)}") from exc


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def entry_overrides(entries: Sequence[str] | None) -> list[str] | None:
    """Return CLI entry overrides, or ``None`` when none were given."""

    if not entries:
        return None
    return [entry for entry in entries if entry.strip()] or None


__all__ = [
    "DEFAULT_ENTRIES",
    "DEFAULT_TARGET",
    "LazycheckConfig",
    "PROJECT_CONFIG_NAME",
    "entry_overrides",
    "load_config",
    "load_fragments",
]
