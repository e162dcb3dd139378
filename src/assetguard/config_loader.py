# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence."""

from __future__ import annotations

import copy
import os
import re
import tomllib
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import ValidationError

from .config import Config, ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "assetguard"
CONFIG_FILENAME: Final[str] = "assetguard.toml"

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


class ConfigSource(Protocol):
    """Describe a provider of configuration fragments."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment supplied by this source."""
        ...

    def describe(self) -> str:
        """Return a human readable description of the source."""
        ...


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None, env: Mapping[str, str] | None = None) -> None:
        self._path = path
        self.name = name or str(path)
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        document = self._read()
        return _expand_env(document, self._env)

    def _read(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Unable to read {self._path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {self._path} must be a table")
        return copy.deepcopy(dict(data))

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.assetguard]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return dict(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class MappingConfigSource:
    """Expose an in-memory mapping (CLI overrides) as a configuration source."""

    def __init__(self, data: Mapping[str, Any], *, name: str = "overrides") -> None:
        self._data = data
        self.name = name

    def load(self) -> Mapping[str, Any]:
        return copy.deepcopy(dict(self._data))

    def describe(self) -> str:
        return f"Explicit {self.name}"


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, sources: Sequence[ConfigSource]) -> None:
        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)

    @classmethod
    def for_root(cls, root: Path, *, env: Mapping[str, str] | None = None) -> ConfigLoader:
        """Return a loader reading defaults, ``pyproject.toml`` and ``assetguard.toml``.

        Args:
            root: Directory searched for configuration files.
            env: Environment used for ``$VAR`` expansion; defaults to ``os.environ``.

        Returns:
            ConfigLoader: Loader with sources ordered from lowest to highest precedence.
        """

        resolved = root.resolve()
        return cls(
            sources=[
                DefaultConfigSource(),
                PyProjectConfigSource(resolved / PYPROJECT_FILENAME, env=env),
                TomlConfigSource(resolved / CONFIG_FILENAME, env=env),
            ]
        )

    @property
    def sources(self) -> tuple[ConfigSource, ...]:
        return tuple(self._sources)

    def load(self, overrides: Mapping[str, Any] | None = None) -> Config:
        """Merge every source (and ``overrides``) into a validated :class:`Config`.

        Raises:
            ConfigError: If a source is unreadable or the merged data is invalid.
        """

        sources = list(self._sources)
        if overrides:
            sources.append(MappingConfigSource(overrides))
        merged: dict[str, Any] = {}
        for source in sources:
            merged = _deep_merge(merged, source.load())
        try:
            return Config.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


__all__ = [
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "MappingConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
]
