# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration for catalog resolution."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog.builder import BuildOptions
from .catalog.loader import PluginCatalogLoader
from .catalog.model_package import PackageOverride
from .catalog.types import DEFAULT_EXTENSION, DEFAULT_NAME_PREFIX, STABLE_CHANNEL
from .merge import expand_dotted_keys, merge_all

PROJECT_CONFIG_FILENAME: Final[str] = ".jbplugins.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "jbplugins"
DEFAULT_INCLUDE_KEY: Final[str] = "include"

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class NamingConfig(BaseModel):
    """Control how package names and default file names are derived."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    prefix: str = DEFAULT_NAME_PREFIX
    default_extension: str = Field(default=DEFAULT_EXTENSION, min_length=1)


class ResolutionConfig(BaseModel):
    """Control channel resolution and failure handling."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    default_channel: str = Field(default=STABLE_CHANNEL, min_length=1)
    strict: bool = False


class ResolverConfig(BaseModel):
    """Top-level configuration for resolving a plugin catalog."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    data_root: Path = Path("data")
    jobs: int = Field(default=1, ge=1)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    overrides: dict[str, PackageOverride] = Field(default_factory=dict)

    def build_options(self) -> BuildOptions:
        """Return the descriptor build options described by this configuration."""

        return BuildOptions(
            name_prefix=self.naming.prefix,
            default_extension=self.naming.default_extension,
            latest_channel=self.resolution.default_channel,
        )

    def override_mapping(self) -> dict[str, dict[str, Any]]:
        """Return per-plugin overrides with unset fields removed."""

        return {
            plugin_id: override.changes() for plugin_id, override in self.overrides.items() if override.changes()
        }

    def create_loader(self) -> PluginCatalogLoader:
        """Return a catalog loader configured from this object."""

        return PluginCatalogLoader(
            self.data_root,
            options=self.build_options(),
            overrides=self.override_mapping(),
            jobs=self.jobs,
        )


class ConfigSource(Protocol):
    """Provide one layer of raw configuration data."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment contributed by this source."""
        ...


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return ResolverConfig().model_dump(mode="json")


class TomlConfigSource:
    """Load configuration data from a TOML document with include support."""

    def __init__(
        self,
        path: Path,
        *,
        name: str | None = None,
        include_key: str = DEFAULT_INCLUDE_KEY,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._root_path = path
        self.name = name or str(path)
        self._include_key = include_key
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        return self._load(self._root_path, ())

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            with path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    def _load(self, path: Path, stack: tuple[Path, ...]) -> Mapping[str, Any]:
        if not path.exists():
            return {}
        resolved = path.resolve()
        if resolved in stack:
            include_chain = " -> ".join(str(entry) for entry in (*stack, resolved))
            raise ConfigError(f"Circular include detected: {include_chain}")
        data = self._read(resolved)
        document = dict(data if stack else self._section(data, resolved))
        includes = document.pop(self._include_key, None)
        fragments = [
            self._load(include, stack + (resolved,)) for include in self._coerce_includes(includes, path.parent)
        ]
        merged = merge_all([*fragments, document])
        return _expand_env(merged, self._env)

    def _section(self, data: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
        return data

    def _coerce_includes(self, raw: Any, base_dir: Path) -> Iterable[Path]:
        if raw is None:
            return []
        if isinstance(raw, str):
            return [self._resolve_path(Path(raw), base_dir)]
        if isinstance(raw, MutableMapping):
            return [self._resolve_path(Path(value), base_dir) for value in raw.values()]
        if isinstance(raw, list):
            return [self._resolve_path(Path(item), base_dir) for item in raw]
        raise ConfigError(f"Unsupported include declaration: {raw!r}")

    @staticmethod
    def _resolve_path(path: Path, base_dir: Path) -> Path:
        return path if path.is_absolute() else (base_dir / path)


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.jbplugins]`` within ``pyproject.toml``."""

    def __init__(self, path: Path, *, env: Mapping[str, str] | None = None) -> None:
        super().__init__(path, name=f"pyproject.toml ({path})", env=env)

    def _section(self, data: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
        return section


class AssignmentConfigSource:
    """Turn ``key.path=value`` assignments into a nested configuration fragment.

    Values are parsed as TOML literals when possible (``true``, ``4``,
    ``"text"``) and fall back to the raw string otherwise.
    """

    name = "command line"

    def __init__(self, assignments: Sequence[str]) -> None:
        self._assignments = tuple(assignments)

    def load(self) -> Mapping[str, Any]:
        flat: dict[str, Any] = {}
        for assignment in self._assignments:
            key, sep, raw_value = assignment.partition("=")
            key = key.strip()
            if not sep or not key:
                raise ConfigError(f"Expected KEY=VALUE assignment, got '{assignment}'")
            flat[key] = _parse_literal(raw_value.strip())
        return expand_dotted_keys(flat)


class ConfigLoader:
    """Combine configuration sources in precedence order."""

    def __init__(self, root: Path, sources: Sequence[ConfigSource]) -> None:
        self._root = root
        self._sources = tuple(sources)

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        config_file: Path | None = None,
        assignments: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
    ) -> ConfigLoader:
        """Return a loader reading defaults, project files and CLI assignments.

        Args:
            root: Project directory used to locate configuration files.
            config_file: Explicit TOML file replacing ``.jbplugins.toml``.
            assignments: ``key.path=value`` overrides applied last.
            env: Environment used for ``${VAR}`` expansion.

        Returns:
            ConfigLoader: Loader with sources ordered from lowest to highest precedence.
        """

        if config_file is not None and not config_file.is_file():
            raise ConfigError(f"Configuration file {config_file} does not exist")
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            PyProjectConfigSource(root / PYPROJECT_FILENAME, env=env),
            TomlConfigSource(config_file or (root / PROJECT_CONFIG_FILENAME), env=env),
        ]
        if assignments:
            sources.append(AssignmentConfigSource(assignments))
        return cls(root, sources)

    @property
    def sources(self) -> tuple[ConfigSource, ...]:
        """Return the configured sources in precedence order."""

        return self._sources

    def load(self) -> ResolverConfig:
        """Load, merge and validate every source.

        Returns:
            ResolverConfig: Validated configuration with ``data_root`` made absolute.

        Raises:
            ConfigError: If a source is unreadable or the merged data is invalid.
        """

        merged = merge_all([source.load() for source in self._sources])
        try:
            config = ResolverConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
        if not config.data_root.is_absolute():
            config.data_root = (self._root / config.data_root).resolve()
        return config


def load_config(
    root: Path,
    *,
    config_file: Path | None = None,
    assignments: Sequence[str] = (),
) -> ResolverConfig:
    """Load the resolver configuration for the project at ``root``."""

    return ConfigLoader.for_root(root, config_file=config_file, assignments=assignments).load()


def _parse_literal(raw: str) -> Any:
    try:
        return tomllib.loads(f"value = {raw}")["value"]
    except tomllib.TOMLDecodeError:
        return raw


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return _expand_env(value, env)
    if isinstance(value, list):
        return [_expand_env_value(item, env) for item in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


__all__ = [
    "AssignmentConfigSource",
    "ConfigError",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "NamingConfig",
    "PackageOverride",
    "PyProjectConfigSource",
    "ResolutionConfig",
    "ResolverConfig",
    "TomlConfigSource",
    "load_config",
]
