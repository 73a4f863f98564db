# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from jbplugins.config import (
    AssignmentConfigSource,
    ConfigError,
    ConfigLoader,
    TomlConfigSource,
    load_config,
)


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path)

    assert cfg.data_root == (tmp_path / "data").resolve()
    assert cfg.jobs == 1
    assert cfg.naming.prefix == "jetbrains-plugin-"
    assert cfg.resolution.default_channel == "stable"
    assert cfg.overrides == {}


def test_project_file_overrides_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
[project]
name = "unrelated"

[tool.jbplugins]
data_root = "catalog"
jobs = 2

[tool.jbplugins.naming]
prefix = "jb-"
""".strip(),
        encoding="utf-8",
    )
    (tmp_path / ".jbplugins.toml").write_text(
        """
jobs = 6

[resolution]
default_channel = "eap"

[overrides."org.example.plugin"]
unpack = false
""".strip(),
        encoding="utf-8",
    )

    cfg = load_config(tmp_path)

    assert cfg.data_root == (tmp_path / "catalog").resolve()
    assert cfg.jobs == 6
    assert cfg.naming.prefix == "jb-"
    assert cfg.naming.default_extension == "jar"
    assert cfg.resolution.default_channel == "eap"
    assert cfg.override_mapping() == {"org.example.plugin": {"unpack": False}}
    options = cfg.build_options()
    assert options.name_prefix == "jb-"
    assert options.latest_channel == "eap"


def test_assignments_take_precedence(tmp_path: Path) -> None:
    (tmp_path / ".jbplugins.toml").write_text("[resolution]\ndefault_channel = \"eap\"\n", encoding="utf-8")

    cfg = load_config(
        tmp_path,
        assignments=["resolution.default_channel=beta", "resolution.strict=true", "jobs=3"],
    )

    assert cfg.resolution.default_channel == "beta"
    assert cfg.resolution.strict is True
    assert cfg.jobs == 3


def test_assignment_source_parses_literals_and_strings() -> None:
    source = AssignmentConfigSource(["naming.prefix=idea-", "jobs = 4", "resolution.strict=false"])
    assert source.load() == {"naming": {"prefix": "idea-"}, "jobs": 4, "resolution": {"strict": False}}


def test_assignment_without_equals_is_rejected() -> None:
    with pytest.raises(ConfigError, match="KEY=VALUE"):
        AssignmentConfigSource(["jobs"]).load()


def test_include_chain_and_env_expansion(tmp_path: Path) -> None:
    (tmp_path / "base.toml").write_text("data_root = \"${CATALOG_HOME}/data\"\njobs = 2\n", encoding="utf-8")
    main = tmp_path / "main.toml"
    main.write_text("include = \"base.toml\"\njobs = 5\n", encoding="utf-8")

    data = TomlConfigSource(main, env={"CATALOG_HOME": "/srv/catalog"}).load()

    assert data == {"data_root": "/srv/catalog/data", "jobs": 5}


def test_circular_include_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text("include = \"b.toml\"\n", encoding="utf-8")
    (tmp_path / "b.toml").write_text("include = \"a.toml\"\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Circular include"):
        TomlConfigSource(tmp_path / "a.toml").load()


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / ".jbplugins.toml").write_text("jobs = 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(tmp_path)


def test_unknown_override_field_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".jbplugins.toml").write_text("[overrides.\"org.x\"]\nraw_data = 1\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_explicit_config_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        ConfigLoader.for_root(tmp_path, config_file=tmp_path / "missing.toml")


def test_create_loader_uses_configuration(tmp_path: Path) -> None:
    cfg = load_config(tmp_path, assignments=["naming.prefix=x-", "overrides.demo.unpack=true"])
    loader = cfg.create_loader()

    assert loader.data_root == (tmp_path / "data").resolve()
    assert loader.options.name_prefix == "x-"
    assert loader.overrides == {"demo": {"unpack": True}}


def test_override_values_are_type_checked(tmp_path: Path) -> None:
    (tmp_path / ".jbplugins.toml").write_text("[overrides.\"org.x\"]\nunpack = \"no\"\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="unpack"):
        load_config(tmp_path)
