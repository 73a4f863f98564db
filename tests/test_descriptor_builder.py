# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for building package descriptor sets from plugin metadata."""

from __future__ import annotations

import pytest

from jbplugins.catalog import (
    BuildOptions,
    CatalogParseError,
    CatalogReferenceError,
    DeferredResolutionError,
    PluginMetadata,
    Resolved,
    Unresolved,
    build_descriptor_set,
)


def _metadata(payload: dict) -> PluginMetadata:
    return PluginMetadata.from_mapping(payload, context="test")


def _single_version(file_name: str | None = None, *, latest: dict | None = None) -> dict:
    version: dict[str, object] = {"sha256": "s", "download_url": "u"}
    if file_name is not None:
        version["file_name"] = file_name
    return {"xml_id": "x", "versions": {"1.0": version}, "latest": {"stable": "1.0"} if latest is None else latest}


def test_descriptor_set_resolves_versions_channels_and_latest(metadata_factory) -> None:
    metadata = _metadata(metadata_factory())
    descriptors = build_descriptor_set(metadata)

    assert set(descriptors.versions) == {"1.0.0", "1.1.0-eap"}
    assert descriptors.channels["stable"] is descriptors.versions["1.0.0"]
    assert descriptors.channels["eap"] is descriptors.versions["1.1.0-eap"]
    assert descriptors.latest is descriptors.channels["stable"]
    assert isinstance(descriptors.latest_resolution, Resolved)

    stable = descriptors.versions["1.0.0"]
    assert stable.name == "jetbrains-plugin-org.example.plugin"
    assert stable.file_name == "org.example.plugin-1.0.0.jar"
    assert stable.executable is True
    assert stable.unpack is False
    assert stable.dependencies == ("com.intellij.modules.platform",)
    assert stable.hash_algorithm == "sha256"
    assert stable.raw_data is metadata

    eap = descriptors.versions["1.1.0-eap"]
    assert eap.unpack is True
    assert eap.executable is False
    assert eap.optional_dependencies == ("org.jetbrains.kotlin",)


@pytest.mark.parametrize(
    ("file_name", "unpack", "executable"),
    [
        ("plugin.zip", True, False),
        ("plugin.jar", False, True),
        ("plugin.tar.gz", False, False),
        ("plugin", False, False),
    ],
)
def test_file_suffix_controls_unpack_and_executable(file_name: str, unpack: bool, executable: bool) -> None:
    descriptor = build_descriptor_set(_metadata(_single_version(file_name))).versions["1.0"]
    assert descriptor.file_name == file_name
    assert descriptor.unpack is unpack
    assert descriptor.executable is executable


def test_default_file_name_uses_name_and_default_extension() -> None:
    payload = _single_version()
    payload["name"] = "Example"
    descriptor = build_descriptor_set(
        _metadata(payload),
        options=BuildOptions(default_extension="zip"),
    ).versions["1.0"]
    assert descriptor.file_name == "Example-1.0.zip"
    assert descriptor.unpack is True


def test_missing_stable_channel_defers_latest_error() -> None:
    descriptors = build_descriptor_set(_metadata(_single_version(latest={})))

    assert descriptors.versions["1.0"].download_url == "u"
    assert dict(descriptors.channels) == {}
    assert isinstance(descriptors.latest_resolution, Unresolved)
    assert descriptors.latest_resolution.ok is False
    with pytest.raises(DeferredResolutionError, match="No stable version found"):
        _ = descriptors.latest
    with pytest.raises(DeferredResolutionError):
        descriptors.select()
    assert descriptors.to_dict()["latest"] is None


def test_latest_follows_configured_channel() -> None:
    descriptors = build_descriptor_set(
        _metadata(_single_version(latest={"eap": "1.0"})),
        options=BuildOptions(latest_channel="eap"),
    )
    assert descriptors.latest.version == "1.0"


def test_dangling_channel_fails_at_build_time() -> None:
    with pytest.raises(CatalogReferenceError, match="undeclared version '2.0'"):
        build_descriptor_set(_metadata(_single_version(latest={"stable": "2.0"})))


def test_select_by_version_and_channel() -> None:
    descriptors = build_descriptor_set(_metadata(_single_version()))
    assert descriptors.select(version="1.0") is descriptors.versions["1.0"]
    assert descriptors.select(channel="stable") is descriptors.versions["1.0"]
    with pytest.raises(CatalogReferenceError):
        descriptors.select(version="9.9")
    with pytest.raises(CatalogReferenceError):
        descriptors.select(channel="nightly")
    with pytest.raises(ValueError):
        descriptors.select(version="1.0", channel="stable")


def test_overrides_apply_to_every_version() -> None:
    descriptors = build_descriptor_set(
        _metadata(_single_version("plugin.zip")),
        overrides={"unpack": False, "name": "custom"},
    )
    descriptor = descriptors.latest
    assert descriptor.unpack is False
    assert descriptor.name == "custom"
    assert descriptor.sha256 == "s"


def test_override_rejects_unknown_fields() -> None:
    descriptor = build_descriptor_set(_metadata(_single_version())).latest
    with pytest.raises(CatalogParseError, match="raw_data"):
        descriptor.override(raw_data=None)


def test_override_rejects_mistyped_values() -> None:
    descriptor = build_descriptor_set(_metadata(_single_version())).latest
    with pytest.raises(CatalogParseError, match="unpack"):
        descriptor.override(unpack="no")
    assert descriptor.override(unpack=True).unpack is True


@pytest.mark.parametrize("overrides", [{"bogus": 1}, {"executable": "yes"}, {"sha256": 5}])
def test_invalid_overrides_name_the_plugin(overrides: dict) -> None:
    with pytest.raises(CatalogParseError, match=r"^org\.x: invalid package override"):
        build_descriptor_set(_metadata(_single_version()), plugin_id="org.x", overrides=overrides)


def test_descriptor_carries_release_channel(metadata_factory) -> None:
    descriptors = build_descriptor_set(_metadata(metadata_factory()))
    assert descriptors.versions["1.0.0"].channel == "stable"
    assert descriptors.versions["1.1.0-eap"].channel == "eap"
    assert descriptors.to_dict()["channels"]["eap"]["channel"] == "eap"


def test_missing_required_version_field_is_parse_error() -> None:
    payload = {"xml_id": "x", "versions": {"1.0": {"sha256": "s"}}, "latest": {}}
    with pytest.raises(CatalogParseError, match="download_url"):
        _metadata(payload)


def test_descriptor_set_to_dict_is_json_friendly(metadata_factory) -> None:
    payload = build_descriptor_set(_metadata(metadata_factory())).to_dict()
    assert payload["plugin_id"] == "org.example.plugin"
    assert payload["latest"]["version"] == "1.0.0"
    assert payload["channels"]["eap"]["dependencies"] == []
    assert "raw_data" not in payload["versions"]["1.0.0"]
