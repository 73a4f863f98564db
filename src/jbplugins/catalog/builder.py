# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build channel-aware package descriptor sets from plugin metadata."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from .errors import CatalogReferenceError
from .model_package import (
    LatestResolution,
    PackageDescriptor,
    PackageDescriptorSet,
    Resolved,
    Unresolved,
    validate_overrides,
)
from .model_plugin import PluginMetadata, VersionInfo
from .types import DEFAULT_EXTENSION, DEFAULT_NAME_PREFIX, JAR_SUFFIX, STABLE_CHANNEL, ZIP_SUFFIX


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Naming and resolution settings applied while building descriptors."""

    name_prefix: str = DEFAULT_NAME_PREFIX
    default_extension: str = DEFAULT_EXTENSION
    latest_channel: str = STABLE_CHANNEL


DEFAULT_BUILD_OPTIONS = BuildOptions()


def build_descriptor(
    metadata: PluginMetadata,
    version: str,
    info: VersionInfo,
    *,
    options: BuildOptions = DEFAULT_BUILD_OPTIONS,
) -> PackageDescriptor:
    """Return the descriptor for a single ``version`` of ``metadata``.

    Args:
        metadata: Plugin the version belongs to.
        version: Version key inside ``metadata.versions``.
        info: Download information for ``version``.
        options: Naming settings.

    Returns:
        PackageDescriptor: Descriptor carrying a back-reference to ``metadata``.
    """

    file_name = info.resolve_file_name(metadata.display_name, version, default_extension=options.default_extension)
    return PackageDescriptor(
        name=f"{options.name_prefix}{metadata.xml_id}",
        version=version,
        file_name=file_name,
        sha256=info.sha256,
        download_url=info.download_url,
        unpack=file_name.endswith(ZIP_SUFFIX),
        executable=file_name.endswith(JAR_SUFFIX),
        channel=info.channel,
        dependencies=info.dependencies,
        optional_dependencies=info.optional_dependencies,
        raw_data=metadata,
    )


def build_descriptor_set(
    metadata: PluginMetadata,
    *,
    plugin_id: str | None = None,
    options: BuildOptions = DEFAULT_BUILD_OPTIONS,
    overrides: Mapping[str, Any] | None = None,
) -> PackageDescriptorSet:
    """Build every descriptor of ``metadata`` plus its channel view.

    Args:
        metadata: Decoded plugin metadata.
        plugin_id: Identifier the plugin is indexed under. Defaults to ``xml_id``.
        options: Naming and resolution settings.
        overrides: Descriptor fields replaced on every version, e.g. ``{"unpack": False}``.

    Returns:
        PackageDescriptorSet: Versions, channels and the ``latest`` resolution.

    Raises:
        CatalogReferenceError: If a channel names a version that is not declared.
        CatalogParseError: If ``overrides`` names an unknown field or carries a mistyped value.
    """

    identifier = plugin_id or metadata.xml_id
    changes = validate_overrides(overrides, context=identifier) if overrides else {}
    versions: dict[str, PackageDescriptor] = {}
    for version, info in metadata.versions.items():
        descriptor = build_descriptor(metadata, version, info, options=options)
        if changes:
            descriptor = replace(descriptor, **changes)
        versions[version] = descriptor

    channels: dict[str, PackageDescriptor] = {}
    for channel, version in metadata.latest.items():
        if version not in versions:
            raise CatalogReferenceError(
                f"{identifier}: channel '{channel}' references undeclared version '{version}'",
            )
        channels[channel] = versions[version]

    return PackageDescriptorSet(
        plugin_id=identifier,
        versions=MappingProxyType(versions),
        channels=MappingProxyType(channels),
        latest_resolution=_resolve_latest(channels, options.latest_channel),
        metadata=metadata,
    )


def _resolve_latest(channels: Mapping[str, PackageDescriptor], channel: str) -> LatestResolution:
    if channel in channels:
        return Resolved(channels[channel])
    return Unresolved(
        f"No {channel} version found, please select a version explicitly via versions.<version> "
        "or channels.<channel>",
    )


__all__ = [
    "DEFAULT_BUILD_OPTIONS",
    "BuildOptions",
    "build_descriptor",
    "build_descriptor_set",
]
