# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Decoded plugin metadata documents."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .types import JSONValue
from .utils import (
    expect_mapping,
    expect_string,
    freeze_json_mapping,
    optional_int,
    optional_string,
    string_array,
    string_mapping,
)


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Download information for one published plugin version."""

    sha256: str
    download_url: str
    file_name: str | None = None
    channel: str | None = None
    dependencies: tuple[str, ...] = ()
    optional_dependencies: tuple[str, ...] = ()

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> VersionInfo:
        """Create a ``VersionInfo`` from JSON data.

        Args:
            data: Mapping describing a single version.
            context: Human-readable context used in error messages.

        Returns:
            VersionInfo: Frozen version metadata.

        Raises:
            CatalogParseError: If ``sha256`` or ``download_url`` is missing or invalid.
        """

        return VersionInfo(
            sha256=expect_string(data.get("sha256"), key="sha256", context=context),
            download_url=expect_string(data.get("download_url"), key="download_url", context=context),
            file_name=optional_string(data.get("file_name"), key="file_name", context=context),
            channel=optional_string(data.get("channel"), key="channel", context=context),
            dependencies=string_array(data.get("dependencies"), key="dependencies", context=context),
            optional_dependencies=string_array(
                data.get("optional_dependencies"),
                key="optional_dependencies",
                context=context,
            ),
        )

    def resolve_file_name(self, stem: str, version: str, *, default_extension: str) -> str:
        """Return the explicit file name or ``<stem>-<version>.<ext>``."""

        if self.file_name is not None:
            return self.file_name
        return f"{stem}-{version}.{default_extension}"


@dataclass(frozen=True, slots=True)
class PluginMetadata:
    """Metadata describing every published version of a plugin."""

    xml_id: str
    versions: Mapping[str, VersionInfo]
    latest: Mapping[str, str]
    name: str | None = None
    numeric_id: int | None = None
    raw: Mapping[str, JSONValue] = field(default_factory=lambda: MappingProxyType({}), repr=False, compare=False)

    @property
    def display_name(self) -> str:
        """Return :attr:`name`, falling back to :attr:`xml_id`."""

        return self.name or self.xml_id

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> PluginMetadata:
        """Create ``PluginMetadata`` from a decoded metadata document.

        Args:
            data: Mapping loaded from ``metadata.json``.
            context: Human-readable context used in error messages.

        Returns:
            PluginMetadata: Frozen plugin metadata.

        Raises:
            CatalogParseError: If required fields are missing or have the wrong type.
        """

        xml_id = expect_string(data.get("xml_id"), key="xml_id", context=context)
        versions_data = expect_mapping(data.get("versions"), key="versions", context=context)
        versions: dict[str, VersionInfo] = {}
        for version, entry in versions_data.items():
            entry_context = f"{context}: versions.{version}"
            versions[version] = VersionInfo.from_mapping(
                expect_mapping(entry, key=f"versions.{version}", context=context),
                context=entry_context,
            )
        return PluginMetadata(
            xml_id=xml_id,
            versions=MappingProxyType(versions),
            latest=MappingProxyType(dict(string_mapping(data.get("latest"), key="latest", context=context))),
            name=optional_string(data.get("name"), key="name", context=context),
            numeric_id=optional_int(data.get("numeric_id"), key="numeric_id", context=context),
            raw=freeze_json_mapping(data, context=context),
        )


__all__ = ["PluginMetadata", "VersionInfo"]
