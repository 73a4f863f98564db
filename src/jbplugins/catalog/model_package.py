# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Buildable package descriptors derived from plugin metadata."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Final, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError

from .errors import CatalogParseError, CatalogReferenceError, DeferredResolutionError
from .model_plugin import PluginMetadata
from .types import HASH_ALGORITHM, JSONValue


class PackageOverride(BaseModel):
    """Descriptor fields replaced for every version of one plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: StrictStr | None = None
    version: StrictStr | None = None
    file_name: StrictStr | None = None
    sha256: StrictStr | None = None
    download_url: StrictStr | None = None
    unpack: StrictBool | None = None
    executable: StrictBool | None = None

    def changes(self) -> dict[str, Any]:
        """Return the fields that were set, ready for :meth:`PackageDescriptor.override`."""

        return self.model_dump(exclude_none=True)


OVERRIDABLE_FIELDS: Final[frozenset[str]] = frozenset(PackageOverride.model_fields)


def validate_overrides(changes: Mapping[str, Any], *, context: str) -> dict[str, Any]:
    """Return ``changes`` after checking field names and value types.

    Args:
        changes: Replacement values keyed by descriptor field name.
        context: Human-friendly prefix naming the plugin or descriptor.

    Returns:
        dict[str, Any]: Validated changes with unset fields removed.

    Raises:
        CatalogParseError: If a key is not overridable or a value has the wrong type.
    """

    try:
        return PackageOverride.model_validate(dict(changes)).changes()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise CatalogParseError(f"{context}: invalid package override ({problems})") from exc


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Build-ready record describing one downloadable plugin version."""

    name: str
    version: str
    file_name: str
    sha256: str
    download_url: str
    unpack: bool
    executable: bool
    hash_algorithm: str = HASH_ALGORITHM
    channel: str | None = None
    dependencies: tuple[str, ...] = ()
    optional_dependencies: tuple[str, ...] = ()
    raw_data: PluginMetadata | None = field(default=None, repr=False, compare=False)

    def override(self, **changes: Any) -> PackageDescriptor:
        """Return a copy of the descriptor with ``changes`` applied.

        Args:
            **changes: Replacement values keyed by descriptor field name.

        Returns:
            PackageDescriptor: New descriptor; ``self`` is left untouched.

        Raises:
            CatalogParseError: If a key is not overridable or a value has the wrong type.
        """

        return replace(self, **validate_overrides(changes, context=f"{self.name} {self.version}"))

    def to_dict(self) -> dict[str, JSONValue]:
        """Return a JSON-serialisable view without the metadata back-reference."""

        payload: dict[str, JSONValue] = {}
        for descriptor_field in fields(self):
            if descriptor_field.name == "raw_data":
                continue
            value = getattr(self, descriptor_field.name)
            payload[descriptor_field.name] = list(value) if isinstance(value, tuple) else value
        return payload


@dataclass(frozen=True, slots=True)
class Resolved:
    """Successful resolution of the implicit ``latest`` package."""

    descriptor: PackageDescriptor
    ok: Literal[True] = True

    def unwrap(self) -> PackageDescriptor:
        """Return the resolved descriptor."""

        return self.descriptor


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Placeholder recording why ``latest`` could not be resolved."""

    message: str
    ok: Literal[False] = False

    def unwrap(self) -> PackageDescriptor:
        """Raise the deferred resolution failure.

        Raises:
            DeferredResolutionError: Always.
        """

        raise DeferredResolutionError(self.message)


LatestResolution: TypeAlias = Resolved | Unresolved


@dataclass(frozen=True, slots=True)
class PackageDescriptorSet:
    """Every descriptor of a plugin, grouped by version and by channel."""

    plugin_id: str
    versions: Mapping[str, PackageDescriptor]
    channels: Mapping[str, PackageDescriptor]
    latest_resolution: LatestResolution
    metadata: PluginMetadata | None = field(default=None, repr=False, compare=False)

    @property
    def latest(self) -> PackageDescriptor:
        """Return the descriptor ``latest`` resolves to.

        Raises:
            DeferredResolutionError: If the plugin has no channel ``latest`` follows.
        """

        return self.latest_resolution.unwrap()

    def select(self, *, version: str | None = None, channel: str | None = None) -> PackageDescriptor:
        """Return the descriptor selected explicitly or through ``latest``.

        Args:
            version: Exact version to select.
            channel: Release channel to select.

        Returns:
            PackageDescriptor: Matching descriptor.

        Raises:
            ValueError: If both ``version`` and ``channel`` are supplied.
            CatalogReferenceError: If the version or channel is unknown.
            DeferredResolutionError: If neither is supplied and ``latest`` is unresolved.
        """

        if version is not None and channel is not None:
            raise ValueError("select either a version or a channel, not both")
        if version is not None:
            return _lookup(self.versions, version, kind="version", plugin_id=self.plugin_id)
        if channel is not None:
            return _lookup(self.channels, channel, kind="channel", plugin_id=self.plugin_id)
        return self.latest

    def to_dict(self) -> dict[str, JSONValue]:
        """Return a JSON-serialisable view of the descriptor set."""

        latest: JSONValue = None
        latest_error: JSONValue = None
        if isinstance(self.latest_resolution, Resolved):
            latest = self.latest_resolution.descriptor.to_dict()
        else:
            latest_error = self.latest_resolution.message
        return {
            "plugin_id": self.plugin_id,
            "versions": {version: item.to_dict() for version, item in self.versions.items()},
            "channels": {channel: item.to_dict() for channel, item in self.channels.items()},
            "latest": latest,
            "latest_error": latest_error,
        }


def _lookup(
    entries: Mapping[str, PackageDescriptor],
    key: str,
    *,
    kind: str,
    plugin_id: str,
) -> PackageDescriptor:
    try:
        return entries[key]
    except KeyError as exc:
        known = ", ".join(sorted(entries)) or "none"
        raise CatalogReferenceError(f"{plugin_id}: unknown {kind} '{key}' (known: {known})") from exc


__all__ = [
    "OVERRIDABLE_FIELDS",
    "PackageOverride",
    "LatestResolution",
    "PackageDescriptor",
    "PackageDescriptorSet",
    "Resolved",
    "Unresolved",
    "validate_overrides",
]
