# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for the plugin catalog."""

from __future__ import annotations

from typing import Final

from .builder import BuildOptions, build_descriptor, build_descriptor_set
from .errors import (
    CatalogError,
    CatalogNotFoundError,
    CatalogParseError,
    CatalogReferenceError,
    CatalogValidationError,
    DeferredResolutionError,
)
from .loader import CatalogIndex, CatalogReport, PluginCatalogLoader, load_catalog
from .model_package import (
    LatestResolution,
    PackageDescriptor,
    PackageDescriptorSet,
    PackageOverride,
    Resolved,
    Unresolved,
)
from .model_plugin import PluginMetadata, VersionInfo
from .sharding import ShardLayout, plugin_content_hash, shard_path

__all__: Final[tuple[str, ...]] = (
    "BuildOptions",
    "CatalogError",
    "CatalogIndex",
    "CatalogNotFoundError",
    "CatalogParseError",
    "CatalogReferenceError",
    "CatalogReport",
    "CatalogValidationError",
    "DeferredResolutionError",
    "LatestResolution",
    "PackageDescriptor",
    "PackageDescriptorSet",
    "PackageOverride",
    "PluginCatalogLoader",
    "PluginMetadata",
    "Resolved",
    "ShardLayout",
    "Unresolved",
    "VersionInfo",
    "build_descriptor",
    "build_descriptor_set",
    "load_catalog",
    "plugin_content_hash",
    "shard_path",
)
