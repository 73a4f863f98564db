# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve content-addressed plugin catalogs into buildable package descriptors."""

from __future__ import annotations

from .catalog import (
    BuildOptions,
    CatalogError,
    CatalogNotFoundError,
    CatalogParseError,
    CatalogReferenceError,
    CatalogValidationError,
    DeferredResolutionError,
    PackageDescriptor,
    PackageDescriptorSet,
    PluginCatalogLoader,
    PluginMetadata,
    load_catalog,
)
from .merge import expand_dotted_keys, merge_all

__version__ = "0.1.0"

__all__ = [
    "BuildOptions",
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogParseError",
    "CatalogReferenceError",
    "CatalogValidationError",
    "DeferredResolutionError",
    "PackageDescriptor",
    "PackageDescriptorSet",
    "PluginCatalogLoader",
    "PluginMetadata",
    "__version__",
    "expand_dotted_keys",
    "load_catalog",
    "merge_all",
]
