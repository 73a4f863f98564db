# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High-level loader that resolves a sharded catalog into package descriptors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeAlias

from .builder import DEFAULT_BUILD_OPTIONS, BuildOptions, build_descriptor_set
from .errors import CatalogError, CatalogReferenceError
from .io import load_document
from .model_package import PackageDescriptorSet
from .model_plugin import PluginMetadata
from .schema import SchemaRepository
from .sharding import ShardLayout, validate_content_hash
from .utils import expect_mapping, string_mapping

LOGGER = logging.getLogger(__name__)

CatalogIndex: TypeAlias = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class CatalogReport:
    """Outcome of resolving every plugin, with failures isolated per plugin."""

    packages: Mapping[str, PackageDescriptorSet]
    failures: Mapping[str, CatalogError]

    @property
    def ok(self) -> bool:
        """Return ``True`` when every indexed plugin resolved."""

        return not self.failures

    @property
    def total(self) -> int:
        """Return the number of plugins that were attempted."""

        return len(self.packages) + len(self.failures)


@dataclass(slots=True)
class PluginCatalogLoader:
    """Loader that validates and resolves a content-addressed plugin catalog."""

    data_root: Path
    options: BuildOptions = DEFAULT_BUILD_OPTIONS
    overrides: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    jobs: int = 1
    schema_root: Path | None = None
    _schemas: SchemaRepository = field(init=False, repr=False)
    _layout: ShardLayout = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise schema validators and the shard layout."""

        self._schemas = SchemaRepository.load(self.schema_root)
        self.schema_root = self._schemas.schema_root
        self._layout = ShardLayout(self.data_root)

    @property
    def layout(self) -> ShardLayout:
        """Return the shard layout of :attr:`data_root`."""

        return self._layout

    def load_index(self) -> CatalogIndex:
        """Read and validate the catalog index.

        Returns:
            CatalogIndex: Read-only mapping from plugin identifier to content hash.

        Raises:
            CatalogNotFoundError: If the index document is missing.
            CatalogParseError: If the index is malformed.
        """

        path = self._layout.index_path
        document = load_document(path)
        self._schemas.validate_index(document, source=path)
        entries = string_mapping(document, key="<root>", context=str(path))
        for plugin_id, content_hash in entries.items():
            validate_content_hash(content_hash, context=f"{path}: {plugin_id}")
        LOGGER.debug("loaded %d index entries from %s", len(entries), path)
        return MappingProxyType(dict(entries))

    def load_metadata(self, plugin_id: str, content_hash: str) -> PluginMetadata:
        """Read the metadata document addressed by ``content_hash``.

        Args:
            plugin_id: Identifier the document is indexed under.
            content_hash: Hash naming the document's shard directory.

        Returns:
            PluginMetadata: Decoded and validated metadata.

        Raises:
            CatalogNotFoundError: If the metadata document is missing.
            CatalogParseError: If the document is malformed.
        """

        path = self._layout.metadata_path(content_hash)
        document = load_document(path, plugin_id=plugin_id)
        self._schemas.validate_metadata(document, source=path)
        mapping = expect_mapping(document, key="<root>", context=str(path))
        metadata = PluginMetadata.from_mapping(mapping, context=str(path))
        if metadata.xml_id != plugin_id:
            LOGGER.warning("%s: xml_id '%s' differs from index key '%s'", path, metadata.xml_id, plugin_id)
        return metadata

    def load_plugin(self, plugin_id: str, *, index: CatalogIndex | None = None) -> PackageDescriptorSet:
        """Resolve the descriptor set of a single plugin.

        Args:
            plugin_id: Identifier to resolve.
            index: Previously loaded index; read from disk when omitted.

        Returns:
            PackageDescriptorSet: Descriptors for ``plugin_id``.

        Raises:
            CatalogReferenceError: If ``plugin_id`` is not indexed or a channel is dangling.
        """

        catalog_index = index if index is not None else self.load_index()
        try:
            content_hash = catalog_index[plugin_id]
        except KeyError as exc:
            raise CatalogReferenceError(f"plugin '{plugin_id}' is not present in the catalog index") from exc
        metadata = self.load_metadata(plugin_id, content_hash)
        return build_descriptor_set(
            metadata,
            plugin_id=plugin_id,
            options=self.options,
            overrides=self.overrides.get(plugin_id),
        )

    def load_packages(self) -> dict[str, PackageDescriptorSet]:
        """Resolve every indexed plugin, failing on the first error.

        Returns:
            dict[str, PackageDescriptorSet]: Descriptor sets keyed by plugin identifier.
        """

        index = self.load_index()
        return {plugin_id: self.load_plugin(plugin_id, index=index) for plugin_id in index}

    def load_report(self) -> CatalogReport:
        """Resolve every indexed plugin, collecting failures per plugin.

        Index failures still propagate because no plugin can be resolved without it.

        Returns:
            CatalogReport: Resolved packages and the error raised for each failed plugin.
        """

        index = self.load_index()
        packages: dict[str, PackageDescriptorSet] = {}
        failures: dict[str, CatalogError] = {}
        if self.jobs > 1:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                future_map = {
                    executor.submit(self.load_plugin, plugin_id, index=index): plugin_id for plugin_id in index
                }
                for future in as_completed(future_map):
                    plugin_id = future_map[future]
                    try:
                        packages[plugin_id] = future.result()
                    except CatalogError as exc:
                        failures[plugin_id] = exc
        else:
            for plugin_id in index:
                try:
                    packages[plugin_id] = self.load_plugin(plugin_id, index=index)
                except CatalogError as exc:
                    failures[plugin_id] = exc
        for plugin_id, exc in failures.items():
            LOGGER.error("failed to resolve plugin '%s': %s", plugin_id, exc)
        ordered = {plugin_id: packages[plugin_id] for plugin_id in index if plugin_id in packages}
        return CatalogReport(packages=MappingProxyType(ordered), failures=MappingProxyType(failures))

    def orphaned_documents(self, *, index: CatalogIndex | None = None) -> tuple[Path, ...]:
        """Return metadata documents that no index entry references."""

        catalog_index = index if index is not None else self.load_index()
        referenced = set(catalog_index.values())
        return tuple(
            path
            for path in self._layout.metadata_documents()
            if self._layout.content_hash_for(path) not in referenced
        )

    def compute_checksum(self) -> str:
        """Calculate a checksum representing the current catalog contents.

        Returns:
            str: Hex-encoded checksum covering the index and metadata documents.
        """

        return self._layout.checksum()


def load_catalog(data_root: Path, **kwargs: Any) -> dict[str, PackageDescriptorSet]:
    """Resolve the catalog stored at ``data_root`` into descriptor sets."""

    return PluginCatalogLoader(data_root, **kwargs).load_packages()


__all__ = [
    "CatalogIndex",
    "CatalogReport",
    "PluginCatalogLoader",
    "load_catalog",
]
