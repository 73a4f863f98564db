# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Content-hash addressing for the sharded metadata tree."""

from __future__ import annotations

import hashlib
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import CatalogParseError
from .types import INDEX_FILENAME, METADATA_FILENAME

MIN_HASH_LENGTH: Final[int] = 4
_HEX_DIGITS: Final[frozenset[str]] = frozenset(string.hexdigits)


def validate_content_hash(content_hash: str, *, context: str = "index") -> str:
    """Return ``content_hash`` after checking it can address a shard.

    Args:
        content_hash: Hex digest naming a metadata document.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str: The unchanged hash.

    Raises:
        CatalogParseError: If the hash is too short or contains non-hex characters.
    """

    if len(content_hash) < MIN_HASH_LENGTH:
        raise CatalogParseError(
            f"{context}: content hash '{content_hash}' must be at least {MIN_HASH_LENGTH} characters",
        )
    if not set(content_hash) <= _HEX_DIGITS:
        raise CatalogParseError(f"{context}: content hash '{content_hash}' is not a hex digest")
    return content_hash


def shard_parts(content_hash: str) -> tuple[str, str, str]:
    """Split ``content_hash`` into its ``aa``/``bb``/``rest`` directory names."""

    validate_content_hash(content_hash)
    return content_hash[0:2], content_hash[2:4], content_hash[4:]


def shard_path(data_root: Path, content_hash: str) -> Path:
    """Return the metadata document path addressed by ``content_hash``.

    Args:
        data_root: Root directory of the catalog.
        content_hash: Hex digest naming the metadata document.

    Returns:
        Path: ``<data_root>/<h[0:2]>/<h[2:4]>/<h[4:]>/metadata.json``.
    """

    first, second, rest = shard_parts(content_hash)
    return data_root / first / second / rest / METADATA_FILENAME


def plugin_content_hash(xml_id: str) -> str:
    """Return the content hash the catalog producer assigns to ``xml_id``."""

    return hashlib.sha256(xml_id.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class ShardLayout:
    """Describe the on-disk layout of a catalog data root."""

    data_root: Path

    @property
    def index_path(self) -> Path:
        """Return the location of the catalog index document."""

        return self.data_root / INDEX_FILENAME

    def metadata_path(self, content_hash: str) -> Path:
        """Return the metadata document addressed by ``content_hash``."""

        return shard_path(self.data_root, content_hash)

    def content_hash_for(self, path: Path) -> str:
        """Return the content hash encoded in a metadata document ``path``.

        Args:
            path: Metadata document located under :attr:`data_root`.

        Returns:
            str: Hash rebuilt from the shard directory names.
        """

        return "".join(path.relative_to(self.data_root).parent.parts)

    def metadata_documents(self) -> tuple[Path, ...]:
        """Return every metadata document stored under the data root.

        Minimum-length hashes have an empty ``rest`` segment, so their
        documents sit two directories deep instead of three.

        Returns:
            tuple[Path, ...]: Sorted metadata document paths.
        """
        if not self.data_root.is_dir():
            return ()
        found = {
            path
            for pattern in (f"*/*/{METADATA_FILENAME}", f"*/*/*/{METADATA_FILENAME}")
            for path in self.data_root.glob(pattern)
            if path.is_file()
        }
        return tuple(sorted(found))

    def catalog_files(self) -> tuple[Path, ...]:
        """Return the index and metadata documents contributing to checksums."""

        paths: list[Path] = []
        if self.index_path.is_file():
            paths.append(self.index_path)
        paths.extend(self.metadata_documents())
        return tuple(paths)

    def checksum(self) -> str:
        """Return a SHA-256 digest covering every catalog document.

        Each file contributes its root-relative POSIX path, a NUL separator and
        its raw bytes, so renames and content edits both change the digest.

        Returns:
            str: Hex-encoded checksum.
        """
        hasher = hashlib.sha256()
        for path in self.catalog_files():
            hasher.update(path.relative_to(self.data_root).as_posix().encode("utf-8"))
            hasher.update(b"\0")
            hasher.update(path.read_bytes())
        return hasher.hexdigest()


__all__ = [
    "MIN_HASH_LENGTH",
    "ShardLayout",
    "plugin_content_hash",
    "shard_parts",
    "shard_path",
    "validate_content_hash",
]
