# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by plugin catalog operations."""

from __future__ import annotations

from pathlib import Path


class CatalogError(RuntimeError):
    """Base class for every catalog resolution failure."""


class CatalogNotFoundError(CatalogError, FileNotFoundError):
    """Raised when the index or a referenced metadata document is missing."""

    def __init__(self, path: Path, *, plugin_id: str | None = None) -> None:
        """Create the error for the missing ``path``.

        Args:
            path: Filesystem location that does not exist.
            plugin_id: Plugin whose metadata was expected at ``path``, if any.
        """

        self.path = path
        self.plugin_id = plugin_id
        subject = f"metadata for plugin '{plugin_id}'" if plugin_id else "catalog document"
        super().__init__(f"{subject} not found at {path}")


class CatalogParseError(CatalogError):
    """Raised when a catalog document is malformed or misses required fields."""


class CatalogValidationError(CatalogParseError):
    """Raised when a catalog document fails structural schema validation."""

    def __init__(self, message: str, *, json_path: str = "$") -> None:
        """Create the error with the JSON path of the offending field.

        Args:
            message: Human-readable description of the failure.
            json_path: JSON path pointing at the invalid value.
        """

        self.json_path = json_path
        super().__init__(message)


class CatalogReferenceError(CatalogError):
    """Raised when a channel references a version that is not declared."""


class DeferredResolutionError(CatalogError):
    """Raised when an unresolvable implicit ``latest`` package is used."""


__all__ = (
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogParseError",
    "CatalogReferenceError",
    "CatalogValidationError",
    "DeferredResolutionError",
)
