# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating catalog documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from .errors import CatalogValidationError
from .io import load_schema
from .types import JSONValue

DEFAULT_SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent / "schemas"
INDEX_SCHEMA_FILENAME: Final[str] = "index.schema.json"
METADATA_SCHEMA_FILENAME: Final[str] = "metadata.schema.json"


@dataclass(slots=True)
class SchemaRepository:
    """Manage JSON schema validators for index and metadata documents."""

    schema_root: Path
    index_validator: Draft202012Validator
    metadata_validator: Draft202012Validator

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load schema validators from disk.

        Args:
            schema_root: Optional override for the schema directory.

        Returns:
            SchemaRepository: Repository configured with index and metadata validators.
        """
        resolved_root = schema_root or DEFAULT_SCHEMA_ROOT
        index_schema = load_schema(resolved_root / INDEX_SCHEMA_FILENAME)
        metadata_schema = load_schema(resolved_root / METADATA_SCHEMA_FILENAME)
        return cls(
            schema_root=resolved_root,
            index_validator=Draft202012Validator(index_schema),
            metadata_validator=Draft202012Validator(metadata_schema),
        )

    def validate_index(self, document: JSONValue, *, source: Path) -> None:
        """Validate an index document, raising on the most relevant error.

        Args:
            document: Parsed index payload.
            source: Path used in error reporting.

        Raises:
            CatalogValidationError: When the document fails schema validation.
        """

        _validate(self.index_validator, document, source=source)

    def validate_metadata(self, document: JSONValue, *, source: Path) -> None:
        """Validate a plugin metadata document.

        Args:
            document: Parsed metadata payload.
            source: Path used in error reporting.

        Raises:
            CatalogValidationError: When the document fails schema validation.
        """

        _validate(self.metadata_validator, document, source=source)


def _validate(validator: Draft202012Validator, document: JSONValue, *, source: Path) -> None:
    error = best_match(validator.iter_errors(document))
    if error is None:
        return
    raise CatalogValidationError(f"{source}: {error.json_path}: {error.message}", json_path=error.json_path)


__all__ = ["DEFAULT_SCHEMA_ROOT", "SchemaRepository"]
