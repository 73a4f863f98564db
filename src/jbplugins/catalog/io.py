# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading catalog JSON documents and schemas."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import cast

from .errors import CatalogNotFoundError, CatalogParseError
from .types import JSONValue


def load_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON schema from disk and ensure it is a JSON object.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        CatalogNotFoundError: If the schema file does not exist.
        CatalogParseError: If the schema cannot be parsed or is not a JSON object.
    """
    payload = _read_json(path, description="JSON schema")
    return _ensure_json_object(payload, context=str(path))


def load_document(path: Path, *, plugin_id: str | None = None) -> JSONValue:
    """Load a JSON document from disk and validate the payload.

    Args:
        path: Filesystem path to the JSON document.
        plugin_id: Plugin the document belongs to, used in error messages.

    Returns:
        JSONValue: Parsed JSON value extracted from the document.

    Raises:
        CatalogNotFoundError: If the JSON document is missing.
        CatalogParseError: If the document cannot be parsed or contains invalid JSON.
    """
    payload = _read_json(path, description="catalog JSON", plugin_id=plugin_id)
    return _ensure_json_value(payload, context=str(path))


def _read_json(path: Path, *, description: str, plugin_id: str | None = None) -> JSONValue:
    """Return the decoded JSON payload stored at ``path``."""

    if not path.is_file():
        raise CatalogNotFoundError(path, plugin_id=plugin_id)
    try:
        with path.open("r", encoding="utf-8") as stream:
            return cast(JSONValue, json.load(stream))
    except FileNotFoundError as exc:
        raise CatalogNotFoundError(path, plugin_id=plugin_id) from exc
    except json.JSONDecodeError as exc:
        raise CatalogParseError(f"{path}: failed to parse {description}: {exc.msg} (line {exc.lineno})") from exc
    except UnicodeDecodeError as exc:
        raise CatalogParseError(f"{path}: {description} is not valid UTF-8") from exc
    except OSError as exc:
        raise CatalogParseError(f"{path}: unable to read {description}: {exc.strerror or exc}") from exc


__all__ = ["load_document", "load_schema"]


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    """Ensure ``value`` is a JSON object, raising on type mismatch.

    Args:
        value: Parsed JSON payload to validate.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Validated JSON object.

    Raises:
        CatalogParseError: If ``value`` is not a mapping.
    """

    mapping = _ensure_json_value(value, context=context)
    if not isinstance(mapping, Mapping):
        raise CatalogParseError(f"{context}: expected a JSON object")
    return mapping


def _ensure_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    Args:
        value: Parsed JSON payload to validate recursively.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Validated JSON value.

    Raises:
        CatalogParseError: If ``value`` contains unsupported JSON constructs.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _ensure_json_value(item, context=f"{context}.{key}") for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise CatalogParseError(f"{context}: value is not valid JSON")
