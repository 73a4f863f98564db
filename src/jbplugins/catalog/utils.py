# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typed field readers for decoded plugin metadata documents.

Every reader receives the raw value of one field together with the field name
and a context prefix (usually the document path), and raises
:class:`CatalogParseError` naming the offending field when the value does not
have the expected shape.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import NoReturn

from .errors import CatalogParseError
from .types import JSONValue

_TEXT_TYPES = (str, bytes, bytearray)


def _reject(context: str, key: str, expected: str) -> NoReturn:
    raise CatalogParseError(f"{context}: expected '{key}' to be {expected}")


def _is_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def expect_string(value: JSONValue | None, *, key: str, context: str) -> str:
    """Return the required string field ``key``.

    Raises:
        CatalogParseError: If the field is absent or not a string.
    """

    if value is None:
        raise CatalogParseError(f"{context}: missing required field '{key}'")
    if not isinstance(value, str):
        _reject(context, key, "a string")
    return value


def optional_string(value: JSONValue | None, *, key: str, context: str) -> str | None:
    """Return the string field ``key`` or ``None`` when the producer omitted it."""

    return None if value is None else expect_string(value, key=key, context=context)


def optional_int(value: JSONValue | None, *, key: str, context: str) -> int | None:
    """Return the integer field ``key`` or ``None``; booleans are not integers."""

    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        _reject(context, key, "an integer")
    return value


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return a list of plugin identifiers such as ``dependencies``.

    A missing field yields an empty tuple because the producer drops empty
    dependency lists.

    Args:
        value: Raw JSON value of the field.
        key: Field name used in error messages.
        context: Prefix describing the document being decoded.

    Returns:
        tuple[str, ...]: Entries in document order.

    Raises:
        CatalogParseError: If the field is not an array or holds a non-string entry.
    """

    if value is None:
        return ()
    if not _is_array(value):
        _reject(context, key, "an array of strings")
    for position, item in enumerate(value):
        if not isinstance(item, str):
            _reject(context, f"{key}[{position}]", "a string")
    return tuple(value)


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return the required object field ``key``."""

    if value is None:
        raise CatalogParseError(f"{context}: missing required field '{key}'")
    if not isinstance(value, Mapping):
        _reject(context, key, "an object")
    return value


def string_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, str]:
    """Return an object whose values are all strings, such as ``latest`` or the index.

    Raises:
        CatalogParseError: If the field is absent, not an object, or holds a non-string value.
    """

    mapping = expect_mapping(value, key=key, context=context)
    for entry_key, entry_value in mapping.items():
        if not isinstance(entry_value, str):
            _reject(context, f"{key}.{entry_key}", "a string")
    return dict(mapping)


def freeze_json_mapping(value: Mapping[str, JSONValue], *, context: str) -> Mapping[str, JSONValue]:
    """Return a read-only deep copy of a decoded JSON object.

    Nested objects become :class:`types.MappingProxyType` instances and arrays
    become tuples, so the raw document kept next to the typed metadata cannot
    be mutated by consumers.

    Args:
        value: Decoded JSON object.
        context: Prefix describing the document being frozen.

    Returns:
        Mapping[str, JSONValue]: Frozen copy of ``value``.

    Raises:
        CatalogParseError: If a key is not a string or a value is not JSON.
    """

    frozen: dict[str, JSONValue] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise CatalogParseError(f"{context}: object keys must be strings, got {key!r}")
        frozen[key] = freeze_json_value(item, context=f"{context}.{key}")
    return MappingProxyType(frozen)


def freeze_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Return ``value`` with every container replaced by its read-only form."""

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return freeze_json_mapping(value, context=context)
    if _is_array(value):
        return tuple(freeze_json_value(item, context=f"{context}[]") for item in value)
    raise CatalogParseError(f"{context}: {type(value).__name__} is not a JSON value")


__all__ = [
    "expect_mapping",
    "expect_string",
    "freeze_json_mapping",
    "freeze_json_value",
    "optional_int",
    "optional_string",
    "string_array",
    "string_mapping",
]
