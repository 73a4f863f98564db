# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Recursive merge helpers for nested configuration mappings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

PATH_SEPARATOR: Final[str] = "."


def merge_two(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override`` without mutating either input.

    Nested mappings present on both sides are merged recursively; any other
    value from ``override`` replaces the value in ``base``.

    Args:
        base: Mapping providing the initial entries.
        override: Mapping whose entries take precedence.

    Returns:
        dict[str, Any]: Newly constructed merged mapping.
    """

    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if key in result and isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = merge_two(current, value)
        else:
            result[key] = value
    return result


def merge_all(mappings: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Merge ``mappings`` left to right, later entries winning key by key.

    The sequence is split in halves and merged pairwise so the nesting depth of
    merge calls grows logarithmically with the number of inputs.

    Args:
        mappings: Ordered mappings to combine.

    Returns:
        Mapping[str, Any]: Combined mapping. A single input is returned as-is.
    """

    if not mappings:
        return {}
    return _merge_range(mappings, 0, len(mappings))


def _merge_range(mappings: Sequence[Mapping[str, Any]], start: int, end: int) -> Mapping[str, Any]:
    # start < end holds for every call.
    if end - start >= 2:
        middle = start + (end - start) // 2
        return merge_two(_merge_range(mappings, start, middle), _merge_range(mappings, middle, end))
    return mappings[start]


def set_by_path(path: Sequence[str], value: Any) -> dict[str, Any]:
    """Return a nested mapping that places ``value`` at ``path``.

    Args:
        path: Non-empty sequence of key segments.
        value: Leaf value stored at the innermost key.

    Returns:
        dict[str, Any]: Singleton mapping chain, e.g. ``{"a": {"b": value}}``.

    Raises:
        ValueError: If ``path`` is empty.
    """

    if not path:
        raise ValueError("path must contain at least one segment")
    nested: Any = value
    for segment in reversed(path):
        nested = {segment: nested}
    return nested


def expand_dotted_keys(mapping: Mapping[str, Any], *, separator: str = PATH_SEPARATOR) -> Mapping[str, Any]:
    """Expand keys such as ``"a.b.c"`` into nested mappings.

    Keys expanding into overlapping paths are combined with :func:`merge_all`
    in insertion order, so a later key wins when two keys resolve to the same
    full path.

    Args:
        mapping: Mapping whose keys use ``separator`` as a path delimiter.
        separator: Delimiter splitting keys into path segments.

    Returns:
        Mapping[str, Any]: Equivalent nested mapping.
    """

    singletons = [set_by_path(key.split(separator), value) for key, value in mapping.items()]
    return merge_all(singletons)


__all__ = [
    "PATH_SEPARATOR",
    "expand_dotted_keys",
    "merge_all",
    "merge_two",
    "set_by_path",
]
