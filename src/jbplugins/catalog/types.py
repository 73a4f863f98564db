# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for the plugin catalog."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

INDEX_FILENAME: Final[str] = "index.json"
METADATA_FILENAME: Final[str] = "metadata.json"

STABLE_CHANNEL: Final[str] = "stable"
DEFAULT_EXTENSION: Final[str] = "jar"
DEFAULT_NAME_PREFIX: Final[str] = "jetbrains-plugin-"
HASH_ALGORITHM: Final[str] = "sha256"

ZIP_SUFFIX: Final[str] = ".zip"
JAR_SUFFIX: Final[str] = ".jar"

__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_NAME_PREFIX",
    "HASH_ALGORITHM",
    "INDEX_FILENAME",
    "JAR_SUFFIX",
    "JSONPrimitive",
    "JSONValue",
    "METADATA_FILENAME",
    "STABLE_CHANNEL",
    "ZIP_SUFFIX",
]
