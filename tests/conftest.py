# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from jbplugins.catalog import plugin_content_hash, shard_path

CatalogWriter = Callable[..., Path]


def write_json(path: Path, payload: object) -> None:
    """Serialize ``payload`` as formatted JSON into ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def sample_metadata(xml_id: str = "org.example.plugin", *, latest: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Return a metadata document with a jar release and a zip pre-release."""

    return {
        "xml_id": xml_id,
        "numeric_id": 4242,
        "versions": {
            "1.0.0": {
                "download_url": f"https://plugins.example.invalid/{xml_id}/1.0.0",
                "sha256": "c2hhMjU2LTEuMC4w",
                "channel": "stable",
                "dependencies": ["com.intellij.modules.platform"],
                "optional_dependencies": [],
            },
            "1.1.0-eap": {
                "download_url": f"https://plugins.example.invalid/{xml_id}/1.1.0-eap",
                "sha256": "c2hhMjU2LTEuMS4w",
                "file_name": "example-plugin-1.1.0-eap.zip",
                "channel": "eap",
                "dependencies": [],
                "optional_dependencies": ["org.jetbrains.kotlin"],
            },
        },
        "latest": dict(latest) if latest is not None else {"stable": "1.0.0", "eap": "1.1.0-eap"},
    }


@pytest.fixture
def write_catalog(tmp_path: Path) -> CatalogWriter:
    """Return a helper writing an index plus sharded metadata documents.

    The helper accepts a mapping of plugin identifier to metadata payload and
    an optional mapping of explicit content hashes.
    """

    def _write(
        plugins: Mapping[str, object],
        *,
        hashes: Mapping[str, str] | None = None,
        root: Path | None = None,
    ) -> Path:
        data_root = root or (tmp_path / "data")
        data_root.mkdir(parents=True, exist_ok=True)
        index: dict[str, str] = {}
        for plugin_id, payload in plugins.items():
            content_hash = (hashes or {}).get(plugin_id) or plugin_content_hash(plugin_id)
            index[plugin_id] = content_hash
            if payload is not None:
                write_json(shard_path(data_root, content_hash), payload)
        write_json(data_root / "index.json", index)
        return data_root

    return _write


@pytest.fixture
def metadata_factory() -> Callable[..., dict[str, Any]]:
    """Return the :func:`sample_metadata` builder for tests that customise payloads."""

    return sample_metadata
