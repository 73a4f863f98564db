# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the user-facing console helpers."""

from __future__ import annotations

import pytest
from rich.table import Table

from jbplugins.logging import fail, info, ok, render, section, warn


@pytest.mark.parametrize(
    ("emit", "symbol"),
    [(info, "ℹ️"), (ok, "✅"), (warn, "⚠️"), (fail, "❌")],
)
def test_messages_respect_emoji_preference(emit, symbol: str, capsys: pytest.CaptureFixture[str]) -> None:
    emit("catalog ready", use_emoji=True, use_color=False)
    emit("catalog ready", use_emoji=False, use_color=False)

    with_emoji, without_emoji = capsys.readouterr().out.splitlines()
    assert with_emoji.startswith(symbol)
    assert with_emoji.endswith("catalog ready")
    assert without_emoji == "catalog ready"


def test_plain_section_and_table_rendering(capsys: pytest.CaptureFixture[str]) -> None:
    table = Table(title="Plugins")
    table.add_column("Plugin")
    table.add_row("org.example.plugin")

    section("Catalog check", use_color=False)
    render(table, use_color=False, use_emoji=False)

    output = capsys.readouterr().out
    assert "--- Catalog check ---" in output
    assert "org.example.plugin" in output
    assert "\x1b[" not in output
