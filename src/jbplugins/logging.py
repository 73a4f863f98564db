# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console output with optional colour and emoji support.

Diagnostics for developers go through :mod:`logging`; the helpers here
print the messages and tables a catalog user asked for.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Final, Literal

from rich.console import Console, RenderableType
from rich.rule import Rule
from rich.text import Text

MessageLevel = Literal["info", "ok", "warn", "fail"]

_LEVEL_STYLES: Final[dict[MessageLevel, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def _cached_console(color: bool, emoji: bool, tty: bool) -> Console:
    colour_active = color and tty
    return Console(
        color_system="auto" if colour_active else None,
        force_terminal=tty,
        no_color=not colour_active,
        emoji=emoji,
        soft_wrap=True,
    )


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a Rich console configured for ``color`` and ``emoji`` preferences.

    Consoles are cached per preset and TTY state, so repeated calls share one
    instance.

    Args:
        color: ``True`` when ANSI colour output should be enabled.
        emoji: ``True`` when Rich should render emoji glyphs.

    Returns:
        Console: Console matching the preferences.
    """

    return _cached_console(color, emoji, detect_tty())


def render(renderable: RenderableType, *, use_color: bool, use_emoji: bool) -> None:
    """Print a Rich renderable such as a plugin table.

    Args:
        renderable: Table, rule or text to print.
        use_color: Flag indicating whether colour output is desired.
        use_emoji: Flag indicating whether emoji output is desired.
    """

    get_console(color=use_color, emoji=use_emoji).print(renderable)


def _emit(level: MessageLevel, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    symbol, style = _LEVEL_STYLES[level]
    color_enabled = detect_tty() if use_color is None else use_color
    text = Text(f"{symbol if use_emoji else ''}{msg}")
    if color_enabled:
        text.stylize(style)
    get_console(color=color_enabled, emoji=use_emoji).print(text)


def section(title: str, *, use_color: bool) -> None:
    """Render a header separating blocks of command output.

    Args:
        title: Section title displayed to the user.
        use_color: Flag indicating whether colour output is desired.
    """

    console = get_console(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = [
    "MessageLevel",
    "detect_tty",
    "fail",
    "get_console",
    "info",
    "ok",
    "render",
    "section",
    "warn",
]
