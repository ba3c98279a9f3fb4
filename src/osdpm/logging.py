# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cache

from rich.console import Console
from rich.text import Text


def stdout_is_terminal() -> bool:
    """Return whether progress output goes to an interactive terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _progress_console(color: bool, emoji: bool, terminal: bool) -> Console:
    # Built without a file so output follows whatever sys.stdout is at print time.
    return Console(
        color_system="auto" if color and terminal else None,
        force_terminal=terminal,
        no_color=not (color and terminal),
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Select an emoji symbol based on the caller's preference.

    Args:
        symbol: Emoji text to include in the output.
        enable: Flag indicating whether emoji output is desired.

    Returns:
        str: Emoji symbol when enabled, otherwise an empty string.
    """

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    terminal = stdout_is_terminal()
    color_enabled = terminal if use_color is None else use_color
    console = _progress_console(color_enabled, use_emoji, terminal)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


@dataclass(slots=True)
class BootstrapLogger:
    """Adapter around the logging helpers honouring verbosity and emoji settings.

    Attributes:
        use_emoji: Whether messages may include emoji glyphs.
        use_color: Optional explicit colour flag overriding TTY detection.
        verbose_enabled: Whether ``verbose`` messages are rendered.
        debug_enabled: Whether ``debug`` messages are rendered.
    """

    use_emoji: bool = True
    use_color: bool | None = None
    verbose_enabled: bool = False
    debug_enabled: bool = False

    def info(self, message: str) -> None:
        info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def verbose(self, message: str) -> None:
        """Emit ``message`` when verbose output was requested.

        Args:
            message: Text describing a routine orchestration step.
        """

        if self.verbose_enabled or self.debug_enabled:
            _print_line(message, style="dim", use_emoji=self.use_emoji, use_color=self.use_color)

    def debug(self, message: str) -> None:
        """Emit ``message`` prefixed with ``[debug]`` when debugging is enabled.

        Args:
            message: Debug payload describing internal decisions.
        """

        if self.debug_enabled:
            _print_line(f"[debug] {message}", style="bold cyan", use_emoji=self.use_emoji, use_color=self.use_color)


__all__ = ["BootstrapLogger", "emoji", "fail", "info", "ok", "warn"]
