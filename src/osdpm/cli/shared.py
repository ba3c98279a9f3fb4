# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from ..logging import BootstrapLogger


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


def build_cli_logger(
    *,
    emoji: bool,
    verbose: bool = False,
    debug: bool = False,
    no_color: bool = False,
) -> BootstrapLogger:
    """Return a logger configured from CLI presentation flags.

    Args:
        emoji: Whether log output may include emoji glyphs.
        verbose: Whether verbose messages should be shown.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        BootstrapLogger: Logger honouring the requested flags.
    """

    return BootstrapLogger(
        use_emoji=emoji,
        use_color=False if no_color else None,
        verbose_enabled=verbose,
        debug_enabled=debug,
    )


__all__ = ["CLIError", "build_cli_logger"]
