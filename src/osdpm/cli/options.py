# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option declarations for the bootstrap CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Workspace root.", file_okay=False, resolve_path=True),
]
CACHE_OPTION = Annotated[
    bool | None,
    typer.Option("--cache/--no-cache", help="Skip bootstrap steps whose inputs are unchanged."),
]
FROZEN_LOCKFILE_OPTION = Annotated[
    bool | None,
    typer.Option("--frozen-lockfile/--no-frozen-lockfile", help="Fail instead of updating the lockfile."),
]
PREFER_OFFLINE_OPTION = Annotated[
    bool | None,
    typer.Option("--prefer-offline/--no-prefer-offline", help="Prefer the local package cache over the network."),
]
SINGLE_VERSION_OPTION = Annotated[
    str | None,
    typer.Option("--single-version", help="Package that must resolve to exactly one locked version."),
]
CONCURRENCY_OPTION = Annotated[
    int | None,
    typer.Option("--concurrency", "-j", min=1, help="Maximum bootstrap steps running at once."),
]
SOURCE_MAPS_OPTION = Annotated[
    bool | None,
    typer.Option("--source-maps/--no-source-maps", help="Emit source maps when building targets."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show verbose progress output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show debug output."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
NO_COLOR_OPTION = Annotated[
    bool,
    typer.Option("--no-color", help="Disable coloured output."),
]

__all__ = [
    "CACHE_OPTION",
    "CONCURRENCY_OPTION",
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "FROZEN_LOCKFILE_OPTION",
    "NO_COLOR_OPTION",
    "PREFER_OFFLINE_OPTION",
    "ROOT_OPTION",
    "SINGLE_VERSION_OPTION",
    "SOURCE_MAPS_OPTION",
    "VERBOSE_OPTION",
]
