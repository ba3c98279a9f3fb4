# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the bootstrap command."""

from __future__ import annotations

from pathlib import Path

import typer

from ..bootstrap import bootstrap
from ..config import WorkspaceConfig, load_workspace_config
from ..errors import ConfigError
from ..graph import build_project_graph
from ..logging import BootstrapLogger
from ..project import Project
from ..projects import get_projects
from .options import (
    CACHE_OPTION,
    CONCURRENCY_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    FROZEN_LOCKFILE_OPTION,
    NO_COLOR_OPTION,
    PREFER_OFFLINE_OPTION,
    ROOT_OPTION,
    SINGLE_VERSION_OPTION,
    SOURCE_MAPS_OPTION,
    VERBOSE_OPTION,
)
from .shared import CLIError, build_cli_logger

app = typer.Typer(help="Workspace project manager.", no_args_is_help=True, add_completion=False)


@app.callback()
def main() -> None:
    """Workspace project manager."""


def _load_workspace(
    root: Path,
    overrides: dict[str, object],
) -> tuple[WorkspaceConfig, dict[str, Project]]:
    """Return the workspace configuration and discovered projects.

    Raises:
        CLIError: If configuration is invalid or no project is found.
    """

    try:
        config = load_workspace_config(root).with_overrides(overrides)
        projects = get_projects(root, config.projects)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    if not projects:
        raise CLIError(f"No projects found in {root}")
    return config, projects


def _report(logger: BootstrapLogger, built: list[str], skipped: list[str]) -> None:
    if built:
        logger.info(f"Bootstrapped: {', '.join(built)}")
    if skipped:
        logger.verbose(f"Cached: {', '.join(skipped)}")


@app.command("bootstrap", help="Install dependencies and crosslink projects.")
def bootstrap_command(
    root: ROOT_OPTION = Path("."),
    cache: CACHE_OPTION = None,
    frozen_lockfile: FROZEN_LOCKFILE_OPTION = None,
    prefer_offline: PREFER_OFFLINE_OPTION = None,
    single_version: SINGLE_VERSION_OPTION = None,
    concurrency: CONCURRENCY_OPTION = None,
    source_maps: SOURCE_MAPS_OPTION = None,
    verbose: VERBOSE_OPTION = False,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """Execute the bootstrap command.

    Raises:
        typer.Exit: With status ``1`` when loading or bootstrapping fails.
    """

    logger = build_cli_logger(emoji=emoji, verbose=verbose, debug=debug, no_color=no_color)
    overrides: dict[str, object] = {
        "cache": cache,
        "frozen_lockfile": frozen_lockfile,
        "prefer_offline": prefer_offline,
        "single_version": single_version,
        "concurrency": concurrency,
        "source_maps": source_maps,
    }
    try:
        config, projects = _load_workspace(root, overrides)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    lockfile = root / config.lockfile
    if not lockfile.is_file():
        logger.warn(f"No lockfile found at {lockfile}; locked versions are not fingerprinted")
    graph = build_project_graph(projects)
    logger.info(f"Bootstrapping {len(projects)} projects")
    result = bootstrap(
        projects,
        graph,
        config.options,
        lockfile=lockfile,
        logger=logger,
    )
    if result.error is not None:
        logger.fail(str(result.error))
        raise typer.Exit(code=1)
    _report(logger, result.built, result.skipped)
    logger.ok("Bootstrap complete")


__all__ = ["app", "bootstrap_command"]
