# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for executable linking between projects."""

from __future__ import annotations

import os

import pytest
from conftest import WriteProject

from osdpm.errors import BootstrapPhase, LinkError
from osdpm.graph import build_project_graph
from osdpm.link import link_project_executables


def test_dependency_executables_are_symlinked(write_project: WriteProject) -> None:
    tool = write_project(
        "@osd/tool",
        directory="packages/tool",
        files={"bin/run.js": "#!/usr/bin/env node\n"},
        extra={"bin": "bin/run.js"},
    )
    app = write_project("app", dependencies={"@osd/tool": "link:../tool"})
    projects = {tool.name: tool, app.name: app}

    linked = link_project_executables(projects, build_project_graph(projects))

    assert [(entry.project, entry.command) for entry in linked] == [("app", "tool")]
    link = app.path / "node_modules" / ".bin" / "tool"
    assert link.is_symlink()
    assert not os.path.isabs(os.readlink(link))
    assert link.resolve() == (tool.path / "bin" / "run.js").resolve()
    assert os.access(tool.path / "bin" / "run.js", os.X_OK)


def test_relinking_replaces_existing_links(write_project: WriteProject) -> None:
    tool = write_project("tool", files={"cli.js": "x"}, extra={"bin": {"tool": "cli.js"}})
    app = write_project("app", dependencies={"tool": "link:../tool"})
    projects = {tool.name: tool, app.name: app}
    graph = build_project_graph(projects)

    link_project_executables(projects, graph)
    linked = link_project_executables(projects, graph)

    assert len(linked) == 1
    assert (app.path / "node_modules" / ".bin" / "tool").is_symlink()


def test_executables_that_do_not_exist_yet_are_skipped(write_project: WriteProject) -> None:
    tool = write_project("tool", extra={"bin": {"tool": "target/cli.js"}})
    app = write_project("app", dependencies={"tool": "link:../tool"})
    projects = {tool.name: tool, app.name: app}
    messages: list[str] = []

    linked = link_project_executables(projects, build_project_graph(projects), debug_logger=messages.append)

    assert linked == []
    assert not (app.path / "node_modules" / ".bin" / "tool").exists()
    assert len(messages) == 1
    assert "not linking [tool] of [tool]" in messages[0]


def test_unwritable_bin_directory_raises_link_error(write_project: WriteProject) -> None:
    tool = write_project("tool", files={"cli.js": "x"}, extra={"bin": {"tool": "cli.js"}})
    app = write_project("app", dependencies={"tool": "link:../tool"})
    (app.path / "node_modules").write_text("not a directory", encoding="utf-8")
    projects = {tool.name: tool, app.name: app}

    with pytest.raises(LinkError) as excinfo:
        link_project_executables(projects, build_project_graph(projects))

    assert excinfo.value.project == "app"
    assert excinfo.value.phase is BootstrapPhase.CHECKSUM
