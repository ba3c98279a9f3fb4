# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dependency-aware bootstrap orchestrator for multi-project workspaces."""

from __future__ import annotations

from importlib import metadata

from .bootstrap import BootstrapOrchestrator, BootstrapResult, BootstrapState, bootstrap
from .config import BootstrapOptions

__all__ = [
    "BootstrapOptions",
    "BootstrapOrchestrator",
    "BootstrapResult",
    "BootstrapState",
    "__version__",
    "bootstrap",
]

try:
    __version__ = metadata.version("osdpm")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
