"""Common path utilities for lsp-tools."""

from __future__ import annotations

import os
from pathlib import Path


def get_lsp_tools_home() -> Path:
    """Return the base lsp-tools directory, honoring LSP_TOOLS_HOME if set."""

    env_path = os.environ.get("LSP_TOOLS_HOME")
    return Path(env_path).expanduser() if env_path else Path.home() / ".lsp-tools"


def expand_home(path: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the user's home directory.

    ``~user`` forms and paths without a leading tilde are returned unchanged.
    """

    if path == "~":
        return str(Path.home())
    if path.startswith("~/"):
        return os.path.join(str(Path.home()), path[2:])
    return path


def normalize_path(path: str) -> str:
    """Collapse duplicate separators and ``.``/``..`` segments lexically."""

    normalized = os.path.normpath(path)
    # POSIX normpath keeps a leading double slash
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def absolutize(path: str) -> str:
    """Expand ``~``, resolve against the cwd when relative, then normalize."""

    expanded = expand_home(path)
    if not os.path.isabs(expanded):
        expanded = os.path.join(os.getcwd(), expanded)
    return normalize_path(expanded)


__all__ = ["get_lsp_tools_home", "expand_home", "normalize_path", "absolutize"]
