"""Tool registry and aggregation.

Each tool module exports ``tool_registrations`` which yields one or more
``ToolRegistration`` instances bound to the provided sandbox.
``get_tool_registrations`` aggregates them for the router.
"""

from __future__ import annotations

from lsp_tools.tools.allowed_dirs import tool_registrations as allowed_dirs_registrations
from lsp_tools.tools.base import ToolRegistration
from lsp_tools.tools.find_regex_position import tool_registrations as find_regex_registrations
from lsp_tools.tools.fs import PathSandbox


def get_tool_registrations(sandbox: PathSandbox) -> list[ToolRegistration]:
    registrations: list[ToolRegistration] = []
    registrations.extend(find_regex_registrations(sandbox))
    registrations.extend(allowed_dirs_registrations(sandbox))
    return registrations


__all__ = ["get_tool_registrations", "ToolRegistration", "PathSandbox"]
