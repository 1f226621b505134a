"""Tool reporting the directories the sandbox permits."""

from __future__ import annotations

from collections.abc import Callable
from typing import cast

from pydantic import Field

from lsp_tools.tools.base import Tool, ToolRegistration, ToolRequest, ToolResponse
from lsp_tools.tools.fs import PathSandbox

DESCRIPTION = (
    "Returns the list of directories that this server is allowed to access. "
    "Use this to understand which directories are available before trying to access files."
)


class ListAllowedDirectoriesInput(ToolRequest):
    pass


class ListAllowedDirectoriesOutput(ToolResponse):
    directories: list[str] = Field(description="Normalized absolute allowed directories.")

    def render(self) -> str:
        return "Allowed directories:\n" + "\n".join(self.directories)


class ListAllowedDirectoriesTool(Tool[ListAllowedDirectoriesInput, ListAllowedDirectoriesOutput]):
    name = "list_allowed_directories"
    description = DESCRIPTION
    InputModel = ListAllowedDirectoriesInput
    OutputModel = ListAllowedDirectoriesOutput

    def __init__(self, sandbox: PathSandbox) -> None:
        self.sandbox = sandbox

    def execute(self, request: ListAllowedDirectoriesInput) -> ListAllowedDirectoriesOutput:
        return ListAllowedDirectoriesOutput(directories=list(self.sandbox.allowed_directories()))


def tool_registrations(sandbox: PathSandbox) -> list[ToolRegistration]:
    tool = ListAllowedDirectoriesTool(sandbox)
    return [
        ToolRegistration(
            name=tool.name,
            description=DESCRIPTION,
            input_model=ListAllowedDirectoriesInput,
            output_model=ListAllowedDirectoriesOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            result_adapter=lambda out: cast(ListAllowedDirectoriesOutput, out).render(),
        )
    ]


__all__ = [
    "tool_registrations",
    "ListAllowedDirectoriesInput",
    "ListAllowedDirectoriesOutput",
    "ListAllowedDirectoriesTool",
]
