"""Tool locating regex matches inside a sandboxed file."""

from __future__ import annotations

from collections.abc import Callable
from typing import cast

from pydantic import BaseModel, Field

from lsp_tools.tools.base import Tool, ToolRegistration, ToolRequest, ToolResponse
from lsp_tools.tools.fs import PathSandbox
from lsp_tools.tools.positions import MatchPosition, find_regex_positions_in_file

DESCRIPTION = (
    "Find the 0-indexed line and column position of a regex pattern in a file. "
    "Returns an array of matches with their positions. "
    "Only works within allowed directories."
)


class FindRegexPositionInput(ToolRequest):
    path: str = Field(description="Path to the file to search in")
    regex: str = Field(description="Regular expression pattern to search for")


class FindRegexPositionOutput(ToolResponse):
    matches: list[MatchPosition] = Field(description="Matches in document order.")


class FindRegexPositionTool(Tool[FindRegexPositionInput, FindRegexPositionOutput]):
    name = "find_regex_position"
    description = DESCRIPTION
    InputModel = FindRegexPositionInput
    OutputModel = FindRegexPositionOutput

    def __init__(self, sandbox: PathSandbox) -> None:
        self.sandbox = sandbox

    def execute(self, request: FindRegexPositionInput) -> FindRegexPositionOutput:
        file_path = self.sandbox.validate(request.path)
        return FindRegexPositionOutput(matches=find_regex_positions_in_file(file_path, request.regex))


def tool_registrations(sandbox: PathSandbox) -> list[ToolRegistration]:
    tool = FindRegexPositionTool(sandbox)

    def _end_event(validated: BaseModel, output: BaseModel) -> dict[str, object]:
        return {"matches": len(cast(FindRegexPositionOutput, output).matches)}

    return [
        ToolRegistration(
            name=tool.name,
            description=DESCRIPTION,
            input_model=FindRegexPositionInput,
            output_model=FindRegexPositionOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            result_adapter=lambda out: [m.to_wire() for m in cast(FindRegexPositionOutput, out).matches],
            end_event_builder=_end_event,
        )
    ]


__all__ = [
    "tool_registrations",
    "FindRegexPositionInput",
    "FindRegexPositionOutput",
    "FindRegexPositionTool",
]
