"""Regex match positions as zero-indexed line/column spans.

Offsets produced by ``re`` are mapped onto ``content.split("\\n")``; each
newline counts as one character between lines. Spans are half-open: the end
coordinate points just past the last matched character, and a match that
consumes a line's newline ends at column 0 of the following line.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable
from pathlib import Path

from pydantic import ConfigDict, Field

from lsp_tools.errors import ErrorKind, LspToolsError
from lsp_tools.tools.base import ToolResponse


class InvalidPatternError(LspToolsError):
    """Raised when a pattern does not compile."""

    def __init__(self, pattern: str, error: re.error) -> None:
        super().__init__(ErrorKind.INVALID_PATTERN, f"invalid regex {pattern!r}: {error}")
        self.pattern = pattern
        self.error = error


class FileUnreadableError(LspToolsError):
    """Raised when the file to search cannot be read as text."""

    def __init__(self, path: str | Path, error: Exception) -> None:
        super().__init__(ErrorKind.FILE_UNREADABLE, f"cannot read {path}: {error}")
        self.path = Path(path)
        self.error = error


class MatchPosition(ToolResponse):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match: str = Field(description="Matched text.")
    line: int = Field(ge=0, description="Line of the first matched character (0-indexed).")
    column: int = Field(ge=0, description="Column of the first matched character (0-indexed).")
    end_line: int = Field(ge=0, alias="endLine", description="Line just past the match (0-indexed).")
    end_column: int = Field(ge=0, alias="endColumn", description="Column just past the match (0-indexed, exclusive).")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


ReadText = Callable[[Path], str]


def _read_utf8(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(pattern, exc) from exc


def find_regex_positions_in_content(content: str, pattern: str) -> list[MatchPosition]:
    """Return every non-empty match of ``pattern`` in ``content`` in document order."""

    regex = compile_pattern(pattern)
    if not content:
        return []

    lines = content.split("\n")
    positions: list[MatchPosition] = []
    # matches arrive in order, so the line walk resumes where the last one began
    line_index = 0
    line_offset = 0

    for found in regex.finditer(content):
        text = found.group(0)
        if not text:
            continue
        start = found.start()

        while line_offset + len(lines[line_index]) + 1 <= start:
            line_offset += len(lines[line_index]) + 1
            line_index += 1
        column = start - line_offset

        end_line, end_column = _advance(lines, line_index, column, len(text))
        positions.append(
            MatchPosition(
                match=text,
                line=line_index,
                column=column,
                end_line=end_line,
                end_column=end_column,
            )
        )

    return positions


def _advance(lines: list[str], line: int, column: int, count: int) -> tuple[int, int]:
    """Move ``count`` characters forward from ``(line, column)``."""

    remaining = count
    while remaining > 0 and line < len(lines):
        room = len(lines[line]) - column + 1
        if remaining <= room:
            column += remaining
            remaining = 0
        else:
            remaining -= room
            line += 1
            column = 0

    if column > len(lines[line]):
        return line + 1, 0
    return line, column


def slice_span(content: str, position: MatchPosition) -> str:
    """Return the text of ``content`` covered by ``position``."""

    lines = content.split("\n")

    def offset(line: int, column: int) -> int:
        return sum(len(text) + 1 for text in lines[:line]) + column

    return content[offset(position.line, position.column) : offset(position.end_line, position.end_column)]


def read_file_content(path: str | Path, *, read_text: ReadText = _read_utf8) -> str:
    file_path = Path(path)
    try:
        return read_text(file_path)
    except (OSError, ValueError) as exc:
        raise FileUnreadableError(file_path, exc) from exc


def find_regex_positions_in_file(
    path: str | Path,
    pattern: str,
    *,
    read_text: ReadText = _read_utf8,
) -> list[MatchPosition]:
    """Read ``path`` and return the match positions of ``pattern`` in it."""

    return find_regex_positions_in_content(read_file_content(path, read_text=read_text), pattern)


async def find_regex_positions_in_file_async(
    path: str | Path,
    pattern: str,
    *,
    read_text: ReadText = _read_utf8,
) -> list[MatchPosition]:
    return await asyncio.to_thread(find_regex_positions_in_file, path, pattern, read_text=read_text)


__all__ = [
    "FileUnreadableError",
    "InvalidPatternError",
    "MatchPosition",
    "compile_pattern",
    "find_regex_positions_in_content",
    "find_regex_positions_in_file",
    "find_regex_positions_in_file_async",
    "read_file_content",
    "slice_span",
]
