"""Typed failures shared by the sandbox and the position indexer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    OUTSIDE_ALLOWED_DIRECTORY = "outside_allowed_directory"
    SYMLINK_ESCAPE = "symlink_escape"
    PARENT_MISSING = "parent_missing"
    INVALID_PATTERN = "invalid_pattern"
    FILE_UNREADABLE = "file_unreadable"


class LspToolsError(Exception):
    """Base class for failures surfaced to tool callers.

    ``kind`` lets callers branch on the failure without inspecting messages.
    """

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"error": self.kind.value, "message": self.message}


class ConfigError(Exception):
    """Raised when settings or allowed roots cannot be loaded."""


__all__ = ["ErrorKind", "LspToolsError", "ConfigError"]
