"""Filesystem sandbox confining tool access to a fixed set of root directories."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from lsp_tools.errors import ConfigError, ErrorKind, LspToolsError
from lsp_tools.paths import absolutize, normalize_path


class RejectionReason(str, Enum):
    OUTSIDE_ALLOWED_DIRECTORY = "outside_allowed_directory"
    SYMLINK_ESCAPE = "symlink_escape"
    PARENT_MISSING = "parent_missing"


class PathRejectedError(LspToolsError):
    """Raised when a requested path is refused by the sandbox."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(ErrorKind(reason.value), message)
        self.reason = reason


@dataclass(frozen=True)
class ValidationResult:
    path: Path | None = None
    reason: RejectionReason | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None

    def unwrap(self) -> Path:
        """Return the validated path or raise the matching ``PathRejectedError``."""

        if self.reason is not None or self.path is None:
            raise PathRejectedError(self.reason or RejectionReason.OUTSIDE_ALLOWED_DIRECTORY, self.detail)
        return self.path


class AllowedRoots(BaseModel):
    """Normalized absolute root directories, fixed once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    roots: tuple[str, ...]

    @field_validator("roots")
    @classmethod
    def _normalize_roots(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalized: list[str] = []
        for raw in value:
            if not raw or not raw.strip():
                raise ValueError("allowed directory cannot be empty")
            root = absolutize(raw.strip())
            if root not in normalized:
                normalized.append(root)
        return tuple(normalized)

    @classmethod
    def from_paths(cls, paths: Iterable[str | Path], *, require_existing: bool = False) -> AllowedRoots:
        roots = cls(roots=tuple(str(p) for p in paths))
        if require_existing:
            for root in roots.roots:
                if not os.path.exists(root):
                    raise ConfigError(f"allowed directory does not exist: {root}")
                if not os.path.isdir(root):
                    raise ConfigError(f"allowed directory is not a directory: {root}")
        return roots

    def contains(self, path: str) -> bool:
        """Return True if ``path`` has a root as a directory-boundary prefix.

        ``path`` must already be absolute and normalized.
        """

        return any(_is_within(path, root) for root in self.roots)


def _is_within(path: str, root: str) -> bool:
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


class PathSandbox:
    """Validate requested paths against ``AllowedRoots``, following symlinks."""

    def __init__(self, roots: AllowedRoots) -> None:
        self.roots = roots

    def allowed_directories(self) -> tuple[str, ...]:
        return self.roots.roots

    def check(self, requested: str | Path) -> ValidationResult:
        """Validate ``requested`` and return the outcome without raising."""

        absolute = absolutize(str(requested))
        if not self.roots.contains(absolute):
            return ValidationResult(
                reason=RejectionReason.OUTSIDE_ALLOWED_DIRECTORY,
                detail=(
                    f"access denied - path outside allowed directories: {absolute} "
                    f"not in {', '.join(self.roots.roots)}"
                ),
            )

        try:
            real = normalize_path(os.path.realpath(absolute, strict=True))
        except ValueError:
            return ValidationResult(
                reason=RejectionReason.OUTSIDE_ALLOWED_DIRECTORY,
                detail=f"access denied - malformed path: {absolute!r}",
            )
        except OSError:
            return self._check_new_file(absolute)

        if not self.roots.contains(real):
            return ValidationResult(
                reason=RejectionReason.SYMLINK_ESCAPE,
                detail=f"access denied - symlink target outside allowed directories: {absolute} -> {real}",
            )
        return ValidationResult(path=Path(real))

    def validate(self, requested: str | Path) -> Path:
        """Return the trusted absolute path for ``requested`` or raise ``PathRejectedError``."""

        return self.check(requested).unwrap()

    def _check_new_file(self, absolute: str) -> ValidationResult:
        # a dangling link would be followed on write
        if os.path.islink(absolute):
            target = normalize_path(os.path.realpath(absolute))
            if not self.roots.contains(target):
                return ValidationResult(
                    reason=RejectionReason.SYMLINK_ESCAPE,
                    detail=f"access denied - symlink target outside allowed directories: {absolute} -> {target}",
                )

        parent = os.path.dirname(absolute)
        try:
            real_parent = normalize_path(os.path.realpath(parent, strict=True))
        except (OSError, ValueError):
            return ValidationResult(
                reason=RejectionReason.PARENT_MISSING,
                detail=f"parent directory does not exist: {parent}",
            )

        if not self.roots.contains(real_parent):
            return ValidationResult(
                reason=RejectionReason.OUTSIDE_ALLOWED_DIRECTORY,
                detail=f"access denied - parent directory outside allowed directories: {real_parent}",
            )
        return ValidationResult(path=Path(absolute))


def validate_path(requested_path: str | Path, allowed_roots: AllowedRoots | Iterable[str]) -> Path:
    """Validate ``requested_path`` against ``allowed_roots`` in one call."""

    roots = allowed_roots if isinstance(allowed_roots, AllowedRoots) else AllowedRoots.from_paths(allowed_roots)
    return PathSandbox(roots).validate(requested_path)


__all__ = [
    "AllowedRoots",
    "PathRejectedError",
    "PathSandbox",
    "RejectionReason",
    "ValidationResult",
    "validate_path",
]
