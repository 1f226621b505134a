"""Typed tool bases and the registration record consumed by the router.

Each tool module declares Pydantic input/output models and exposes
``tool_registrations(sandbox)``; ``ToolRouter`` builds specs and handlers
from the resulting ``ToolRegistration`` records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

Req = TypeVar("Req", bound=BaseModel)
Res = TypeVar("Res", bound=BaseModel)


class ToolRequest(BaseModel):
    """Marker base class for tool requests."""


class ToolResponse(BaseModel):
    """Marker base class for tool responses."""


class Tool(Generic[Req, Res], ABC):
    """Tool bound to a sandbox, with typed input and output models."""

    name: ClassVar[str]
    description: ClassVar[str]
    InputModel: ClassVar[type[Req]]
    OutputModel: ClassVar[type[Res]]

    @abstractmethod
    def execute(self, request: Req) -> Res:
        """Run the tool and return a response."""


@dataclass(frozen=True)
class ToolRegistration:
    name: str
    description: str
    input_model: type[ToolRequest]
    output_model: type[ToolResponse]
    handler: Callable[[ToolRequest], ToolResponse]
    result_adapter: Callable[[ToolResponse], Any] | None = None
    end_event_builder: Callable[[ToolRequest, ToolResponse], dict[str, Any]] | None = None


__all__ = ["ToolRequest", "ToolResponse", "Tool", "ToolRegistration", "Req", "Res"]
