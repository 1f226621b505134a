"""Tool router exposing specs and dispatch for tool-calling clients.

Tool parameters and outputs are Pydantic models defined in per-tool modules;
the specs advertised to clients are generated from those input schemas.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from lsp_tools.errors import LspToolsError
from lsp_tools.tools import get_tool_registrations
from lsp_tools.tools.base import ToolRequest, ToolResponse
from lsp_tools.tools.fs import AllowedRoots, PathSandbox


def tool_specs(sandbox: PathSandbox | None = None) -> list[dict[str, Any]]:
    """Return function-style tool specs derived from Pydantic schemas."""

    effective = sandbox or PathSandbox(AllowedRoots.from_paths([Path.cwd()]))
    specs: list[dict[str, Any]] = []
    for reg in get_tool_registrations(effective):
        params = reg.input_model.model_json_schema()
        if isinstance(params, dict):
            params.setdefault("additionalProperties", False)
        specs.append(
            {
                "type": "function",
                "function": {
                    "name": reg.name,
                    "description": reg.description,
                    "parameters": params,
                },
            }
        )
    return specs


class ToolRouter:
    """Dispatch tool calls against a fixed sandbox."""

    def __init__(self, sandbox: PathSandbox, logger: logging.Logger | None = None) -> None:
        self.sandbox = sandbox
        self.logger = logger
        self.events: list[dict[str, Any]] = []
        self._registrations = get_tool_registrations(self.sandbox)
        self._spec_index = {reg.name: reg for reg in self._registrations}
        self._handlers: dict[str, Callable[[ToolRequest], ToolResponse]] = self._build_handlers()

    def dispatch(self, name: str, **kwargs: Any) -> Any:
        spec = self._spec_index.get(name)
        handler = self._handlers.get(name)
        if spec is None or handler is None:
            raise ValueError(f"unknown tool {name}")

        self._emit_event("start", name, kwargs)
        self._log_request(name, kwargs)

        try:
            validated = spec.input_model.model_validate(kwargs)
            output_model = handler(validated)
            result = spec.result_adapter(output_model) if spec.result_adapter else output_model.model_dump()
        except LspToolsError as exc:
            self._emit_event("error", name, {"kind": exc.kind.value})
            self._log_response(name, exc.to_payload())
            raise
        except Exception as exc:
            self._log_response(name, {"error": str(exc)})
            raise

        end_builder = spec.end_event_builder
        end_data = end_builder(validated, output_model) if end_builder else {}
        self._emit_event("end", name, end_data)
        self._log_response(name, result)
        return result

    def dispatch_safe(self, name: str, **kwargs: Any) -> Any:
        """Dispatch like ``dispatch`` but return typed failures as error payloads."""

        try:
            return self.dispatch(name, **kwargs)
        except LspToolsError as exc:
            return exc.to_payload()

    def _emit_event(self, phase: str, tool_name: str, data: dict[str, Any]) -> None:
        self.events.append({"phase": phase, "tool": tool_name, **data})

    def _log_request(self, name: str, kwargs: dict[str, Any]) -> None:
        if not self.logger:
            return
        self.logger.info("tool request: %s args=%s", name, self._stringify(kwargs))

    def _log_response(self, name: str, result: Any) -> None:
        if not self.logger:
            return
        self.logger.debug("tool response: %s result=%s", name, self._stringify(result))

    @staticmethod
    def _stringify(obj: Any) -> str:
        try:
            text = json.dumps(obj, default=str)
        except (TypeError, ValueError):
            text = repr(obj)

        if len(text) > 2000:
            return f"{text[:2000]}... [truncated]"
        return text

    def _build_handlers(self) -> dict[str, Callable[[ToolRequest], ToolResponse]]:
        return {reg.name: reg.handler for reg in self._registrations}


__all__ = ["tool_specs", "ToolRouter"]
