"""Common plumbing for every agent: a tool host plus schema helpers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from ..domain.models import ToolDescriptor, enum_values
from ..mcp.tool_host import ToolHandler, ToolHost, ToolResponse
from ..services.limits import HostLimitConfig

_LOG = logging.getLogger(__name__)


def string_property(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def enum_property(
    enum_type: type[Enum],
    description: str,
    *,
    only: tuple[Enum, ...] | None = None,
    default: Enum | None = None,
) -> dict[str, Any]:
    """String property restricted to an enum's wire spellings."""

    values = [member.value for member in only] if only else enum_values(enum_type)
    prop: dict[str, Any] = {
        "type": "string",
        "enum": values,
        "description": description,
    }
    if default is not None:
        prop["default"] = default.value
    return prop


def string_array_property(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def object_schema(
    properties: Mapping[str, Any], required: tuple[str, ...] = ()
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": dict(properties)}
    if required:
        schema["required"] = list(required)
    return schema


CODE_PROPERTY = string_property("Source code to analyze")
FILE_PATH_PROPERTY = string_property("File path for context")


class BaseAgent:
    """An agent owns one ``ToolHost`` and registers its tools on creation."""

    name = "base-agent"
    version = "1.0.0"
    description = "Base MCP Agent"

    def __init__(self, limits: HostLimitConfig | None = None) -> None:
        self.host = ToolHost(self.name, self.version, self.description, limits)
        self.register_tools()
        _LOG.debug("%s registered %d tools", self.name, len(self.host))

    def register_tools(self) -> None:
        """Subclasses register their tools here."""

    def tool(
        self, name: str, description: str, input_schema: Mapping[str, Any]
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Return a registrar binding ``handler`` to a new tool descriptor."""

        def register(handler: ToolHandler) -> ToolHandler:
            self.host.register_tool(
                ToolDescriptor(name, description, input_schema), handler
            )
            return handler

        return register

    def list_tools(self) -> list[ToolDescriptor]:
        return self.host.list_tools()

    async def invoke(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> ToolResponse:
        return await self.host.invoke(name, arguments)

    async def dispatch(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> ToolResponse:
        return await self.host.dispatch(name, arguments)

    def analyze_code(self, code: str, language: str = "ruby") -> dict[str, Any]:
        """Cheap summary shared by every agent; subclasses may extend it."""

        return {
            "language": language,
            "lines": len(code.split("\n")),
            "hasErrors": False,
            "suggestions": [],
        }
