"""In-memory tool registry and the invocation boundary shared by every agent.

``invoke`` raises for problems detected before a handler runs (unknown tool,
bad arguments) so callers can fail fast; handler failures and timeouts always
come back as error responses. ``dispatch`` is the transport-facing variant
that turns every failure into an error response with a reason code.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Mapping, Union

from ..domain.models import ToolDescriptor
from ..services import invocation_audit
from ..services.limits import HostLimitConfig
from ..services.sanitizer import sanitize_error_payload
from . import reason_codes
from .schema_registry import InvalidSchemaError, argument_errors, check_input_schema

_LOG = logging.getLogger(__name__)

ToolHandler = Callable[[Mapping[str, Any]], Union[Any, Awaitable[Any]]]


class _HandlerTimedOut(Exception):
    """The host's own deadline expired; kept apart from handler errors."""


class ToolHostError(Exception):
    """Base class for failures detected at the tool boundary."""

    reason = reason_codes.INVALID_INPUT

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(message)
        self.tool = tool


class ToolNotFoundError(ToolHostError):
    reason = reason_codes.TOOL_NOT_FOUND

    def __init__(self, tool: str) -> None:
        super().__init__(tool, f"Tool {tool} not found")


class ArgumentValidationError(ToolHostError):
    """Arguments violate the tool's input schema; the handler never ran."""

    reason = reason_codes.INVALID_INPUT

    def __init__(self, tool: str, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            tool, f"Invalid arguments for tool {tool}: " + "; ".join(self.errors)
        )


class PayloadTooLargeError(ArgumentValidationError):
    reason = reason_codes.PAYLOAD_TOO_LARGE


class DuplicateToolError(ToolHostError):
    reason = reason_codes.DUPLICATE_TOOL

    def __init__(self, tool: str) -> None:
        super().__init__(tool, f"Tool {tool} is already registered")


class InvalidToolDescriptorError(ToolHostError):
    reason = reason_codes.INVALID_DESCRIPTOR


def _error_payload(reason: str, detail: str) -> dict[str, str]:
    """Return a sanitized error payload with a stable reason code."""

    return sanitize_error_payload(
        {"status": "error", "reason": reason, "detail": detail}
    )


@dataclass(frozen=True)
class ToolResponse:
    """A single text content block plus the error flag."""

    text: str
    is_error: bool = False
    reason: str | None = None

    @classmethod
    def success(cls, result: Any) -> "ToolResponse":
        if isinstance(result, str):
            return cls(text=result)
        return cls(text=json.dumps(result, indent=2, ensure_ascii=False))

    @classmethod
    def error(cls, reason: str, detail: str) -> "ToolResponse":
        payload = _error_payload(reason, detail)
        return cls(text=json.dumps(payload), is_error=True, reason=reason)

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


@dataclass(frozen=True)
class _RegisteredTool:
    descriptor: ToolDescriptor
    handler: ToolHandler


def _oversized_fields(value: Any, limit: int, path: str = "") -> Iterator[str]:
    if isinstance(value, str):
        if len(value.encode("utf-8")) > limit:
            yield path or "(root)"
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield from _oversized_fields(item, limit, f"{path}.{key}" if path else key)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            yield from _oversized_fields(item, limit, f"{path}.{index}")


class ToolHost:
    """Registry of tool descriptors and their handlers for one agent."""

    def __init__(
        self,
        name: str,
        version: str,
        description: str,
        limits: HostLimitConfig | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self.description = description
        self.limits = limits or HostLimitConfig.from_env()
        self._tools: dict[str, _RegisteredTool] = {}

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register_tool(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """Add a tool; names are unique and schemas must be valid Draft 7."""

        if descriptor.name in self._tools:
            error: ToolHostError = DuplicateToolError(descriptor.name)
            self._reject_registration(error)
            raise error

        try:
            check_input_schema(descriptor.input_schema)
        except InvalidSchemaError as exc:
            error = InvalidToolDescriptorError(
                descriptor.name,
                f"Tool {descriptor.name} has an invalid input schema: {exc.message}",
            )
            self._reject_registration(error)
            raise error from exc

        self._tools[descriptor.name] = _RegisteredTool(descriptor, handler)
        _LOG.debug("Registered tool %s on %s", descriptor.name, self.name)

    def list_tools(self) -> list[ToolDescriptor]:
        """Every registered descriptor, in registration order."""

        return [registered.descriptor for registered in self._tools.values()]

    async def invoke(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> ToolResponse:
        """Run a tool, raising ``ToolHostError`` for boundary failures."""

        registered = self._tools.get(name)
        if registered is None:
            error: ToolHostError = ToolNotFoundError(name)
            self._reject_invocation(error)
            raise error

        args: Any = {} if arguments is None else arguments
        errors = argument_errors(registered.descriptor.input_schema, args)
        if errors:
            error = ArgumentValidationError(name, errors)
            self._reject_invocation(error)
            raise error

        oversized = list(_oversized_fields(args, self.limits.max_code_bytes))
        if oversized:
            error = PayloadTooLargeError(
                name,
                [
                    f"{field}: exceeds {self.limits.max_code_bytes} bytes"
                    for field in oversized
                ],
            )
            self._reject_invocation(error)
            raise error

        try:
            result = await self._run(registered.handler, dict(args))
        except _HandlerTimedOut:
            detail = (
                f"Tool {name} did not finish within "
                f"{self.limits.handler_timeout_seconds} seconds"
            )
            _LOG.error("%s: %s", self.name, detail)
            invocation_audit.record_invocation_failure(
                self.name, name, reason_codes.HANDLER_TIMEOUT
            )
            return ToolResponse.error(reason_codes.HANDLER_TIMEOUT, detail)
        except Exception as exc:
            _LOG.error("%s: tool %s failed", self.name, name, exc_info=True)
            invocation_audit.record_invocation_failure(
                self.name, name, reason_codes.HANDLER_ERROR
            )
            return ToolResponse.error(
                reason_codes.HANDLER_ERROR, str(exc) or type(exc).__name__
            )

        return ToolResponse.success(result)

    async def dispatch(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> ToolResponse:
        """Run a tool, converting every failure into an error response."""

        try:
            return await self.invoke(name, arguments)
        except ToolHostError as exc:
            return ToolResponse.error(exc.reason, str(exc))

    async def _run(self, handler: ToolHandler, arguments: dict[str, Any]) -> Any:
        if inspect.iscoroutinefunction(handler):
            call = handler(arguments)
        else:
            call = asyncio.to_thread(handler, arguments)
        timeout = self.limits.handler_timeout
        if timeout is None:
            return await call
        # asyncio.wait reports expiry without raising, so a TimeoutError
        # from the handler itself stays a handler error.
        task = asyncio.ensure_future(call)
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if not done:
            task.cancel()
            raise _HandlerTimedOut
        return task.result()

    def _reject_registration(self, error: ToolHostError) -> None:
        _LOG.error("%s: %s", self.name, error)
        invocation_audit.record_registration_rejected(
            self.name, error.tool, error.reason
        )

    def _reject_invocation(self, error: ToolHostError) -> None:
        _LOG.warning("%s: %s", self.name, error)
        invocation_audit.record_invocation_failure(self.name, error.tool, error.reason)
