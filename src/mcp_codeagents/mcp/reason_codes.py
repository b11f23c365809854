"""Stable reason codes carried by error envelopes and audit events."""

from __future__ import annotations

TOOL_NOT_FOUND = "tool_not_found"
"""No tool with the requested name is registered on the host."""

INVALID_INPUT = "invalid_input"
"""Arguments failed the tool's input schema."""

PAYLOAD_TOO_LARGE = "payload_too_large"
"""A string argument exceeded the configured size bound."""

HANDLER_ERROR = "handler_error"
"""The tool handler raised while running."""

HANDLER_TIMEOUT = "handler_timeout"
"""The tool handler did not finish within the invocation budget."""

DUPLICATE_TOOL = "duplicate_tool"
"""A tool with the same name is already registered."""

INVALID_DESCRIPTOR = "invalid_descriptor"
"""The tool's input schema is not a valid JSON Schema."""
