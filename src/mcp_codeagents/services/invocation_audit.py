"""Operator-facing trail of tool host failures.

Every rejected registration or failed call becomes an ``InvocationEvent``
naming the agent, the tool, the reason code and the stage of the host that
refused it. Tool arguments and source code never enter an event.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Protocol

from ..mcp import reason_codes
from .audit_log import append_audit_event

_LOG = logging.getLogger(__name__)

INVOCATION_FAILED = "TOOL_INVOCATION_FAILED"
REGISTRATION_REJECTED = "TOOL_REGISTRATION_REJECTED"

STAGE_REGISTRATION = "registration"
STAGE_BOUNDARY = "boundary"
STAGE_HANDLER = "handler"

_REASON_STAGES = {
    reason_codes.DUPLICATE_TOOL: STAGE_REGISTRATION,
    reason_codes.INVALID_DESCRIPTOR: STAGE_REGISTRATION,
    reason_codes.TOOL_NOT_FOUND: STAGE_BOUNDARY,
    reason_codes.INVALID_INPUT: STAGE_BOUNDARY,
    reason_codes.PAYLOAD_TOO_LARGE: STAGE_BOUNDARY,
    reason_codes.HANDLER_ERROR: STAGE_HANDLER,
    reason_codes.HANDLER_TIMEOUT: STAGE_HANDLER,
}


@dataclass(frozen=True)
class InvocationEvent:
    event: str
    agent: str
    tool: str
    reason: str

    @property
    def stage(self) -> str:
        return _REASON_STAGES.get(self.reason, "unknown")

    def to_mapping(self) -> dict[str, object]:
        return {
            "event": self.event,
            "agent": self.agent,
            "tool": self.tool,
            "reason": self.reason,
            "stage": self.stage,
        }


class InvocationAuditSink(Protocol):
    def emit(self, entry: dict[str, object]) -> None:  # pragma: no cover - trivial
        ...


class AuditLogInvocationSink:
    """Appends events to the JSONL audit trail."""

    __slots__ = ()

    def emit(self, entry: dict[str, object]) -> None:
        append_audit_event(entry)


DEFAULT_PRODUCTION_SINK: InvocationAuditSink = AuditLogInvocationSink()


@dataclass
class InvocationTrail:
    """Events seen by this process, mirrored to an optional persistent sink."""

    sink: InvocationAuditSink | None = DEFAULT_PRODUCTION_SINK
    events: list[InvocationEvent] = field(default_factory=list)

    def record(self, event: InvocationEvent) -> None:
        self.events.append(event)
        _LOG.debug(
            "%s %s/%s at %s stage", event.reason, event.agent, event.tool, event.stage
        )
        if self.sink is not None:
            self.sink.emit(event.to_mapping())

    def failure_summary(self, agent: str | None = None) -> dict[str, int]:
        """Count events per reason, optionally for a single agent."""

        counts = Counter(
            event.reason
            for event in self.events
            if agent is None or event.agent == agent
        )
        return dict(sorted(counts.items()))


_TRAIL = InvocationTrail()


def set_production_invocation_sink(sink: InvocationAuditSink | None) -> None:
    """Swap the persistent sink; ``None`` keeps events in memory only."""

    _TRAIL.sink = sink


def record_invocation_failure(agent: str, tool: str, reason: str) -> None:
    _TRAIL.record(InvocationEvent(INVOCATION_FAILED, agent, tool, reason))


def record_registration_rejected(agent: str, tool: str, reason: str) -> None:
    _TRAIL.record(InvocationEvent(REGISTRATION_REJECTED, agent, tool, reason))


def get_invocation_events() -> list[dict[str, object]]:
    """Return a snapshot of the events recorded in this process."""

    return [event.to_mapping() for event in _TRAIL.events]


def failure_summary(agent: str | None = None) -> dict[str, int]:
    return _TRAIL.failure_summary(agent)


def clear_invocation_events() -> None:
    _TRAIL.events.clear()
