from __future__ import annotations

import asyncio
from typing import Iterator

import pytest

from mcp_codeagents.agents.security import SecurityAgent
from mcp_codeagents.mcp import reason_codes
from mcp_codeagents.services.audit_log import read_audit_events
from mcp_codeagents.services.invocation_audit import (
    DEFAULT_PRODUCTION_SINK,
    INVOCATION_FAILED,
    STAGE_BOUNDARY,
    STAGE_HANDLER,
    STAGE_REGISTRATION,
    InvocationEvent,
    failure_summary,
    get_invocation_events,
    record_invocation_failure,
    record_registration_rejected,
    set_production_invocation_sink,
)


class CapturingSink:
    def __init__(self) -> None:
        self.entries: list[dict[str, object]] = []

    def emit(self, entry: dict[str, object]) -> None:
        self.entries.append(entry)


@pytest.fixture
def restore_sink() -> Iterator[None]:
    yield
    set_production_invocation_sink(DEFAULT_PRODUCTION_SINK)


def test_events_reach_memory_and_the_audit_file() -> None:
    record_invocation_failure("security-agent", "scan-vulnerabilities", "invalid_input")

    expected = {
        "event": INVOCATION_FAILED,
        "agent": "security-agent",
        "tool": "scan-vulnerabilities",
        "reason": "invalid_input",
        "stage": STAGE_BOUNDARY,
    }
    assert get_invocation_events() == [expected]
    (persisted,) = read_audit_events()
    assert {key: value for key, value in persisted.items() if key != "ts"} == expected


@pytest.mark.parametrize(
    "reason, stage",
    [
        (reason_codes.DUPLICATE_TOOL, STAGE_REGISTRATION),
        (reason_codes.INVALID_DESCRIPTOR, STAGE_REGISTRATION),
        (reason_codes.TOOL_NOT_FOUND, STAGE_BOUNDARY),
        (reason_codes.PAYLOAD_TOO_LARGE, STAGE_BOUNDARY),
        (reason_codes.HANDLER_ERROR, STAGE_HANDLER),
        (reason_codes.HANDLER_TIMEOUT, STAGE_HANDLER),
        ("something_else", "unknown"),
    ],
)
def test_reasons_map_to_host_stages(reason: str, stage: str) -> None:
    assert InvocationEvent(INVOCATION_FAILED, "a", "t", reason).stage == stage


def test_production_sink_can_be_swapped(restore_sink: None) -> None:
    sink = CapturingSink()
    set_production_invocation_sink(sink)

    record_registration_rejected("testing-agent", "generate-test", "duplicate_tool")

    assert sink.entries == get_invocation_events()
    assert sink.entries[0]["stage"] == STAGE_REGISTRATION
    assert read_audit_events() == []


def test_production_sink_can_be_disabled(restore_sink: None) -> None:
    set_production_invocation_sink(None)

    record_invocation_failure("security-agent", "scan-vulnerabilities", "handler_error")

    assert len(get_invocation_events()) == 1
    assert read_audit_events() == []


def test_snapshots_are_copies() -> None:
    record_invocation_failure("a", "b", "c")

    snapshot = get_invocation_events()
    snapshot.clear()

    assert len(get_invocation_events()) == 1


def test_failure_summary_counts_reasons_per_agent() -> None:
    record_invocation_failure("security-agent", "scan-vulnerabilities", "invalid_input")
    record_invocation_failure("security-agent", "check-authentication", "invalid_input")
    record_invocation_failure("security-agent", "scan-vulnerabilities", "handler_error")
    record_invocation_failure("clean-code-agent", "detect-code-smells", "handler_error")

    assert failure_summary("security-agent") == {
        "handler_error": 1,
        "invalid_input": 2,
    }
    assert failure_summary() == {"handler_error": 2, "invalid_input": 2}
    assert failure_summary("testing-agent") == {}


def test_failed_calls_never_record_arguments() -> None:
    agent = SecurityAgent()
    secret_code = "password = 'do-not-log-me'"

    asyncio.run(agent.dispatch("scan-vulnerabilities", {"code": 1, "x": secret_code}))

    (event,) = get_invocation_events()
    assert event["reason"] == reason_codes.INVALID_INPUT
    assert secret_code not in str(event)
    assert secret_code not in str(read_audit_events())
