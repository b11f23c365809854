"""Shared fixtures: keep audit output inside the test's temp directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from mcp_codeagents.services.audit_log import (
    AuditConfig,
    reset_audit_config,
    reset_audit_warning_state,
    set_audit_config,
)
from mcp_codeagents.services.invocation_audit import clear_invocation_events


@pytest.fixture(autouse=True)
def isolated_audit(tmp_path: Path) -> Iterator[AuditConfig]:
    config = AuditConfig(audit_file=tmp_path / "state" / "audit.jsonl", max_bytes=None)
    set_audit_config(config)
    clear_invocation_events()
    yield config
    clear_invocation_events()
    reset_audit_warning_state()
    reset_audit_config()
