"""Append-only JSONL audit trail for tool host diagnostics.

Each event is stamped with a UTC timestamp and written as one JSON line. The
file is rotated to a single ``.1`` backup once it reaches the configured size.
File system failures never reach callers; they are logged as warnings, at most
once per interval per failure kind.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

_LOG = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
STATE_DIR = PROJECT_ROOT / "state"
AUDIT_FILENAME = "codeagents_audit.jsonl"
DEFAULT_MAX_AUDIT_BYTES = 1_000_000
AUDIT_DIR_ENV = "CODEAGENTS_AUDIT_DIR"
AUDIT_MAX_BYTES_ENV = "CODEAGENTS_AUDIT_MAX_BYTES"

_warning_interval = 60.0
_last_warned: dict[str, float] = {}


@dataclass(frozen=True)
class AuditConfig:
    """Where audit events go and when the file rotates."""

    audit_file: Path
    max_bytes: int | None

    @property
    def backup_file(self) -> Path:
        return self.audit_file.with_name(self.audit_file.name + ".1")

    @classmethod
    def from_env(cls) -> "AuditConfig":
        base_dir = Path(os.getenv(AUDIT_DIR_ENV) or STATE_DIR)
        return cls(
            audit_file=base_dir / AUDIT_FILENAME,
            max_bytes=_parse_max_bytes(os.getenv(AUDIT_MAX_BYTES_ENV)),
        )


def _parse_max_bytes(raw: str | None) -> int | None:
    """Parse the rotation size; ``0`` or a negative value disables rotation."""

    if not raw or not raw.strip():
        return DEFAULT_MAX_AUDIT_BYTES
    try:
        parsed = int(raw)
    except ValueError:
        return DEFAULT_MAX_AUDIT_BYTES
    return parsed if parsed > 0 else None


_env_config: AuditConfig | None = None
_override_config: AuditConfig | None = None


def set_audit_config(config: AuditConfig | None) -> None:
    """Pin the audit config; ``None`` returns to the environment defaults."""

    global _override_config, _env_config
    _override_config = config
    _env_config = None


def reset_audit_config() -> None:
    set_audit_config(None)


def current_audit_config() -> AuditConfig:
    global _env_config
    if _override_config is not None:
        return _override_config
    if _env_config is None:
        _env_config = AuditConfig.from_env()
    return _env_config


def set_audit_warning_interval(seconds: float | None) -> None:
    """Change the warning rate limit; ``None`` warns on every failure."""

    global _warning_interval
    _warning_interval = 0.0 if seconds is None else max(seconds, 0.0)


def reset_audit_warning_state() -> None:
    _last_warned.clear()


def _should_warn(kind: str) -> bool:
    if _warning_interval <= 0:
        return True
    now = time.monotonic()
    last = _last_warned.get(kind)
    if last is None or now - last >= _warning_interval:
        _last_warned[kind] = now
        return True
    return False


def _warn(kind: str, message: str, *args: object) -> None:
    if _should_warn(kind):
        _LOG.warning(message, *args)


def append_audit_event(event: dict[str, object]) -> None:
    """Append ``event`` to the audit file with a ``ts`` field added."""

    config = current_audit_config()
    try:
        config.audit_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _warn(
            "mkdir",
            "Unable to create audit directory %s: %s",
            config.audit_file.parent,
            exc,
        )
        return

    _rotate_if_needed(config)

    stamped = {"ts": datetime.now(timezone.utc).isoformat(), **event}
    try:
        with config.audit_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(stamped, ensure_ascii=False, sort_keys=True))
            fh.write("\n")
    except OSError as exc:
        _warn("write", "Unable to write audit event to %s: %s", config.audit_file, exc)


def read_audit_events(limit: int | None = None) -> list[dict[str, object]]:
    """Return the most recent events from the live audit file, oldest first."""

    path = current_audit_config().audit_file
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return []
    except OSError as exc:
        _warn("read", "Unable to read audit log %s: %s", path, exc)
        return []

    events: list[dict[str, object]] = []
    for line in lines:
        if not line.strip():
            continue
        try:
            events.append(json.loads(line))
        except json.JSONDecodeError:
            _warn("decode", "Skipping malformed audit line in %s", path)
    if limit is not None:
        return events[-limit:] if limit > 0 else []
    return events


def _rotate_if_needed(config: AuditConfig) -> None:
    if config.max_bytes is None:
        return

    path = config.audit_file
    try:
        size = path.stat().st_size
    except FileNotFoundError:
        return
    except OSError as exc:
        _warn("stat", "Unable to stat audit log %s: %s", path, exc)
        return

    if size < config.max_bytes:
        return

    try:
        path.replace(config.backup_file)
    except OSError as exc:
        _warn("rotate", "Unable to rotate audit log %s: %s", path, exc)
