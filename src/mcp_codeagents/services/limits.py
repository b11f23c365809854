"""Configurable limits applied at the tool boundary."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_CODE_BYTES = 262_144
"""Largest string argument accepted by any tool, in UTF-8 bytes."""

DEFAULT_HANDLER_TIMEOUT_SECONDS = 30
"""Per-invocation handler budget; 0 disables the timeout."""

MAX_HANDLER_TIMEOUT_SECONDS = 600


def _env_int(
    name: str,
    default: int,
    *,
    min_value: int = 0,
    max_value: int | None = None,
) -> int:
    """Return a bounded integer limit sourced from the environment."""

    raw = os.getenv(name)
    if not raw or not raw.strip():
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    if parsed < min_value:
        return default
    if max_value is not None and parsed > max_value:
        return max_value
    return parsed


@dataclass(frozen=True)
class HostLimitConfig:
    """Container describing every configurable boundary limit."""

    max_code_bytes: int
    handler_timeout_seconds: int

    @property
    def handler_timeout(self) -> float | None:
        if self.handler_timeout_seconds <= 0:
            return None
        return float(self.handler_timeout_seconds)

    @classmethod
    def from_env(cls) -> "HostLimitConfig":
        """Return a limit set using the configured environment variables."""

        return cls(
            max_code_bytes=_env_int(
                "CODEAGENTS_MAX_CODE_BYTES",
                DEFAULT_MAX_CODE_BYTES,
                min_value=1,
            ),
            handler_timeout_seconds=_env_int(
                "CODEAGENTS_HANDLER_TIMEOUT_SECONDS",
                DEFAULT_HANDLER_TIMEOUT_SECONDS,
                min_value=0,
                max_value=MAX_HANDLER_TIMEOUT_SECONDS,
            ),
        )


DEFAULT_HOST_LIMITS = HostLimitConfig(
    DEFAULT_MAX_CODE_BYTES,
    DEFAULT_HANDLER_TIMEOUT_SECONDS,
)
