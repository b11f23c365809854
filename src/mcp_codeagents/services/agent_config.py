"""Which agents the orchestrator runs, read from an optional JSON document."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..mcp import schema_registry
from ..mcp.schema_registry import SchemaValidationError

_LOG = logging.getLogger(__name__)

CONFIG_ENV = "CODEAGENTS_CONFIG"
CONFIG_SCHEMA = "agents_config_v1"

CODE_REVIEW_AGENT = "code-review-agent"
BEST_PRACTICES_AGENT = "best-practices-agent"
CLEAN_CODE_AGENT = "clean-code-agent"
SECURITY_AGENT = "security-agent"
DOCUMENTATION_AGENT = "documentation-agent"

ANALYSIS_AGENTS = (
    CODE_REVIEW_AGENT,
    BEST_PRACTICES_AGENT,
    CLEAN_CODE_AGENT,
    SECURITY_AGENT,
)
"""Agents that contribute to ``analyze_code``, in their default run order."""

DEFAULT_AGENT_CONFIG: Mapping[str, Any] = {
    "agents": {name: {"enabled": True} for name in ANALYSIS_AGENTS}
}


class OrchestrationConfigError(ValueError):
    """The orchestration config file is unreadable or malformed."""


@dataclass(frozen=True)
class OrchestrationConfig:
    enabled: frozenset[str]

    def is_enabled(self, agent: str) -> bool:
        return agent in self.enabled

    @classmethod
    def from_mapping(cls, document: Mapping[str, Any]) -> "OrchestrationConfig":
        """Validate ``document`` and keep the names of enabled agents."""

        try:
            schema_registry.validate(CONFIG_SCHEMA, document)
        except SchemaValidationError as exc:
            raise OrchestrationConfigError(
                f"Orchestration config is invalid: {exc.message}"
            ) from exc
        return cls.enabled_only(
            name
            for name, settings in document["agents"].items()
            if settings.get("enabled")
        )

    @classmethod
    def enabled_only(cls, agents: Iterable[str]) -> "OrchestrationConfig":
        return cls(enabled=frozenset(agents))


DEFAULT_CONFIG = OrchestrationConfig.enabled_only(ANALYSIS_AGENTS)


def load_orchestration_config(path: str | Path | None = None) -> OrchestrationConfig:
    """Load the config at ``path``, else ``$CODEAGENTS_CONFIG``, else defaults."""

    source = path or os.getenv(CONFIG_ENV)
    if not source:
        return DEFAULT_CONFIG

    config_path = Path(source)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            document = json.load(handle)
    except OSError as exc:
        raise OrchestrationConfigError(
            f"Unable to read orchestration config {config_path.name}: {exc.strerror}"
        ) from exc
    except json.JSONDecodeError as exc:
        raise OrchestrationConfigError(
            f"Orchestration config {config_path.name} is not valid JSON: {exc.msg}"
        ) from exc

    config = OrchestrationConfig.from_mapping(document)
    _LOG.info(
        "Loaded orchestration config %s; enabled agents: %s",
        config_path.name,
        ", ".join(sorted(config.enabled)) or "none",
    )
    return config
