"""Orchestrator agent exposing the combined analysis as one tool."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import Framework
from ..services.agent_config import (
    ANALYSIS_AGENTS,
    OrchestrationConfig,
    load_orchestration_config,
)
from ..services.limits import HostLimitConfig
from ..services.orchestrator import AgentOrchestrator
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
)


class OrchestratorAgent(BaseAgent):
    name = "orchestrator"
    description = "Runs the enabled analysis agents and merges their findings"

    def __init__(
        self,
        config: OrchestrationConfig | None = None,
        limits: HostLimitConfig | None = None,
    ) -> None:
        self.orchestrator = AgentOrchestrator(config or load_orchestration_config())
        super().__init__(limits)

    def register_tools(self) -> None:
        self.tool(
            "analyze-code",
            "Run every enabled analysis agent and summarize the results",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "filePath": FILE_PATH_PROPERTY,
                    "framework": enum_property(
                        Framework, "Framework context", default=Framework.RAILS
                    ),
                    "agents": {
                        "type": "array",
                        "items": {"type": "string", "enum": list(ANALYSIS_AGENTS)},
                        "uniqueItems": True,
                        "description": "Restrict the run to these enabled agents",
                    },
                },
                required=("code",),
            ),
        )(self.analyze)

    def analyze(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return self.orchestrator.analyze_code(
            arguments["code"],
            arguments.get("filePath"),
            Framework(arguments.get("framework") or Framework.RAILS.value),
            arguments.get("agents"),
        )
