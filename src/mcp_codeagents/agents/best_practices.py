"""Best-practices agent for Rails, React Native and GraphQL conventions."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import ComponentType, Framework
from ..services import conventions
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
)

FRAMEWORK_PROPERTY = enum_property(Framework, "Framework context")


class BestPracticesAgent(BaseAgent):
    name = "best-practices-agent"
    description = "Framework convention checks, guides and optimization hints"

    def register_tools(self) -> None:
        self.tool(
            "check-best-practices",
            "Check code against framework best practices",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "filePath": FILE_PATH_PROPERTY,
                    "framework": FRAMEWORK_PROPERTY,
                },
                required=("code", "framework"),
            ),
        )(self.check_best_practices)
        self.tool(
            "get-best-practices-guide",
            "Get best practices guide for a framework component",
            object_schema(
                {
                    "framework": FRAMEWORK_PROPERTY,
                    "componentType": enum_property(ComponentType, "Component type"),
                },
                required=("framework", "componentType"),
            ),
        )(self.get_guide)
        self.tool(
            "suggest-optimizations",
            "Suggest performance and code optimizations",
            object_schema(
                {"code": CODE_PROPERTY, "framework": FRAMEWORK_PROPERTY},
                required=("code", "framework"),
            ),
        )(self.suggest_optimizations)

    def check_best_practices(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = Framework(arguments["framework"])
        report = conventions.check_conventions(arguments["code"], framework)
        return {
            "framework": framework.value,
            "filePath": arguments.get("filePath") or "unknown",
            "score": report.score,
            "practices": list(report.practices),
            "violations": [violation.to_mapping() for violation in report.violations],
            "recommendations": conventions.recommendations_for(
                report.violations, framework
            ),
        }

    def get_guide(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = Framework(arguments["framework"])
        component_type = ComponentType(arguments["componentType"])
        return {
            "framework": framework.value,
            "componentType": component_type.value,
            "guide": conventions.best_practices_guide(framework, component_type),
        }

    def suggest_optimizations(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = Framework(arguments["framework"])
        optimizations = conventions.suggest_optimizations(arguments["code"], framework)
        return {
            "framework": framework.value,
            "optimizations": optimizations,
            "totalSuggestions": len(optimizations),
        }
