"""Clean-code agent: smells, refactoring hints and SOLID checks."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import REFACTORING_SMELLS, SmellType, detect_language
from ..services import smells
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
)


class CleanCodeAgent(BaseAgent):
    name = "clean-code-agent"
    description = "Code smell detection, refactoring hints and SOLID checks"

    def register_tools(self) -> None:
        self.tool(
            "detect-code-smells",
            "Detect code smells and anti-patterns",
            object_schema(
                {"code": CODE_PROPERTY, "filePath": FILE_PATH_PROPERTY},
                required=("code",),
            ),
        )(self.detect_code_smells)
        self.tool(
            "suggest-refactoring",
            "Suggest refactoring opportunities",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "smellType": enum_property(
                        SmellType, "Limit hints to one smell", only=REFACTORING_SMELLS
                    ),
                },
                required=("code",),
            ),
        )(self.suggest_refactoring)
        self.tool(
            "check-solid-principles",
            "Check adherence to SOLID principles",
            object_schema({"code": CODE_PROPERTY}, required=("code",)),
        )(self.check_solid_principles)

    def detect_code_smells(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        file_path = arguments.get("filePath")
        report = smells.detect_smells(arguments["code"], detect_language(file_path))
        return {
            "filePath": file_path or "unknown",
            "language": report.language.value,
            "metrics": report.metrics.to_mapping(),
            "smells": [smell.to_mapping() for smell in report.smells],
            "qualityScore": report.quality_score,
        }

    def suggest_refactoring(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        smell_type = arguments.get("smellType")
        smell = SmellType(smell_type) if smell_type else None
        return {"suggestions": smells.suggest_refactoring(arguments["code"], smell)}

    def check_solid_principles(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return smells.check_solid(arguments["code"])
