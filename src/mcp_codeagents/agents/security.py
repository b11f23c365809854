"""Security agent: vulnerability scanning and authentication checks."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import Framework
from ..services import security_scanner
from ..services.scoring import risk_score
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
)

AUTH_FRAMEWORKS = (Framework.RAILS, Framework.REACT_NATIVE)


class SecurityAgent(BaseAgent):
    name = "security-agent"
    description = "Security vulnerability scanning and authentication checks"

    def register_tools(self) -> None:
        self.tool(
            "scan-vulnerabilities",
            "Scan code for security vulnerabilities",
            object_schema(
                {"code": CODE_PROPERTY, "filePath": FILE_PATH_PROPERTY},
                required=("code",),
            ),
        )(self.scan_vulnerabilities)
        self.tool(
            "check-authentication",
            "Check authentication implementation",
            object_schema(
                {
                    "code": CODE_PROPERTY,
                    "framework": enum_property(
                        Framework, "Framework", only=AUTH_FRAMEWORKS
                    ),
                },
                required=("code", "framework"),
            ),
        )(self.check_authentication)

    def scan_vulnerabilities(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        vulnerabilities = security_scanner.scan(arguments["code"])
        return {
            "filePath": arguments.get("filePath") or "unknown",
            "vulnerabilities": [finding.to_mapping() for finding in vulnerabilities],
            "riskScore": risk_score(vulnerabilities),
        }

    def check_authentication(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = Framework(arguments["framework"])
        issues = security_scanner.check_authentication(arguments["code"], framework)
        return {
            "framework": framework.value,
            "issues": [issue.to_mapping() for issue in issues],
            "secure": not issues,
        }
