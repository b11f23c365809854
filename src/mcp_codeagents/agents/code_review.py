"""Code-review agent: single-file reviews, security, style and PR roll-ups."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import Framework
from ..services import review
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
    string_property,
)

FRAMEWORK_PROPERTY = enum_property(Framework, "Framework context")

CHANGED_FILE_SCHEMA = object_schema(
    {
        "path": string_property("Path of the changed file"),
        "code": string_property("Full file contents"),
        "diff": string_property("Diff of the change"),
    }
)


class CodeReviewAgent(BaseAgent):
    name = "code-review-agent"
    description = "Code review with conventions, security and style checks"

    def register_tools(self) -> None:
        self.tool(
            "review-code",
            "Review code for quality, conventions and blocking issues",
            object_schema(
                {
                    "code": string_property("Source code to review"),
                    "filePath": FILE_PATH_PROPERTY,
                    "framework": FRAMEWORK_PROPERTY,
                },
                required=("code",),
            ),
        )(self.review_code)
        self.tool(
            "check-security",
            "Check code for common security vulnerabilities",
            object_schema(
                {"code": CODE_PROPERTY, "filePath": FILE_PATH_PROPERTY},
                required=("code",),
            ),
        )(self.check_security)
        self.tool(
            "validate-style",
            "Validate code against the framework style guide",
            object_schema(
                {"code": CODE_PROPERTY, "framework": FRAMEWORK_PROPERTY},
                required=("code", "framework"),
            ),
        )(self.validate_style)
        self.tool(
            "review-pr",
            "Review a pull request with multiple file changes",
            object_schema(
                {
                    "files": {
                        "type": "array",
                        "items": CHANGED_FILE_SCHEMA,
                        "description": "List of changed files",
                    }
                },
                required=("files",),
            ),
        )(self.review_pr)

    def review_code(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        file_path = arguments.get("filePath")
        if "framework" in arguments:
            framework = Framework(arguments["framework"])
        else:
            framework = review.detect_framework(file_path or "")
        return review.review_code(arguments["code"], file_path, framework)

    def check_security(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        issues = review.security_issues(arguments["code"])
        return {
            "issues": [issue.to_mapping() for issue in issues],
            "summary": review.severity_summary(issues),
        }

    def validate_style(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return review.validate_style(
            arguments["code"], Framework(arguments["framework"])
        )

    def review_pr(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return review.review_pull_request(arguments["files"])
