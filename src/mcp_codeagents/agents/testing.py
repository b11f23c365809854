"""Testing agent: RSpec and Jest scaffolds, coverage guidance, examples."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import TestFramework, TestType, detect_language
from ..services import scaffolds
from .base import (
    CODE_PROPERTY,
    FILE_PATH_PROPERTY,
    BaseAgent,
    enum_property,
    object_schema,
    string_array_property,
    string_property,
)

FRAMEWORK_PROPERTY = enum_property(TestFramework, "Testing framework")


class TestingAgent(BaseAgent):
    __test__ = False

    name = "testing-agent"
    description = "Test scaffolding and coverage guidance for RSpec and Jest"

    def register_tools(self) -> None:
        self.tool(
            "generate-test",
            "Generate test cases for given code",
            object_schema(
                {
                    "code": string_property("Source code to test"),
                    "filePath": FILE_PATH_PROPERTY,
                    "testType": enum_property(
                        TestType, "Type of test", default=TestType.UNIT
                    ),
                    "framework": FRAMEWORK_PROPERTY,
                },
                required=("code", "framework"),
            ),
        )(self.generate_test)
        self.tool(
            "analyze-coverage",
            "Analyze test coverage and suggest improvements",
            object_schema(
                {
                    "codebasePath": string_property("Path to the codebase"),
                    "framework": FRAMEWORK_PROPERTY,
                },
                required=("framework",),
            ),
        )(self.analyze_coverage)
        self.tool(
            "generate-test-examples",
            "Generate example tests for a component",
            object_schema(
                {
                    "componentName": string_property("Component or class name"),
                    "framework": FRAMEWORK_PROPERTY,
                    "testCases": string_array_property("Test case descriptions"),
                },
                required=("componentName", "framework"),
            ),
        )(self.generate_test_examples)

    def generate_test(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = TestFramework(arguments["framework"])
        test_type = TestType(arguments.get("testType") or TestType.UNIT.value)
        language = detect_language(arguments.get("filePath"))
        return {
            "testCode": scaffolds.generate_test(arguments["code"], framework, language),
            "framework": framework.value,
            "testType": test_type.value,
            "language": language.value,
            "suggestions": scaffolds.suggestions_for(framework, test_type),
        }

    def analyze_coverage(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return scaffolds.coverage_report(TestFramework(arguments["framework"]))

    def generate_test_examples(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        framework = TestFramework(arguments["framework"])
        component_name = arguments["componentName"]
        return {
            "examples": scaffolds.generate_examples(
                component_name, framework, list(arguments.get("testCases") or [])
            ),
            "framework": framework.value,
            "componentName": component_name,
        }
