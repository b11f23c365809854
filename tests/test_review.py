from __future__ import annotations

import pytest

from mcp_codeagents.domain.models import Framework, Severity
from mcp_codeagents.services.review import (
    detect_framework,
    review_code,
    review_pull_request,
    security_issues,
    severity_summary,
    validate_style,
)

MODEL = "class User < ApplicationRecord\nend"


def test_rails_model_review() -> None:
    result = review_code(MODEL, "app/models/user.rb")

    assert result["filePath"] == "app/models/user.rb"
    assert result["language"] == "ruby"
    assert result["framework"] == "rails"
    assert result["issues"] == [
        {
            "type": "convention",
            "severity": "low",
            "message": "Consider adding validations for data integrity",
        }
    ]
    assert result["score"] == 98
    assert result["suggestions"] == [
        {
            "priority": "low",
            "message": "Consider running `rubocop -a` to auto-fix style issues",
        }
    ]
    assert result["metrics"]["totalLines"] == 2


def test_review_only_keeps_blocking_security_issues() -> None:
    code = "password = 'hunter2'\nUser.where(\"name = \" + name)\n<%= raw(@bio) %>"

    result = review_code(code, None)

    assert result["filePath"] == "unknown"
    assert result["language"] == "unknown"
    assert [(issue["severity"], issue["line"]) for issue in result["issues"]] == [
        ("high", 2),
        ("critical", 1),
    ]
    assert result["score"] == 100 - 10 - 20
    assert result["suggestions"][0] == {
        "priority": "high",
        "message": "Fix 1 critical security issue(s) before merging",
    }


def test_security_issues_report_every_severity() -> None:
    code = (
        "api_key = 'abc123'\n"
        "token = 'xyz'\n"
        "<%= raw(@bio) %>\n"
        "user.update(params[:user])"
    )

    issues = security_issues(code)

    assert [issue.severity for issue in issues] == [
        Severity.MEDIUM,
        Severity.CRITICAL,
        Severity.CRITICAL,
        Severity.HIGH,
    ]
    assert severity_summary(issues) == {
        "critical": 2,
        "high": 1,
        "medium": 1,
        "low": 0,
    }


def test_sanitized_output_is_not_xss() -> None:
    assert security_issues("<%= sanitize(raw(@bio)) %>") == []


def test_linter_hint_after_more_than_five_style_issues() -> None:
    code = "\n".join(["value = 1  "] * 6)

    result = review_code(code, "app/lib/values.rb")

    assert result["suggestions"][0] == {
        "priority": "medium",
        "message": "Run linter (RuboCop/ESLint) to fix 6 style violations",
    }


@pytest.mark.parametrize(
    "code, framework, rules, score",
    [
        (
            "client.call(\n  1\n)",
            Framework.RAILS,
            ["Style/TrailingCommaInArguments"],
            95,
        ),
        ("client.call(1)", Framework.RAILS, [], 100),
        ("const a = 'x' + \"y\";", Framework.REACT_NATIVE, ["quotes"], 95),
        ("type Query { a: Int }", Framework.GRAPHQL, [], 100),
    ],
)
def test_validate_style(
    code: str, framework: Framework, rules: list[str], score: int
) -> None:
    result = validate_style(code, framework)

    assert result["framework"] == framework.value
    assert [violation["rule"] for violation in result["violations"]] == rules
    assert result["score"] == score


@pytest.mark.parametrize(
    "path, framework",
    [
        ("app/models/user.rb", Framework.RAILS),
        ("app/controllers/posts_controller.rb", Framework.RAILS),
        ("src/components/Button.tsx", Framework.REACT_NATIVE),
        ("src/App.jsx", Framework.REACT_NATIVE),
        ("app/graphql/types/user_type.rb", Framework.GRAPHQL),
        ("lib/tasks/cleanup.rake", Framework.RAILS),
    ],
)
def test_detect_framework_from_path(path: str, framework: Framework) -> None:
    assert detect_framework(path) is framework


def test_pull_request_review_aggregates_files() -> None:
    files = [
        {"path": "app/models/user.rb", "code": MODEL},
        {
            "path": "src/Button.tsx",
            "code": "import React from 'react';\nexport const Button = () => null;",
        },
    ]

    result = review_pull_request(files)

    assert [review["path"] for review in result["files"]] == [
        "app/models/user.rb",
        "src/Button.tsx",
    ]
    assert result["files"][1]["framework"] == "react-native"
    assert result["files"][1]["language"] == "typescript"
    assert [review["score"] for review in result["files"]] == [98, 100]
    assert result["overallScore"] == 99
    assert result["summary"] == {"totalFiles": 2, "issues": 1, "suggestions": 1}


def test_pull_request_review_falls_back_to_diff_text() -> None:
    result = review_pull_request([{"path": "app/models/user.rb", "diff": MODEL}])

    assert result["files"][0]["score"] == 98


def test_empty_pull_request_is_rejected() -> None:
    with pytest.raises(ValueError, match="at least one file"):
        review_pull_request([])
