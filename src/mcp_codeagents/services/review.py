"""Code review heuristics: conventions, style, security and PR roll-ups."""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from ..domain.models import Finding, Framework, Severity, detect_language
from . import security_scanner
from .metrics import calculate_metrics, check_basic_practices, line_number_at
from .scoring import mean_score, review_score, style_score

MULTILINE_CALL_PATTERN = re.compile(r"\.\w+\([\s\S]*?\n[\s\S]*?\)")
TRAILING_COMMA_MARKER = ",\n  ))"
LINTER_HINT_THRESHOLD = 5

SECRET_ASSIGNMENT_PATTERNS = [
    re.compile(r"password\s*=\s*['\"][^'\"]+['\"]", re.I),
    re.compile(r"api[_-]?key\s*=\s*['\"][^'\"]+['\"]", re.I),
    re.compile(r"secret\s*=\s*['\"][^'\"]+['\"]", re.I),
    re.compile(r"token\s*=\s*['\"][^'\"]+['\"]", re.I),
]
"""One hardcoded-secret issue is raised per matching pattern."""


def _convention(severity: Severity, message: str) -> Finding:
    return Finding(kind="convention", severity=severity, message=message)


def rails_conventions(code: str) -> list[Finding]:
    issues: list[Finding] = []
    if "class" in code and "< ApplicationRecord" in code and "validates" not in code:
        issues.append(
            _convention(Severity.LOW, "Consider adding validations for data integrity")
        )
    if "class" in code and "Controller" in code:
        mutates = "def create" in code or "def update" in code
        if mutates and "before_action" not in code:
            issues.append(
                _convention(
                    Severity.INFO, "Consider using before_action for authentication"
                )
            )
    return issues


def react_native_conventions(code: str) -> list[Finding]:
    issues: list[Finding] = []
    component = "function" in code or ("const" in code and "=>" in code)
    if component and "React" not in code:
        issues.append(_convention(Severity.LOW, "Import React for JSX"))
    typed = any(marker in code for marker in ("PropTypes", "interface", "type"))
    if "function" in code and not typed:
        issues.append(
            _convention(
                Severity.INFO,
                "Consider adding PropTypes or TypeScript for type safety",
            )
        )
    return issues


def graphql_conventions(code: str) -> list[Finding]:
    defines_root = "Query" in code or "Mutation" in code
    if "type" in code and defines_root and "description:" not in code:
        return [
            _convention(Severity.INFO, "Add descriptions to GraphQL types and fields")
        ]
    return []


FRAMEWORK_CONVENTIONS = {
    Framework.RAILS: rails_conventions,
    Framework.REACT_NATIVE: react_native_conventions,
    Framework.GRAPHQL: graphql_conventions,
}


def security_issues(code: str) -> list[Finding]:
    """Security issues as reported by the review agent."""

    issues: list[Finding] = []

    sql_match = security_scanner.detect_sql_injection(code)
    if sql_match:
        issues.append(
            Finding(
                kind="security",
                severity=Severity.HIGH,
                message=(
                    "Potential SQL injection vulnerability. "
                    "Use parameterized queries."
                ),
                recommendation="Use ActiveRecord query methods with parameters",
                line=line_number_at(code, sql_match.start()),
            )
        )

    if security_scanner.detect_xss(code):
        issues.append(
            Finding(
                kind="security",
                severity=Severity.MEDIUM,
                message="Potential XSS vulnerability. Ensure content is sanitized.",
                recommendation="Use Rails helpers like content_tag or sanitize",
            )
        )

    for pattern in SECRET_ASSIGNMENT_PATTERNS:
        match = pattern.search(code)
        if match:
            issues.append(
                Finding(
                    kind="security",
                    severity=Severity.CRITICAL,
                    message=(
                        "Hardcoded secret detected. Move to environment variables."
                    ),
                    recommendation="Use ENV variables or Rails credentials",
                    line=line_number_at(code, match.start()),
                )
            )

    if security_scanner.detect_mass_assignment(code):
        issues.append(
            Finding(
                kind="security",
                severity=Severity.HIGH,
                message=(
                    "Potential mass assignment vulnerability. Use strong parameters."
                ),
                recommendation="Use params.require().permit()",
            )
        )

    return issues


def severity_summary(issues: Sequence[Finding]) -> dict[str, int]:
    counted = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)
    return {
        severity.value: sum(1 for issue in issues if issue.severity is severity)
        for severity in counted
    }


def style_violations(code: str, framework: Framework) -> list[dict[str, str]]:
    violations: list[dict[str, str]] = []
    if framework is Framework.RAILS:
        if MULTILINE_CALL_PATTERN.search(code) and TRAILING_COMMA_MARKER not in code:
            violations.append(
                {
                    "rule": "Style/TrailingCommaInArguments",
                    "message": "Add trailing comma in multiline method calls",
                }
            )
    elif framework is Framework.REACT_NATIVE:
        if "'" in code and '"' in code:
            violations.append(
                {
                    "rule": "quotes",
                    "message": "Use consistent quote style (single or double)",
                }
            )
    return violations


def validate_style(code: str, framework: Framework) -> dict[str, Any]:
    violations = style_violations(code, framework)
    return {
        "framework": framework.value,
        "violations": violations,
        "score": style_score(len(violations)),
    }


def review_suggestions(
    issues: Sequence[Finding], framework: Framework
) -> list[dict[str, str]]:
    suggestions: list[dict[str, str]] = []
    critical = [issue for issue in issues if issue.severity is Severity.CRITICAL]
    if critical:
        suggestions.append(
            {
                "priority": "high",
                "message": (
                    f"Fix {len(critical)} critical security issue(s) before merging"
                ),
            }
        )
    style = [issue for issue in issues if issue.kind == "style"]
    if len(style) > LINTER_HINT_THRESHOLD:
        suggestions.append(
            {
                "priority": "medium",
                "message": (
                    f"Run linter (RuboCop/ESLint) to fix {len(style)} style violations"
                ),
            }
        )
    if framework is Framework.RAILS:
        suggestions.append(
            {
                "priority": "low",
                "message": "Consider running `rubocop -a` to auto-fix style issues",
            }
        )
    return suggestions


def review_code(
    code: str, file_path: str | None, framework: Framework = Framework.RAILS
) -> dict[str, Any]:
    """Single-file review: style, conventions and blocking security issues."""

    issues = check_basic_practices(code)
    issues.extend(FRAMEWORK_CONVENTIONS[framework](code))
    issues.extend(
        issue for issue in security_issues(code) if issue.severity.is_blocking
    )
    return {
        "filePath": file_path or "unknown",
        "language": detect_language(file_path).value,
        "framework": framework.value,
        "issues": [issue.to_mapping() for issue in issues],
        "suggestions": review_suggestions(issues, framework),
        "score": review_score(issues),
        "metrics": calculate_metrics(code).to_mapping(),
    }


def detect_framework(file_path: str) -> Framework:
    """Guess the framework from a changed file's path; Rails by default."""

    if "app/models" in file_path or "app/controllers" in file_path:
        return Framework.RAILS
    if ".tsx" in file_path or ".jsx" in file_path:
        return Framework.REACT_NATIVE
    if "graphql" in file_path:
        return Framework.GRAPHQL
    return Framework.RAILS


def review_pull_request(files: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    if not files:
        raise ValueError("A pull request review needs at least one file.")

    reviews: list[dict[str, Any]] = []
    issue_count = 0
    suggestion_count = 0
    for changed in files:
        path = changed.get("path") or "unknown"
        review = review_code(
            changed.get("code") or changed.get("diff") or "",
            path,
            detect_framework(path),
        )
        reviews.append({"path": path, **review})
        issue_count += len(review["issues"])
        suggestion_count += len(review["suggestions"])

    return {
        "files": reviews,
        "overallScore": mean_score(review["score"] for review in reviews),
        "summary": {
            "totalFiles": len(files),
            "issues": issue_count,
            "suggestions": suggestion_count,
        },
    }
