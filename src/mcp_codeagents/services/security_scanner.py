"""Regex heuristics for common web-application vulnerabilities.

Every detector is a pure function over raw text. The patterns are syntactic
proxies, not proofs: safe string concatenation next to a query call is still
reported as a potential injection.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from ..domain.models import Finding, Framework, Severity
from .metrics import line_number_at

SQL_INJECTION_PATTERNS = [
    re.compile(r"where\([^)]*\+"),
    re.compile(r"execute\([^)]*\+"),
    re.compile(r"find_by_sql\([^)]*\+"),
    re.compile(r"exec_query\([^)]*\+"),
    re.compile(r"\$\{[^}]*sql", re.IGNORECASE),
]
"""Query-building call sites fed by concatenation or interpolated SQL."""

RAW_HTML_PATTERN = re.compile(
    r"\.html_safe\b|\braw\(|\binnerHTML\b|\bdangerouslySetInnerHTML\b"
)
"""Idioms that bypass output escaping."""

SANITIZER_PATTERN = re.compile(r"\bsanitize\w*\s*\(|DOMPurify\.sanitize")


class SecretPattern(NamedTuple):
    """An assignment-like secret literal and the type it reports."""

    secret_type: str
    regex: re.Pattern


SECRET_PATTERNS = [
    SecretPattern(
        "password", re.compile(r"password\s*[=:]\s*['\"]([^'\"]+)['\"]", re.I)
    ),
    SecretPattern(
        "api-key", re.compile(r"api[_-]?key\s*[=:]\s*['\"]([^'\"]+)['\"]", re.I)
    ),
    SecretPattern("secret", re.compile(r"secret\s*[=:]\s*['\"]([^'\"]+)['\"]", re.I)),
    SecretPattern("token", re.compile(r"token\s*[=:]\s*['\"]([^'\"]+)['\"]", re.I)),
]

CLASS_KEYWORD_PATTERN = re.compile(r"\bclass\b")
CSRF_PROTECTION_MARKERS = ("protect_from_forgery",)
AUTH_GATE_MARKER = "before_action"
AUTH_CALL_MARKER = "authenticate"
HTTP_CALL_PATTERN = re.compile(r"\bfetch\b|\baxios\b")
AUTH_HEADER_MARKERS = ("Authorization", "Bearer")


def is_controller_like(code: str) -> bool:
    """Return True when the text defines a class that looks like a controller."""

    return bool(CLASS_KEYWORD_PATTERN.search(code)) and "Controller" in code


def detect_sql_injection(code: str) -> re.Match | None:
    """Return the earliest suspicious query call site, if any."""

    matches = [m for m in (p.search(code) for p in SQL_INJECTION_PATTERNS) if m]
    if not matches:
        return None
    return min(matches, key=lambda match: match.start())


def detect_xss(code: str) -> re.Match | None:
    """Return the first raw-HTML idiom unless a sanitizer call is present."""

    if SANITIZER_PATTERN.search(code):
        return None
    return RAW_HTML_PATTERN.search(code)


def detect_secrets(code: str) -> list[dict[str, object]]:
    """Return one entry per hardcoded secret occurrence, ordered by offset."""

    secrets: list[dict[str, object]] = []
    for secret_type, regex in SECRET_PATTERNS:
        for match in regex.finditer(code):
            secrets.append(
                {
                    "type": secret_type,
                    "position": match.start(),
                    "line": line_number_at(code, match.start()),
                }
            )
    secrets.sort(key=lambda secret: secret["position"])
    return secrets


def detect_csrf(code: str) -> bool:
    """Controllers must declare forgery protection."""

    return is_controller_like(code) and not any(
        marker in code for marker in CSRF_PROTECTION_MARKERS
    )


def detect_mass_assignment(code: str) -> bool:
    return "params[:" in code and "update(" in code and "permit" not in code


def scan(code: str) -> list[Finding]:
    """Run every vulnerability heuristic over ``code``."""

    findings: list[Finding] = []

    sql_match = detect_sql_injection(code)
    if sql_match:
        findings.append(
            Finding(
                kind="sql-injection",
                severity=Severity.CRITICAL,
                message="Potential SQL injection vulnerability detected",
                recommendation="Use parameterized queries or ORM methods",
                line=line_number_at(code, sql_match.start()),
            )
        )

    xss_match = detect_xss(code)
    if xss_match:
        findings.append(
            Finding(
                kind="xss",
                severity=Severity.HIGH,
                message="Potential XSS vulnerability detected",
                recommendation="Sanitize user input and use proper escaping",
                line=line_number_at(code, xss_match.start()),
            )
        )

    secrets = detect_secrets(code)
    if secrets:
        findings.append(
            Finding(
                kind="hardcoded-secrets",
                severity=Severity.CRITICAL,
                message=f"Found {len(secrets)} potential hardcoded secrets",
                recommendation=(
                    "Move secrets to environment variables or secure storage"
                ),
                details=tuple(secrets),
            )
        )

    if detect_csrf(code):
        findings.append(
            Finding(
                kind="csrf",
                severity=Severity.MEDIUM,
                message="Missing CSRF protection",
                recommendation="Implement CSRF tokens for state-changing operations",
            )
        )

    return findings


def check_authentication(code: str, framework: Framework) -> list[Finding]:
    """Framework-specific authentication heuristics."""

    issues: list[Finding] = []
    if framework is Framework.RAILS:
        if is_controller_like(code) and not (
            AUTH_GATE_MARKER in code and AUTH_CALL_MARKER in code
        ):
            issues.append(
                Finding(
                    kind="missing-authentication",
                    severity=Severity.HIGH,
                    message="Controller missing authentication",
                    recommendation="Add before_action :authenticate_user! or similar",
                )
            )
    elif framework is Framework.REACT_NATIVE:
        if HTTP_CALL_PATTERN.search(code) and not any(
            marker in code for marker in AUTH_HEADER_MARKERS
        ):
            issues.append(
                Finding(
                    kind="missing-auth-header",
                    severity=Severity.MEDIUM,
                    message="API calls missing authorization header",
                    recommendation="Include Authorization header with Bearer token",
                )
            )
    elif framework is Framework.GRAPHQL:
        # No authentication heuristics exist for schema documents.
        pass
    return issues
