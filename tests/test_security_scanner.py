"""Vulnerability and authentication heuristics."""

from __future__ import annotations

import pytest

from mcp_codeagents.domain.models import Framework, Severity
from mcp_codeagents.services import security_scanner


def _kinds(code: str) -> list[str]:
    return [finding.kind for finding in security_scanner.scan(code)]


def test_concatenated_where_clause_is_sql_injection() -> None:
    findings = security_scanner.scan('User.where("id = " + user_id)')

    assert [finding.kind for finding in findings] == ["sql-injection"]
    assert findings[0].severity in (Severity.HIGH, Severity.CRITICAL)
    assert findings[0].line == 1


@pytest.mark.parametrize(
    "code",
    [
        'ActiveRecord::Base.connection.execute("DELETE FROM t WHERE id=" + id)',
        'Post.find_by_sql("SELECT * FROM posts WHERE slug = " + slug)',
        "const q = `${sql} WHERE id = 1`",
    ],
)
def test_other_query_builders_are_flagged(code: str) -> None:
    assert "sql-injection" in _kinds(code)


def test_parameterized_query_is_not_flagged() -> None:
    assert _kinds('User.where("id = ?", user_id)') == []


def test_hardcoded_password_reports_one_secret() -> None:
    findings = security_scanner.scan('password = "abc123"')

    assert [finding.kind for finding in findings] == ["hardcoded-secrets"]
    secrets = findings[0].to_mapping()["details"]
    assert secrets == [{"type": "password", "position": 0, "line": 1}]


def test_every_secret_occurrence_is_reported_in_text_order() -> None:
    code = 'api_key = "k-123"\nconfig = { token: "t-456" }\npassword = "p"\n'

    secrets = security_scanner.detect_secrets(code)

    assert [secret["type"] for secret in secrets] == ["api-key", "token", "password"]
    assert [secret["line"] for secret in secrets] == [1, 2, 3]


def test_plain_class_yields_no_findings() -> None:
    assert security_scanner.scan("class Widget < Base\nend") == []


@pytest.mark.parametrize(
    "code, flagged",
    [
        ("<%= raw(@user.bio) %>", True),
        ("<%= @user.bio.html_safe %>", True),
        ("<div dangerouslySetInnerHTML={{ __html: bio }} />", True),
        ("<%= raw(sanitize(@user.bio)) %>", False),
        ("<%= @user.bio %>", False),
    ],
)
def test_raw_html_needs_a_sanitizer(code: str, flagged: bool) -> None:
    assert ("xss" in _kinds(code)) is flagged


def test_controller_without_forgery_protection_is_flagged() -> None:
    controller = "class UsersController < ApplicationController\nend"
    protected = (
        "class UsersController < ApplicationController\n"
        "  protect_from_forgery with: :exception\n"
        "end"
    )

    assert _kinds(controller) == ["csrf"]
    assert _kinds(protected) == []


def test_scanners_tolerate_arbitrary_text() -> None:
    garbage = "\x00\x01 ((( where( + ${ ]] \n\n\t password: 'unterminated"

    findings = security_scanner.scan(garbage)

    assert isinstance(findings, list)


@pytest.mark.parametrize(
    "code, framework, expected",
    [
        (
            "class PostsController < ApplicationController\n  def index; end\nend",
            Framework.RAILS,
            ["missing-authentication"],
        ),
        (
            "class PostsController < ApplicationController\n"
            "  before_action :authenticate_user!\nend",
            Framework.RAILS,
            [],
        ),
        ("fetch('/api/posts')", Framework.REACT_NATIVE, ["missing-auth-header"]),
        (
            "fetch('/api/posts', { headers: { Authorization: `Bearer ${t}` } })",
            Framework.REACT_NATIVE,
            [],
        ),
        ("type Query { posts: [Post] }", Framework.GRAPHQL, []),
    ],
)
def test_check_authentication(
    code: str, framework: Framework, expected: list[str]
) -> None:
    issues = security_scanner.check_authentication(code, framework)

    assert [issue.kind for issue in issues] == expected


def test_mass_assignment_requires_unpermitted_params() -> None:
    assert security_scanner.detect_mass_assignment("@user.update(params[:user])")
    assert not security_scanner.detect_mass_assignment(
        "@user.update(params[:user].permit(:name))"
    )
