from __future__ import annotations

import pytest

from mcp_codeagents.domain.models import Language, TestFramework, TestType
from mcp_codeagents.services.scaffolds import (
    coverage_report,
    extract_component_name,
    generate_examples,
    generate_test,
    snake_case,
    suggestions_for,
)


def test_rspec_model_scaffold() -> None:
    code = "class UserProfile < ActiveRecord::Base\nend"

    scaffold = generate_test(code, TestFramework.RSPEC, Language.RUBY)

    assert "RSpec.describe UserProfile, type: :model do" in scaffold
    assert "user_profile = UserProfile.new" in scaffold
    assert "expect(user_profile).to be_valid" in scaffold


def test_rspec_model_scaffold_needs_ruby() -> None:
    code = "class UserProfile < ActiveRecord::Base\nend"

    scaffold = generate_test(code, TestFramework.RSPEC, Language.UNKNOWN)

    assert "type: :model" not in scaffold
    assert "RSpec.describe UserProfile do" in scaffold


def test_rspec_controller_scaffold() -> None:
    code = "class PostsController < ApplicationController\nend"

    scaffold = generate_test(code, TestFramework.RSPEC, Language.RUBY)

    assert "RSpec.describe PostsController, type: :controller do" in scaffold
    assert "get :index" in scaffold


def test_rspec_generic_scaffold_without_class() -> None:
    scaffold = generate_test("puts 'hi'", TestFramework.RSPEC, Language.RUBY)

    assert "RSpec.describe TestClass do" in scaffold
    assert scaffold.startswith('require "rails_helper"\n')


def test_jest_component_scaffold() -> None:
    code = "const Greeting = () => <Text>Hello</Text>;"

    scaffold = generate_test(code, TestFramework.JEST, Language.JAVASCRIPT)

    assert "import Greeting from './Greeting';" in scaffold
    assert "render(<Greeting />)" in scaffold
    assert "toMatchSnapshot()" in scaffold


def test_jest_plain_scaffold() -> None:
    scaffold = generate_test(
        "export default formatDate", TestFramework.JEST, Language.JAVASCRIPT
    )

    assert "import { Component } from './Component';" in scaffold
    assert "const result = Component('input');" in scaffold


@pytest.mark.parametrize(
    "code, name",
    [
        ("function UserCard() {}", "UserCard"),
        ("const Header = () => null", "Header"),
        ("const helper = 1", "Component"),
    ],
)
def test_component_name_extraction(code: str, name: str) -> None:
    assert extract_component_name(code) == name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("User", "user"),
        ("UserProfile", "user_profile"),
        ("OAuth2Token", "oauth2_token"),
    ],
)
def test_snake_case(name: str, expected: str) -> None:
    assert snake_case(name) == expected


def test_suggestions_depend_on_framework_and_type() -> None:
    assert suggestions_for(TestFramework.RSPEC, TestType.UNIT)[0] == (
        "Use descriptive context blocks"
    )
    assert suggestions_for(TestFramework.JEST, TestType.COMPONENT)[0] == (
        "Use React Native Testing Library"
    )
    assert suggestions_for(TestFramework.JEST, TestType.E2E) == []


def test_coverage_report_shape() -> None:
    report = coverage_report(TestFramework.RSPEC)

    assert report["framework"] == "rspec"
    assert len(report["recommendations"]) == 5
    assert report["metrics"] == {
        "targetCoverage": 80,
        "currentCoverage": "Unknown - run coverage tool",
    }


def test_rspec_examples_from_cases() -> None:
    examples = generate_examples("User", TestFramework.RSPEC, ["saves", "validates"])

    assert examples == (
        "# Test examples for User\n\n"
        "RSpec.describe User do\n"
        '  it "saves" do\n'
        "    # Implementation\n"
        "  end\n"
        "\n"
        '  it "validates" do\n'
        "    # Implementation\n"
        "  end\n"
        "end\n"
    )


def test_jest_examples_default_case() -> None:
    examples = generate_examples("Button", TestFramework.JEST, [])

    assert examples == (
        "// Test examples for Button\n\n"
        "describe('Button', () => {\n"
        "  it('renders correctly', () => {\n"
        "    // Implementation\n"
        "  });\n"
        "});\n"
    )
