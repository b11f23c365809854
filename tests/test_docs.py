from __future__ import annotations

import json

from mcp_codeagents.domain.models import Language
from mcp_codeagents.services.docs import (
    DocUnit,
    add_inline_docs,
    build_document,
    extract_units,
    render_html,
    render_json,
    render_markdown,
    render_readme,
)

RUBY_SOURCE = """# Creates users
# from signup params
class UserFactory
  def build(name, email)
  end
end"""

JS_SOURCE = """/**
 * Adds numbers
 */
function add(a, b) {
  return a + b;
}

const double = x => x * 2;"""


def test_ruby_units_pick_up_the_comment_block_above() -> None:
    units = extract_units(RUBY_SOURCE, Language.RUBY)

    assert [unit.to_mapping() for unit in units] == [
        {
            "type": "class",
            "name": "UserFactory",
            "description": "Creates users from signup params",
            "line": 3,
        },
        {
            "type": "method",
            "name": "build",
            "description": "",
            "line": 4,
            "parameters": ["name", "email"],
        },
    ]


def test_three_line_comment_block_is_joined_in_order() -> None:
    code = "# one\n# two\n# three\nclass Widget\nend"

    (unit,) = extract_units(code, Language.RUBY)

    assert unit.description == "one two three"


def test_block_comment_markers_are_stripped() -> None:
    units = extract_units(JS_SOURCE, Language.JAVASCRIPT)

    assert [(unit.name, unit.description, unit.parameters) for unit in units] == [
        ("add", "Adds numbers", ("a", "b")),
        ("double", "", ("x",)),
    ]


def test_comment_lookback_stops_at_code() -> None:
    code = "# unrelated\nx = 1\ndef run\nend"

    (unit,) = extract_units(code, Language.RUBY)

    assert unit.description == ""


def test_unknown_language_has_no_units() -> None:
    assert extract_units(RUBY_SOURCE, Language.UNKNOWN) == []


def _document() -> dict:
    units = [
        DocUnit("function", "add", "Adds a & b", 4, ("a", "b")),
        DocUnit("class", "Calculator", "", 9),
    ]
    return build_document(units, "math.js", Language.JAVASCRIPT, "markdown")


def test_markdown_rendering() -> None:
    assert render_markdown(_document()) == (
        "# math.js\n\n"
        "## add\n\n"
        "Adds a & b\n\n"
        "**Parameters:**\n"
        "- a\n"
        "- b\n"
        "\n"
        "## Calculator\n\n"
        "No description\n\n"
        "\n"
    )


def test_html_rendering_escapes_text() -> None:
    rendered = render_html(_document())

    assert rendered.startswith("<h1>math.js</h1>\n")
    assert "<p>Adds a &amp; b</p>" in rendered
    assert "<h3>Parameters</h3><ul><li>a</li><li>b</li></ul>" in rendered
    assert "<p>No description</p>" in rendered
    assert rendered.count("<section>") == 2


def test_json_rendering_keeps_the_document() -> None:
    document = _document()

    assert json.loads(render_json(document)) == document
    assert document["file"] == "math.js"
    assert document["sections"][1] == {
        "type": "class",
        "name": "Calculator",
        "description": "",
        "line": 9,
    }


def test_document_file_defaults_to_unknown() -> None:
    document = build_document([], None, Language.UNKNOWN, "json")

    assert document == {
        "file": "unknown",
        "language": "unknown",
        "format": "json",
        "sections": [],
    }


def test_inline_docs_follow_declaration_indentation() -> None:
    code = "class Foo\n  def bar\n  end\nend"

    assert add_inline_docs(code, Language.RUBY) == (
        "# Foo: Description\n"
        "class Foo\n"
        "  # bar: Description\n"
        "  def bar\n"
        "  end\n"
        "end"
    )


def test_inline_docs_skip_units_already_described() -> None:
    code = "# Foo holds widgets\nclass Foo\nend"

    assert add_inline_docs(code, Language.RUBY) == code


def test_inline_docs_use_jsdoc_for_javascript() -> None:
    documented = add_inline_docs("function add(a, b) {}", Language.JAVASCRIPT)

    assert documented == (
        "/**\n * add\n * @description Description\n */\nfunction add(a, b) {}"
    )
    assert add_inline_docs(documented, Language.JAVASCRIPT) == documented


def test_inline_docs_leave_unknown_languages_alone() -> None:
    assert add_inline_docs("class Foo\nend", Language.UNKNOWN) == "class Foo\nend"


def test_readme_defaults() -> None:
    readme = render_readme("Demo", None, [])

    assert readme.startswith("# Demo\n\nProject description\n")
    assert "## Tech Stack\n\nNot specified\n" in readme
    assert readme.rstrip().endswith("MIT")


def test_readme_lists_the_stack() -> None:
    readme = render_readme("Demo", "Internal tooling", ["Rails", "GraphQL"])

    assert "Internal tooling" in readme
    assert "- Rails\n- GraphQL" in readme
