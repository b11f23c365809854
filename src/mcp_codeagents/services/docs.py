"""Documentation extraction and stub insertion over raw source text.

Documentable units are found with per-language declaration patterns. Each unit
is paired with the contiguous block of line comments directly above it: the
scan walks back at most five lines (the partial line holding the declaration
counts as one) and stops at the first non-blank line that is not a comment.
"""

from __future__ import annotations

import html
import json
import re
from dataclasses import dataclass
from typing import Any, NamedTuple

from ..domain.models import Language
from .metrics import line_number_at

COMMENT_LOOKBACK_LINES = 5
COMMENT_MARKERS = ("#", "//", "/*", "*")
COMMENT_MARKER_PATTERN = re.compile(r"^[#/*\s]+")
COMMENT_CLOSER_PATTERN = re.compile(r"\s*\*/$")
NO_DESCRIPTION = "No description"


class UnitPattern(NamedTuple):
    """Declaration pattern with a ``name`` group and optional parameters."""

    kind: str
    regex: re.Pattern


_EXPORT = r"(?:export\s+(?:default\s+)?)?"

UNIT_PATTERNS: dict[Language, list[UnitPattern]] = {
    Language.RUBY: [
        UnitPattern(
            "class", re.compile(r"(?m)^[ \t]*class\s+(?P<name>[A-Z]\w*(?:::\w+)*)")
        ),
        UnitPattern(
            "module", re.compile(r"(?m)^[ \t]*module\s+(?P<name>[A-Z]\w*(?:::\w+)*)")
        ),
        UnitPattern(
            "method",
            re.compile(
                r"(?m)^[ \t]*def\s+(?P<name>(?:self\.)?\w+[?!=]?)"
                r"(?:[ \t]*\((?P<params>[^)]*)\))?"
            ),
        ),
    ],
    Language.JAVASCRIPT: [
        UnitPattern(
            "class", re.compile(rf"(?m)^[ \t]*{_EXPORT}class\s+(?P<name>\w+)")
        ),
        UnitPattern(
            "function",
            re.compile(
                rf"(?m)^[ \t]*{_EXPORT}(?:async\s+)?function\s*\*?\s*(?P<name>\w+)"
                r"\s*\((?P<params>[^)]*)\)"
            ),
        ),
        UnitPattern(
            "function",
            re.compile(
                r"(?m)^[ \t]*(?:export\s+)?const\s+(?P<name>\w+)\s*=\s*(?:async\s+)?"
                r"(?:\((?P<params>[^)]*)\)|(?P<param>\w+))\s*=>"
            ),
        ),
    ],
    Language.PYTHON: [
        UnitPattern("class", re.compile(r"(?m)^[ \t]*class\s+(?P<name>\w+)")),
        UnitPattern(
            "function",
            re.compile(
                r"(?m)^[ \t]*(?:async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
            ),
        ),
    ],
    Language.GRAPHQL: [
        UnitPattern(keyword, re.compile(rf"(?m)^[ \t]*{keyword}\s+(?P<name>\w+)"))
        for keyword in ("type", "input", "interface", "enum")
    ],
}
UNIT_PATTERNS[Language.TYPESCRIPT] = UNIT_PATTERNS[Language.JAVASCRIPT]


@dataclass(frozen=True)
class DocUnit:
    kind: str
    name: str
    description: str
    line: int
    parameters: tuple[str, ...] | None = None

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.kind,
            "name": self.name,
            "description": self.description,
            "line": self.line,
        }
        if self.parameters is not None:
            payload["parameters"] = list(self.parameters)
        return payload


def _collect_comment(preceding_lines: list[str]) -> str:
    comments: list[str] = []
    for line in reversed(preceding_lines[-COMMENT_LOOKBACK_LINES:]):
        stripped = line.strip()
        if stripped.startswith(COMMENT_MARKERS):
            text = COMMENT_MARKER_PATTERN.sub("", stripped)
            text = COMMENT_CLOSER_PATTERN.sub("", text)
            if text:
                comments.insert(0, text)
        elif stripped:
            break
    return " ".join(comments)


def leading_comment(code: str, offset: int) -> str:
    """Return the comment block immediately preceding ``offset``."""

    return _collect_comment(code[:offset].split("\n"))


def _parameters(match: re.Match) -> tuple[str, ...] | None:
    groups = match.groupdict()
    if "params" not in groups:
        return None
    raw = groups.get("params") or groups.get("param") or ""
    return tuple(param.strip() for param in raw.split(",") if param.strip())


def extract_units(code: str, language: Language) -> list[DocUnit]:
    """Return documentable units in source order."""

    found: list[tuple[int, DocUnit]] = []
    for kind, regex in UNIT_PATTERNS.get(language, []):
        for match in regex.finditer(code):
            offset = match.start("name")
            found.append(
                (
                    offset,
                    DocUnit(
                        kind=kind,
                        name=match.group("name"),
                        description=leading_comment(code, match.start()),
                        line=line_number_at(code, offset),
                        parameters=_parameters(match),
                    ),
                )
            )
    found.sort(key=lambda item: item[0])
    return [unit for _, unit in found]


def build_document(
    units: list[DocUnit], file_path: str | None, language: Language, doc_format: str
) -> dict[str, Any]:
    return {
        "file": file_path or "unknown",
        "language": language.value,
        "format": doc_format,
        "sections": [unit.to_mapping() for unit in units],
    }


def render_markdown(document: dict[str, Any]) -> str:
    parts = [f"# {document['file']}\n\n"]
    for section in document["sections"]:
        parts.append(f"## {section['name']}\n\n")
        parts.append(f"{section['description'] or NO_DESCRIPTION}\n\n")
        parameters = section.get("parameters")
        if parameters:
            parts.append("**Parameters:**\n")
            parts.extend(f"- {parameter}\n" for parameter in parameters)
        parts.append("\n")
    return "".join(parts)


def render_html(document: dict[str, Any]) -> str:
    parts = [f"<h1>{html.escape(document['file'])}</h1>"]
    for section in document["sections"]:
        parts.append("<section>")
        parts.append(f"<h2>{html.escape(section['name'])}</h2>")
        description = section["description"] or NO_DESCRIPTION
        parts.append(f"<p>{html.escape(description)}</p>")
        parameters = section.get("parameters")
        if parameters:
            items = "".join(
                f"<li>{html.escape(parameter)}</li>" for parameter in parameters
            )
            parts.append(f"<h3>Parameters</h3><ul>{items}</ul>")
        parts.append("</section>")
    return "\n".join(parts) + "\n"


def _stub_lines(name: str, language: Language) -> list[str]:
    if language.is_javascript_family:
        return ["/**", f" * {name}", " * @description Description", " */"]
    return [f"# {name}: Description"]


def _mentions(comment: str, name: str) -> bool:
    return re.search(rf"(?<![\w.]){re.escape(name)}(?!\w)", comment) is not None


def add_inline_docs(code: str, language: Language) -> str:
    """Insert a stub comment above declarations whose comment does not name them.

    Stubs take the indentation of the declaration they precede. Text in a
    language without declaration patterns is returned unchanged.
    """

    patterns = UNIT_PATTERNS.get(language)
    if not patterns:
        return code

    lines = code.split("\n")
    output: list[str] = []
    for index, line in enumerate(lines):
        for _, regex in patterns:
            match = regex.match(line)
            if match is None:
                continue
            name = match.group("name")
            comment = _collect_comment(lines[:index] + [""])
            if not _mentions(comment, name):
                indent = line[: len(line) - len(line.lstrip())]
                output.extend(indent + stub for stub in _stub_lines(name, language))
            break
        output.append(line)
    return "\n".join(output)


def render_readme(
    project_name: str, description: str | None, tech_stack: list[str]
) -> str:
    stack = "\n".join(f"- {tech}" for tech in tech_stack) or "Not specified"
    return f"""# {project_name}

{description or 'Project description'}

## Tech Stack

{stack}

## Installation

```bash
# Installation instructions
```

## Usage

```bash
# Usage examples
```

## Development

```bash
# Development setup
```

## License

MIT
"""


def render_json(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)
