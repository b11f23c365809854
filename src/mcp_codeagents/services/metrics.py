"""Size and complexity metrics shared by the scanners."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..domain.models import Finding, Severity

COMMENT_PREFIXES = ("#", "//", "/*")
"""Line prefixes counted as comment lines."""

CONTROL_FLOW_PATTERNS = [
    re.compile(r"\bif\b"),
    re.compile(r"\belse\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bswitch\b"),
    re.compile(r"\btry\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"\b&&\b"),
    re.compile(r"\b\|\|\b"),
]
"""Keyword patterns whose matches each add one to the complexity proxy.

The boolean operators only count when written between word characters
(``a&&b``), matching the word-boundary semantics of the other patterns.
"""

MAX_LINE_LENGTH = 120


@dataclass(frozen=True)
class CodeMetrics:
    total_lines: int
    code_lines: int
    comment_lines: int
    empty_lines: int
    complexity: int

    def to_mapping(self) -> dict[str, int]:
        return {
            "totalLines": self.total_lines,
            "codeLines": self.code_lines,
            "commentLines": self.comment_lines,
            "emptyLines": self.empty_lines,
            "complexity": self.complexity,
        }


def estimate_complexity(code: str) -> int:
    """Return 1 plus the number of control-flow keyword matches."""

    return 1 + sum(len(pattern.findall(code)) for pattern in CONTROL_FLOW_PATTERNS)


def calculate_metrics(code: str) -> CodeMetrics:
    lines = code.split("\n")
    non_empty = [line for line in lines if line.strip()]
    comments = [line for line in lines if line.strip().startswith(COMMENT_PREFIXES)]
    return CodeMetrics(
        total_lines=len(lines),
        code_lines=len(non_empty) - len(comments),
        comment_lines=len(comments),
        empty_lines=len(lines) - len(non_empty),
        complexity=estimate_complexity(code),
    )


def levenshtein_distance(first: str, second: str) -> int:
    """Classic O(n*m) edit distance with unit substitution cost."""

    previous = list(range(len(first) + 1))
    for row, second_char in enumerate(second, start=1):
        current = [row]
        for column, first_char in enumerate(first, start=1):
            cost = 0 if first_char == second_char else 1
            current.append(
                min(
                    current[column - 1] + 1,
                    previous[column] + 1,
                    previous[column - 1] + cost,
                )
            )
        previous = current
    return previous[len(first)]


def similarity(first: str, second: str) -> float:
    """Return ``(longer - distance) / longer`` in the range [0, 1]."""

    longer = max(len(first), len(second))
    if longer == 0:
        return 1.0
    return (longer - levenshtein_distance(first, second)) / longer


def line_number_at(code: str, offset: int) -> int:
    """Return the 1-based line number containing ``offset``."""

    return code.count("\n", 0, offset) + 1


def find_line_containing(code: str, needle: str) -> int | None:
    for index, line in enumerate(code.split("\n")):
        if needle in line:
            return index + 1
    return None


def check_basic_practices(code: str) -> list[Finding]:
    """Flag over-long lines and trailing whitespace."""

    findings: list[Finding] = []
    lines = code.split("\n")
    for index, line in enumerate(lines):
        if len(line) > MAX_LINE_LENGTH:
            findings.append(
                Finding(
                    kind="style",
                    severity=Severity.INFO,
                    message=f"Line exceeds {MAX_LINE_LENGTH} characters",
                    line=index + 1,
                )
            )
    for index, line in enumerate(lines):
        if line != line.rstrip():
            findings.append(
                Finding(
                    kind="style",
                    severity=Severity.INFO,
                    message="Trailing whitespace detected",
                    line=index + 1,
                )
            )
    return findings
