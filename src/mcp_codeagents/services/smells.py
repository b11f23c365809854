"""Clean-code smell detection, refactoring hints and SOLID judgments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..domain.models import Finding, Language, Severity, SmellType
from .metrics import CodeMetrics, calculate_metrics, line_number_at, similarity
from .scoring import quality_score, round_half_up, solid_score

LONG_METHOD_COMPLEXITY = 10
LARGE_CLASS_CODE_LINES = 300
EXTRACT_METHOD_COMPLEXITY = 5
EXTRACT_CLASS_CODE_LINES = 200
DUPLICATE_MIN_LINE_LENGTH = 10
DUPLICATE_SIMILARITY = 0.8
MAX_DUPLICATE_PAIRS = 5
MAX_MAGIC_NUMBERS = 10
MAGIC_NUMBER_RANGE = range(2, 1000)

MAGIC_NUMBER_PATTERN = re.compile(r"(?<![\w.])\d{2,3}(?![\w.])")
"""Bare integer literals of two or more digits not touching identifiers."""

JS_BINDING_PATTERN = re.compile(r"\b(?:const|let|var)\s+(\w+)\s*=")
METHOD_PATTERN = re.compile(r"def\s+\w+")


@dataclass(frozen=True)
class SmellReport:
    language: Language
    metrics: CodeMetrics
    smells: tuple[Finding, ...]

    @property
    def quality_score(self) -> int:
        return quality_score(self.metrics.complexity, self.smells)


def detect_duplication(code: str) -> list[dict[str, int]]:
    """Return the first five near-duplicate line pairs.

    Line numbers index the filtered list of lines longer than ten characters.
    """

    lines = [
        line
        for line in code.split("\n")
        if len(line.strip()) > DUPLICATE_MIN_LINE_LENGTH
    ]
    duplicates: list[dict[str, int]] = []
    for i, first in enumerate(lines):
        for j in range(i + 1, len(lines)):
            score = similarity(first, lines[j])
            if score > DUPLICATE_SIMILARITY:
                duplicates.append(
                    {
                        "line1": i + 1,
                        "line2": j + 1,
                        "similarity": round_half_up(score * 100),
                    }
                )
                if len(duplicates) == MAX_DUPLICATE_PAIRS:
                    return duplicates
    return duplicates


def find_magic_numbers(code: str) -> list[dict[str, int]]:
    numbers: list[dict[str, int]] = []
    for match in MAGIC_NUMBER_PATTERN.finditer(code):
        value = int(match.group(0))
        if value in MAGIC_NUMBER_RANGE:
            numbers.append({"value": value, "position": match.start()})
            if len(numbers) == MAX_MAGIC_NUMBERS:
                break
    return numbers


def find_dead_code(code: str, language: Language) -> list[dict[str, str]]:
    """Report JS/TS bindings whose name appears exactly once."""

    if not language.is_javascript_family:
        return []
    dead: list[dict[str, str]] = []
    for name in JS_BINDING_PATTERN.findall(code):
        usages = re.findall(rf"\b{re.escape(name)}\b", code)
        if len(usages) == 1:
            dead.append({"type": "unused-variable", "name": name})
    return dead


def find_method_line(code: str) -> int | None:
    match = METHOD_PATTERN.search(code)
    if match is None:
        return None
    return line_number_at(code, match.start())


def detect_smells(code: str, language: Language = Language.UNKNOWN) -> SmellReport:
    metrics = calculate_metrics(code)
    smells: list[Finding] = []

    if metrics.complexity > LONG_METHOD_COMPLEXITY:
        smells.append(
            Finding(
                kind=SmellType.LONG_METHOD.value,
                severity=Severity.MEDIUM,
                message=(
                    f"Method complexity is {metrics.complexity}. "
                    "Consider extracting smaller methods."
                ),
                line=find_method_line(code),
            )
        )

    if metrics.code_lines > LARGE_CLASS_CODE_LINES:
        smells.append(
            Finding(
                kind=SmellType.LARGE_CLASS.value,
                severity=Severity.MEDIUM,
                message=(
                    f"Class has {metrics.code_lines} lines. "
                    "Consider splitting into smaller classes."
                ),
            )
        )

    duplication = detect_duplication(code)
    if duplication:
        smells.append(
            Finding(
                kind=SmellType.DUPLICATION.value,
                severity=Severity.HIGH,
                message=f"Found {len(duplication)} potential code duplications",
                details=tuple(duplication),
            )
        )

    magic_numbers = find_magic_numbers(code)
    if magic_numbers:
        smells.append(
            Finding(
                kind=SmellType.MAGIC_NUMBERS.value,
                severity=Severity.LOW,
                message=(
                    f"Found {len(magic_numbers)} magic numbers. Use named constants."
                ),
                details=tuple(magic_numbers),
            )
        )

    dead_code = find_dead_code(code, language)
    if dead_code:
        smells.append(
            Finding(
                kind=SmellType.DEAD_CODE.value,
                severity=Severity.LOW,
                message=f"Found {len(dead_code)} potential dead code sections",
                details=tuple(dead_code),
            )
        )

    return SmellReport(language=language, metrics=metrics, smells=tuple(smells))


def _suggestion(
    kind: str, priority: str, message: str, example: str
) -> dict[str, str]:
    return {"type": kind, "priority": priority, "message": message, "example": example}


def suggest_method_extraction(code: str) -> list[dict[str, str]]:
    if calculate_metrics(code).complexity <= EXTRACT_METHOD_COMPLEXITY:
        return []
    return [
        _suggestion(
            "extract-method",
            "high",
            "Extract complex logic into smaller, focused methods",
            "Create helper methods for each logical block",
        )
    ]


def suggest_class_extraction(code: str) -> list[dict[str, str]]:
    if calculate_metrics(code).code_lines <= EXTRACT_CLASS_CODE_LINES:
        return []
    return [
        _suggestion(
            "extract-class",
            "medium",
            "Consider extracting related functionality into separate classes",
            "Use service objects or value objects for complex logic",
        )
    ]


def suggest_dry(code: str) -> list[dict[str, str]]:
    if not detect_duplication(code):
        return []
    return [
        _suggestion(
            "eliminate-duplication",
            "high",
            "Extract duplicated code into reusable functions or classes",
            "Create helper methods or utility classes",
        )
    ]


def suggest_refactoring(
    code: str, smell: SmellType | None = None
) -> list[dict[str, str]]:
    """Return refactoring hints, optionally limited to one smell kind.

    ``complexity`` shares the method-extraction hint with ``long-method``.
    """

    suggestions: list[dict[str, str]] = []
    if smell in (None, SmellType.LONG_METHOD, SmellType.COMPLEXITY):
        suggestions.extend(suggest_method_extraction(code))
    if smell in (None, SmellType.LARGE_CLASS):
        suggestions.extend(suggest_class_extraction(code))
    if smell in (None, SmellType.DUPLICATION):
        suggestions.extend(suggest_dry(code))
    return suggestions


def _deferred(note: str) -> dict[str, Any]:
    return {"adhered": True, "issues": [], "note": note}


def check_solid(code: str) -> dict[str, Any]:
    """Judge SOLID adherence; only single responsibility is measured."""

    responsibility_issues: list[str] = []
    if "class" in code or "function" in code:
        if calculate_metrics(code).complexity > LONG_METHOD_COMPLEXITY:
            responsibility_issues.append(
                "Class/function may have multiple responsibilities"
            )

    principles: dict[str, dict[str, Any]] = {
        "singleResponsibility": {
            "adhered": not responsibility_issues,
            "issues": responsibility_issues,
        },
        "openClosed": _deferred(
            "Requires analysis of inheritance and extension patterns"
        ),
        "liskovSubstitution": _deferred("Requires analysis of inheritance hierarchies"),
        "interfaceSegregation": _deferred(
            "Requires analysis of interfaces and dependencies"
        ),
        "dependencyInversion": _deferred(
            "Requires analysis of constructors and injected collaborators"
        ),
    }
    return {"principles": principles, "score": solid_score(principles)}
