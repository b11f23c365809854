from __future__ import annotations

import pytest

from mcp_codeagents.domain.models import Language, Severity, SmellType
from mcp_codeagents.services.smells import (
    MAX_MAGIC_NUMBERS,
    check_solid,
    detect_duplication,
    detect_smells,
    find_dead_code,
    find_magic_numbers,
    suggest_refactoring,
)

LONG_METHOD = "def run\n" + "  if ready\n" * 11 + "end"


def _kinds(code: str, language: Language = Language.UNKNOWN) -> list[str]:
    return [smell.kind for smell in detect_smells(code, language).smells]


def test_long_method_reports_complexity_and_method_line() -> None:
    report = detect_smells("# runner\n" + LONG_METHOD, Language.RUBY)

    (smell,) = report.smells
    assert smell.kind == SmellType.LONG_METHOD.value
    assert smell.severity is Severity.MEDIUM
    assert smell.message.startswith("Method complexity is 12.")
    assert smell.line == 2
    assert report.quality_score == 100 - 24 - 10


def test_large_class_over_three_hundred_code_lines() -> None:
    code = "\n".join(f"v{index}" for index in range(301))

    report = detect_smells(code)

    assert _kinds(code) == [SmellType.LARGE_CLASS.value]
    assert report.smells[0].message.startswith("Class has 301 lines.")


def test_three_hundred_lines_is_not_large() -> None:
    code = "\n".join(f"v{index}" for index in range(300))

    assert _kinds(code) == []


def test_duplicate_lines_are_paired_with_similarity_percent() -> None:
    code = "user.save(validate: true)\nuser.save(validate: true)\nshort\n"

    assert detect_duplication(code) == [{"line1": 1, "line2": 2, "similarity": 100}]

    (smell,) = detect_smells(code).smells
    assert smell.severity is Severity.HIGH
    assert smell.to_mapping()["details"] == [
        {"line1": 1, "line2": 2, "similarity": 100}
    ]


def test_duplication_stops_after_five_pairs() -> None:
    code = "\n".join(["account.refresh!(force)"] * 6)

    assert len(detect_duplication(code)) == 5


def test_short_lines_are_never_duplicates() -> None:
    assert detect_duplication("x = 1\nx = 1\nx = 1") == []


def test_magic_numbers_skip_small_large_and_fractional_values() -> None:
    code = "timeout = 30\nretries = 5\nport = 8080\nlimit = 999\nratio = 0.75"

    assert find_magic_numbers(code) == [
        {"value": 30, "position": 10},
        {"value": 999, "position": 45},
    ]


def test_magic_numbers_are_capped() -> None:
    code = " ".join(str(value) for value in range(10, 40))

    numbers = find_magic_numbers(code)

    assert len(numbers) == MAX_MAGIC_NUMBERS
    assert numbers[0]["value"] == 10


def test_identifier_digits_are_not_magic() -> None:
    assert find_magic_numbers("v100 = item_42 + x3000") == []


def test_huge_digit_runs_are_not_magic() -> None:
    code = "x = " + "9" * 5000 + "\ny = 42"

    assert find_magic_numbers(code) == [{"value": 42, "position": 5009}]
    assert SmellType.MAGIC_NUMBERS.value in _kinds(code)


def test_dead_code_only_checked_for_javascript_family() -> None:
    code = "const unused = 1;\nconst used = 2;\nconsole.log(used);"

    assert find_dead_code(code, Language.JAVASCRIPT) == [
        {"type": "unused-variable", "name": "unused"}
    ]
    assert find_dead_code(code, Language.TYPESCRIPT) == [
        {"type": "unused-variable", "name": "unused"}
    ]
    assert find_dead_code(code, Language.RUBY) == []
    assert SmellType.DEAD_CODE.value in _kinds(code, Language.JAVASCRIPT)


def test_penalties_accumulate_per_smell() -> None:
    noisy = (
        LONG_METHOD
        + "\n"
        + "\n".join(["counter = counter + 42"] * 3)
        + "\n"
        + "\n".join(f"v{index}" for index in range(310))
    )

    report = detect_smells(noisy)

    assert [smell.kind for smell in report.smells] == [
        SmellType.LONG_METHOD.value,
        SmellType.LARGE_CLASS.value,
        SmellType.DUPLICATION.value,
        SmellType.MAGIC_NUMBERS.value,
    ]
    assert report.quality_score == 100 - 24 - 10 - 10 - 15 - 5


def test_refactoring_suggestions_follow_the_filter() -> None:
    everything = suggest_refactoring(LONG_METHOD)

    assert [item["type"] for item in everything] == ["extract-method"]
    assert suggest_refactoring(LONG_METHOD, SmellType.COMPLEXITY) == everything
    assert suggest_refactoring(LONG_METHOD, SmellType.LARGE_CLASS) == []
    assert suggest_refactoring(LONG_METHOD, SmellType.DUPLICATION) == []


def test_duplication_and_large_class_suggestions() -> None:
    code = "\n".join(["account.refresh!(force)"] * 2) + "\n" + "\n".join(
        f"v{index}" for index in range(201)
    )

    kinds = [item["type"] for item in suggest_refactoring(code)]

    assert kinds == ["extract-class", "eliminate-duplication"]


@pytest.mark.parametrize(
    "code, score, adhered",
    [
        ("class Widget\nend", 100, True),
        ("class Widget\n" + "if a\n" * 10 + "end", 80, False),
        ("if a\n" * 12, 100, True),
    ],
)
def test_solid_only_measures_single_responsibility(
    code: str, score: int, adhered: bool
) -> None:
    result = check_solid(code)

    assert result["score"] == score
    assert result["principles"]["singleResponsibility"]["adhered"] is adhered
    for name in (
        "openClosed",
        "liskovSubstitution",
        "interfaceSegregation",
        "dependencyInversion",
    ):
        assert result["principles"][name]["adhered"] is True
        assert result["principles"][name]["note"]
