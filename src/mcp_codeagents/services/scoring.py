"""Score derivations shared by agents and the orchestrator.

Scores are derived on demand from the findings of a single invocation and are
never stored.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from ..domain.models import Finding, Severity

MAX_SCORE = 100

SMELL_PENALTIES = {
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}
"""Quality-score penalty per smell severity; other severities cost nothing."""

REVIEW_PENALTIES = {
    Severity.CRITICAL: 20,
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
    Severity.INFO: 1,
}

COMPLEXITY_PENALTY_CAP = 30
VIOLATION_PENALTY = 10
STYLE_PENALTY = 5
SOLID_POINTS = 20


def risk_score(findings: Iterable[Finding]) -> int:
    """Sum the severity weights of ``findings``, capped at 100."""

    return min(MAX_SCORE, sum(finding.severity.weight for finding in findings))


def violation_score(violation_count: int) -> int:
    return max(0, MAX_SCORE - VIOLATION_PENALTY * violation_count)


def style_score(violation_count: int) -> int:
    if violation_count == 0:
        return MAX_SCORE
    return max(0, MAX_SCORE - STYLE_PENALTY * violation_count)


def quality_score(complexity: int, smells: Iterable[Finding]) -> int:
    """Start at 100, subtract complexity and smell penalties, floor at 0."""

    score = MAX_SCORE - min(complexity * 2, COMPLEXITY_PENALTY_CAP)
    for smell in smells:
        score -= SMELL_PENALTIES.get(smell.severity, 0)
    return max(0, score)


def review_score(issues: Iterable[Finding]) -> int:
    score = MAX_SCORE
    for issue in issues:
        score -= REVIEW_PENALTIES[issue.severity]
    return max(0, score)


def solid_score(principles: Mapping[str, Mapping[str, object]]) -> int:
    """Award 20 points per adhered SOLID principle."""

    return SOLID_POINTS * sum(
        1 for principle in principles.values() if principle.get("adhered")
    )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative averages we produce."""

    return int(math.floor(value + 0.5))


def mean_score(scores: Iterable[int]) -> int:
    """Round-half-up mean of ``scores``; 0 when there are none."""

    collected = list(scores)
    if not collected:
        return 0
    return round_half_up(sum(collected) / len(collected))
