"""Run several analysis agents over one input and merge their results.

Agents run one after another. The summary only concatenates issue lists and
averages scores, so it does not depend on the order the agents ran in.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from ..domain.models import Framework, Severity, TestFramework, detect_language
from . import conventions, docs, review, scaffolds, security_scanner, smells
from .agent_config import (
    ANALYSIS_AGENTS,
    BEST_PRACTICES_AGENT,
    CLEAN_CODE_AGENT,
    CODE_REVIEW_AGENT,
    DEFAULT_CONFIG,
    SECURITY_AGENT,
    OrchestrationConfig,
)
from .scoring import mean_score, risk_score

_LOG = logging.getLogger(__name__)

CRITICAL_RECOMMENDATION = "Fix critical issues before merging"
CLEAN_RECOMMENDATION = "Code quality looks good"
CRITICAL_SEVERITIES = frozenset({Severity.CRITICAL.value, Severity.HIGH.value})

AgentRunner = Callable[[str, Optional[str], Framework], dict[str, Any]]


def run_code_review(
    code: str, file_path: str | None, framework: Framework
) -> dict[str, Any]:
    result = review.review_code(code, file_path, framework)
    return {
        "score": result["score"],
        "issues": result["issues"],
        "suggestions": result["suggestions"],
    }


def run_best_practices(
    code: str, file_path: str | None, framework: Framework
) -> dict[str, Any]:
    report = conventions.check_conventions(code, framework)
    return {
        "score": report.score,
        "practices": list(report.practices),
        "violations": [violation.to_mapping() for violation in report.violations],
    }


def run_clean_code(
    code: str, file_path: str | None, framework: Framework
) -> dict[str, Any]:
    report = smells.detect_smells(code, detect_language(file_path))
    return {
        "qualityScore": report.quality_score,
        "smells": [smell.to_mapping() for smell in report.smells],
        "metrics": report.metrics.to_mapping(),
    }


def run_security(
    code: str, file_path: str | None, framework: Framework
) -> dict[str, Any]:
    vulnerabilities = security_scanner.scan(code)
    return {
        "riskScore": risk_score(vulnerabilities),
        "vulnerabilities": [finding.to_mapping() for finding in vulnerabilities],
    }


RUNNERS: dict[str, tuple[str, AgentRunner]] = {
    CODE_REVIEW_AGENT: ("codeReview", run_code_review),
    BEST_PRACTICES_AGENT: ("bestPractices", run_best_practices),
    CLEAN_CODE_AGENT: ("cleanCode", run_clean_code),
    SECURITY_AGENT: ("security", run_security),
}
"""Agent name to (report key, runner)."""

SCORE_FIELDS = (
    ("codeReview", "score"),
    ("bestPractices", "score"),
    ("cleanCode", "qualityScore"),
)
ISSUE_FIELDS = (
    ("codeReview", "issues"),
    ("bestPractices", "violations"),
    ("security", "vulnerabilities"),
    ("cleanCode", "smells"),
)


def summarize(agent_results: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
    """Merge per-agent results into the overall score and issue counts."""

    scores = [
        agent_results[key][field]
        for key, field in SCORE_FIELDS
        if key in agent_results
    ]
    issues = [
        issue
        for key, field in ISSUE_FIELDS
        if key in agent_results
        for issue in agent_results[key][field]
    ]
    critical = sum(1 for issue in issues if issue["severity"] in CRITICAL_SEVERITIES)
    return {
        "overallScore": mean_score(scores),
        "totalIssues": len(issues),
        "criticalIssues": critical,
        "recommendation": (
            CRITICAL_RECOMMENDATION if critical else CLEAN_RECOMMENDATION
        ),
    }


class AgentOrchestrator:
    """Runs the enabled analysis agents in ``order`` and merges the results."""

    def __init__(
        self,
        config: OrchestrationConfig = DEFAULT_CONFIG,
        order: Sequence[str] = ANALYSIS_AGENTS,
    ) -> None:
        unknown = [name for name in order if name not in RUNNERS]
        if unknown:
            raise ValueError(f"Unknown analysis agents: {', '.join(unknown)}")
        self.config = config
        self.order = tuple(order)

    def enabled_agents(self, requested: Sequence[str] | None = None) -> list[str]:
        """Agents that will run; ``requested`` narrows the configured set."""

        return [
            name
            for name in self.order
            if self.config.is_enabled(name)
            and (requested is None or name in requested)
        ]

    def analyze_code(
        self,
        code: str,
        file_path: str | None = None,
        framework: Framework = Framework.RAILS,
        agents: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        results: dict[str, Any] = {}
        for name in self.enabled_agents(agents):
            key, runner = RUNNERS[name]
            _LOG.debug("Running %s on %s", name, file_path or "unknown")
            results[key] = runner(code, file_path, framework)

        return {
            "filePath": file_path or "unknown",
            "framework": framework.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "agents": results,
            "summary": summarize(results),
        }

    def suggest_tests(
        self, code: str, file_path: str | None, framework: Framework
    ) -> dict[str, Any]:
        """Scaffold a test in the framework's usual test runner."""

        test_framework = (
            TestFramework.RSPEC if framework is Framework.RAILS else TestFramework.JEST
        )
        return {
            "framework": test_framework.value,
            "testCode": scaffolds.generate_test(
                code, test_framework, detect_language(file_path)
            ),
            "coverage": scaffolds.coverage_report(test_framework),
        }

    def generate_documentation(
        self, code: str, file_path: str | None
    ) -> dict[str, Any]:
        """Markdown API docs plus the code with inline doc stubs added."""

        language = detect_language(file_path)
        document = docs.build_document(
            docs.extract_units(code, language), file_path, language, "markdown"
        )
        return {
            "apiDocs": docs.render_markdown(document),
            "inlineDocs": docs.add_inline_docs(code, language),
        }
