"""LOCAL-only CLI to run the orchestrated analysis on one file, no MCP transport."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT.parent / "src"))

FRAMEWORKS = ("rails", "react-native", "graphql")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run every enabled analysis agent over a local source file.",
    )
    parser.add_argument(
        "source_path",
        type=Path,
        help="Path to the source file to analyze.",
    )
    parser.add_argument(
        "--framework",
        choices=FRAMEWORKS,
        default="rails",
        help="Framework context for convention checks.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Orchestration config JSON; defaults to $CODEAGENTS_CONFIG.",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Print the per-agent results as well as the summary.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    code = args.source_path.read_text(encoding="utf-8")

    from mcp_codeagents.domain.models import Framework
    from mcp_codeagents.services.agent_config import (
        OrchestrationConfigError,
        load_orchestration_config,
    )
    from mcp_codeagents.services.orchestrator import AgentOrchestrator

    try:
        config = load_orchestration_config(args.config)
    except OrchestrationConfigError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2

    report = AgentOrchestrator(config).analyze_code(
        code, args.source_path.name, Framework(args.framework)
    )
    output = report if args.full else {
        "filePath": report["filePath"],
        "agents": sorted(report["agents"]),
        "summary": report["summary"],
    }
    sys.stdout.write(json.dumps(output, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
