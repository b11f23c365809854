"""MCP stdio entrypoint: one process serves one agent's tools."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import Any, Callable, Sequence

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..agents.base import BaseAgent
from ..agents.best_practices import BestPracticesAgent
from ..agents.clean_code import CleanCodeAgent
from ..agents.code_review import CodeReviewAgent
from ..agents.documentation import DocumentationAgent
from ..agents.orchestrator import OrchestratorAgent
from ..agents.security import SecurityAgent
from ..agents.testing import TestingAgent
from ..services import invocation_audit
from ..services.agent_config import OrchestrationConfigError

_LOG = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

AGENT_REGISTRY: dict[str, Callable[[], BaseAgent]] = {
    SecurityAgent.name: SecurityAgent,
    BestPracticesAgent.name: BestPracticesAgent,
    CleanCodeAgent.name: CleanCodeAgent,
    DocumentationAgent.name: DocumentationAgent,
    TestingAgent.name: TestingAgent,
    CodeReviewAgent.name: CodeReviewAgent,
    OrchestratorAgent.name: OrchestratorAgent,
}
"""Agent name to a factory building a fully registered agent."""


def tool_listing(agent: BaseAgent) -> dict[str, Any]:
    """Return the agent's tools in the wire listing shape."""

    return {"tools": [descriptor.to_mapping() for descriptor in agent.list_tools()]}


def create_server(agent: BaseAgent) -> Server:
    """Wrap ``agent`` in an MCP server whose calls go through ``dispatch``."""

    server: Server = Server(
        agent.name, version=agent.version, instructions=agent.description
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=dict(descriptor.input_schema),
            )
            for descriptor in agent.list_tools()
        ]

    # Arguments are validated by the tool host, not the SDK.
    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        response = await agent.dispatch(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=response.text)],
            isError=response.is_error,
        )

    return server


async def _run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


async def serve(agent: BaseAgent) -> None:
    """Serve ``agent`` over stdio until the client leaves or a signal arrives."""

    server = create_server(agent)
    loop = asyncio.get_running_loop()
    serving = asyncio.ensure_future(_run_stdio(server))

    installed: list[signal.Signals] = []
    for signum in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(signum, serving.cancel)
        except (NotImplementedError, RuntimeError):
            _LOG.debug("Signal handler for %s unavailable", signum.name)
        else:
            installed.append(signum)

    _LOG.info("%s agent initialized with %d tools", agent.name, len(agent.host))
    try:
        await serving
    except asyncio.CancelledError:
        if not serving.cancelled():
            raise
        _LOG.info("%s agent shutting down", agent.name)
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)
        failures = invocation_audit.failure_summary(agent.name)
        if failures:
            _LOG.info("%s tool failures this session: %s", agent.name, failures)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-codeagents",
        description="Serve one code analysis agent over MCP stdio.",
    )
    parser.add_argument("agent", choices=sorted(AGENT_REGISTRY), help="Agent to run")
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the agent's tool listing as JSON and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr diagnostics",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, stream=sys.stderr, format=LOG_FORMAT)

    try:
        agent = AGENT_REGISTRY[args.agent]()
    except OrchestrationConfigError as exc:
        _LOG.error("Unable to start %s: %s", args.agent, exc)
        return 2

    if args.list:
        sys.stdout.write(json.dumps(tool_listing(agent), indent=2))
        sys.stdout.write("\n")
        return 0

    asyncio.run(serve(agent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
