"""MCP server wiring for github-projects-mcp.

Routes named tool calls to `tools.dispatch_tool` and serializes each envelope as a
single JSON TextContent. stdout belongs to the stdio transport; logs go to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.types import Resource, TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .config import load_config_from_env
from .errors import SafeError, internal_error
from .tools import TOOL_METADATA, dispatch_tool

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "github-projects-mcp"
_CAPABILITIES_URI = "github-projects-mcp://capabilities"
_STATUS_URI = "github-projects-mcp://server-status"

server = Server(SERVER_NAME)


def _resources() -> list[Resource]:
    return [
        Resource(
            uri=_STATUS_URI,
            name="Server Status",
            description="Non-secret configuration status (token present, repository context)",
        ),
        Resource(
            uri=_CAPABILITIES_URI,
            name="Capabilities",
            description="Available project operations and their page sizes",
        ),
    ]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    tools = [
        Tool(name=name, description=meta["description"], inputSchema=meta["inputSchema"])
        for name, meta in TOOL_METADATA.items()
    ]
    logger.info("Listed %s tools", len(tools))
    return tools


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return MCP-compliant TextContent."""
    if not isinstance(arguments, dict):
        arguments = {}

    logger.info("Tool called: %s", name)

    try:
        raw_result = await dispatch_tool(name, arguments)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.error("Tool %s failed: %s", name, exc)
        raw_result = internal_error("Tool execution failed")
    return [TextContent(type="text", text=json.dumps(raw_result, indent=2, default=str))]


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return _resources()


def _status() -> dict[str, Any]:
    status: dict[str, Any] = {
        "server": SERVER_NAME,
        "version": __version__,
        "tools_available": len(TOOL_METADATA),
        "tool_names": sorted(TOOL_METADATA.keys()),
    }
    try:
        config = load_config_from_env()
    except SafeError as err:
        status["configured"] = False
        status["config_error"] = err.message
        return status

    status["configured"] = True
    status["token_configured"] = bool(config.token)
    status["repository_context_configured"] = config.has_repo_context
    status["limits"] = {
        "timeout_s": config.limits.timeout_s,
        "draft_title_max_bytes": config.limits.draft_title_max_bytes,
        "draft_body_max_bytes": config.limits.draft_body_max_bytes,
    }
    status["audit"] = {"file_sink_enabled": config.audit_log_path is not None}
    return status


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)

    if uri_s == _CAPABILITIES_URI:
        caps = {
            "server": SERVER_NAME,
            "version": __version__,
            "operations": sorted(TOOL_METADATA.keys()),
            "page_sizes": {"projects": 20, "fields": 20, "views": 10, "items": 20},
            "retries": False,
            "github_api_host_allowlist": ["https://api.github.com"],
        }
        return json.dumps(caps, indent=2)

    if uri_s == _STATUS_URI:
        return json.dumps(_status(), indent=2)

    return json.dumps({"ok": False, "code": "NotFound", "message": "Unknown resource"}, indent=2)


async def run_server() -> None:
    """Run the server over stdio."""
    try:
        config = load_config_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise
    if not config.token:
        logger.warning("GITHUB_PAT is not set; every tool call will report MissingCredential")

    from mcp.server.stdio import stdio_server

    logger.info("GitHub Projects MCP server running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test: tool and resource listing must work without configuration."""
    tools = await list_tools()
    resources = await list_resources()
    print(f"Self-test OK: {len(tools)} tools, {len(resources)} resources", file=sys.stderr)
