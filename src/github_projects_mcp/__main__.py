#!/usr/bin/env python3
"""Stdio entry point for the GitHub Projects V2 MCP server.

Serves three tools: list_projects, get_project_details and add_draft_issue.
Credentials and repository context come from the host environment, never from
tool arguments:

  GITHUB_PAT      token sent as the bearer credential (required per call)
  GITHUB_OWNER    repository owner used when no project_id is given
  GITHUB_REPO     repository name used when no project_id is given

Run:
  python -m github_projects_mcp          # serve over stdio
  python -m github_projects_mcp --test   # list tools and resources, then exit
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from github_projects_mcp.config import (ENV_AUDIT_LOG_PATH, ENV_OWNER,
                                        ENV_REPO, ENV_TIMEOUT_S, ENV_TOKEN)
from github_projects_mcp.server import run_server, test_server

_ENV_HELP = (
    "environment:\n"
    f"  {ENV_TOKEN:<36} GitHub token (required for every tool call)\n"
    f"  {ENV_OWNER:<36} repository owner for project lookup\n"
    f"  {ENV_REPO:<36} repository name for project lookup\n"
    f"  {ENV_AUDIT_LOG_PATH:<36} absolute path of an extra JSONL audit log\n"
    f"  {ENV_TIMEOUT_S:<36} GitHub request timeout in seconds"
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="github-projects-mcp",
        description="MCP server for GitHub Projects V2 (list projects, inspect a project, add draft issues).",
        epilog=_ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="List the project tools and resources without contacting GitHub, then exit.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    runner = test_server if args.test else run_server
    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        print("\ngithub-projects-mcp stopped", file=sys.stderr)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        print(f"github-projects-mcp failed: {type(exc).__name__}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
