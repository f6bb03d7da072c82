"""Smoke tests for the MCP server wiring."""

from __future__ import annotations

import json

import pytest
from github_projects_mcp.__main__ import main, parse_args
from github_projects_mcp.server import call_tool, list_resources, list_tools, read_resource


@pytest.fixture(autouse=True)
def _no_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_PAT", raising=False)
    monkeypatch.delenv("GITHUB_PROJECTS_MCP_TIMEOUT_S", raising=False)
    monkeypatch.delenv("GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH", raising=False)


@pytest.mark.asyncio
async def test_server_lists_the_three_tools() -> None:
    tools = await list_tools()
    assert sorted(t.name for t in tools) == ["add_draft_issue", "get_project_details", "list_projects"]


@pytest.mark.asyncio
async def test_server_lists_resources_ok() -> None:
    resources = await list_resources()
    assert len(resources) == 2


@pytest.mark.asyncio
async def test_tools_do_not_emit_secrets_in_metadata() -> None:
    tools = await list_tools()
    as_json = json.dumps([t.model_dump() for t in tools], sort_keys=True)

    assert "ghp_" not in as_json
    assert "github_pat_" not in as_json
    assert "bearer " not in as_json.lower()


@pytest.mark.asyncio
async def test_call_tool_serializes_envelope_as_json_text() -> None:
    content = await call_tool("list_projects", {})

    assert len(content) == 1
    payload = json.loads(content[0].text)
    assert payload["ok"] is False
    assert payload["code"] == "MissingCredential"


@pytest.mark.asyncio
async def test_server_status_reports_token_presence_without_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_PAT", "ghp_supersecret")

    status = json.loads(await read_resource("github-projects-mcp://server-status"))

    assert status["configured"] is True
    assert status["token_configured"] is True
    assert "ghp_supersecret" not in json.dumps(status)


@pytest.mark.asyncio
async def test_capabilities_and_unknown_resource() -> None:
    caps = json.loads(await read_resource("github-projects-mcp://capabilities"))
    assert caps["retries"] is False
    assert caps["page_sizes"]["views"] == 10

    unknown = json.loads(await read_resource("github-projects-mcp://nope"))
    assert unknown["code"] == "NotFound"


def test_cli_test_flag_and_environment_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert parse_args(["--test"]).test is True
    assert parse_args([]).test is False

    with pytest.raises(SystemExit):
        parse_args(["--help"])
    help_text = capsys.readouterr().out
    assert "GITHUB_PAT" in help_text
    assert "GITHUB_OWNER" in help_text
    assert "GITHUB_REPO" in help_text


def test_cli_self_test_lists_tools_without_token(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--test"])

    assert "Self-test OK: 3 tools, 2 resources" in capsys.readouterr().err
