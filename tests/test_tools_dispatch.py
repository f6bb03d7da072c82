"""Tool dispatch tests: argument validation, config injection, audit events."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import github_projects_mcp.projects as projects
import github_projects_mcp.tools as tools
import httpx
import pytest
from github_projects_mcp.config import AppConfig
from github_projects_mcp.errors import SafeError
from github_projects_mcp.models import DraftIssueRequest
from github_projects_mcp.tools import TOOL_METADATA, dispatch_tool, validate_tool_arguments


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GITHUB_PAT", "GITHUB_OWNER", "GITHUB_REPO", "GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH", "GITHUB_PROJECTS_MCP_TIMEOUT_S"):
        monkeypatch.delenv(name, raising=False)


def test_all_tools_have_additional_properties_false() -> None:
    for meta in TOOL_METADATA.values():
        assert meta["inputSchema"].get("additionalProperties") is False


def test_tool_names() -> None:
    assert set(TOOL_METADATA) == {"list_projects", "get_project_details", "add_draft_issue"}


@pytest.mark.parametrize(
    "tool_name,args",
    [
        ("list_projects", {"extra": 1}),
        ("get_project_details", {"project_id": "P1", "owner": "octo"}),
        ("add_draft_issue", {"title": "t", "body": "b", "labels": []}),
    ],
)
def test_rejects_extra_fields(tool_name: str, args: dict) -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments(tool_name, args)
    assert "Unexpected fields" in exc.value.message


def test_add_draft_issue_requires_title_and_body() -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("add_draft_issue", {"title": "t"})
    assert exc.value.message == "Missing required field: body"


@pytest.mark.parametrize(
    "args,message",
    [
        ({"title": "", "body": "b"}, "Field 'title' must be at least 1 characters"),
        ({"title": 3, "body": "b"}, "Field 'title' must be a string"),
        ({"title": "t", "body": "b", "project_id": ""}, "Field 'project_id' must be at least 1 characters"),
    ],
)
def test_add_draft_issue_type_checks(args: dict, message: str) -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("add_draft_issue", args)
    assert exc.value.message == message


def test_empty_body_is_allowed() -> None:
    validate_tool_arguments("add_draft_issue", {"title": "t", "body": ""})


@pytest.mark.asyncio
async def test_unknown_tool_returns_user_input_envelope() -> None:
    out = await dispatch_tool("delete_project", {})

    assert out["ok"] is False
    assert out["code"] == "UserInput"
    assert "list_projects" in out["hint"]
    assert len(out["correlation_id"]) == 32


@pytest.mark.asyncio
async def test_secret_like_argument_is_rejected_without_echo() -> None:
    token = "ghp_1234567890abcdef"
    out = await dispatch_tool("add_draft_issue", {"title": "t", "body": "b", "project_id": token})

    assert out["code"] == "UserInput"
    assert token not in json.dumps(out)


@pytest.mark.asyncio
async def test_credential_field_name_is_rejected_even_for_draft_issue() -> None:
    out = await dispatch_tool("add_draft_issue", {"title": "t", "body": "b", "token": "x"})

    assert out["code"] == "UserInput"
    assert out["message"] == "Credential-like fields are not allowed"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "title,body",
    [
        ("Bearer tokens are not refreshed", "desc"),
        ("Retry bug", "bearer auth header missing on retry"),
        ("ghp_ prefixed tokens leak into logs", "desc"),
    ],
)
async def test_draft_issue_prose_mentioning_tokens_is_created(
    monkeypatch: pytest.MonkeyPatch, title: str, body: str
) -> None:
    monkeypatch.setenv("GITHUB_PAT", "tok")
    sent: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content)["query"])
        return httpx.Response(200, json={"data": {"addProjectV2DraftIssue": {"projectItem": {"id": "I9"}}}})

    async def add_with_mock_transport(config: AppConfig, request: DraftIssueRequest) -> dict[str, Any]:
        return await projects.add_draft_issue(config, request, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(tools, "add_draft_issue", add_with_mock_transport)

    out = await dispatch_tool("add_draft_issue", {"title": title, "body": body, "project_id": "P1"})

    assert out["ok"] is True
    assert out["item"] == {"itemId": "I9"}
    assert len(sent) == 1
    assert title in sent[0]


@pytest.mark.asyncio
async def test_missing_token_is_reported_per_call(capsys: pytest.CaptureFixture[str]) -> None:
    out = await dispatch_tool("list_projects", {})

    assert out["ok"] is False
    assert out["code"] == "MissingCredential"

    event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert event["operation"] == "list_projects"
    assert event["target"] == "viewer"
    assert event["outcome"] == "denied"


@pytest.mark.asyncio
async def test_dispatch_injects_env_config_and_arguments(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    sink = tmp_path / "audit.jsonl"
    monkeypatch.setenv("GITHUB_PAT", "tok")
    monkeypatch.setenv("GITHUB_OWNER", "octo")
    monkeypatch.setenv("GITHUB_REPO", "repo")
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH", str(sink))

    seen: dict[str, Any] = {}

    async def fake_add_draft_issue(config: AppConfig, request: DraftIssueRequest) -> dict[str, Any]:
        seen["config"] = config
        seen["request"] = request
        return {"ok": True, "item": {"itemId": "I9"}, "summary": "Draft issue created (item ID: I9)"}

    monkeypatch.setattr(tools, "add_draft_issue", fake_add_draft_issue)

    out = await dispatch_tool("add_draft_issue", {"title": "Bug", "body": "desc"})

    assert out["ok"] is True
    assert out["item"] == {"itemId": "I9"}
    assert seen["config"].token == "tok"
    assert seen["config"].owner == "octo"
    assert seen["request"] == DraftIssueRequest(title="Bug", body="desc", project_id=None)

    lines = sink.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["outcome"] == "succeeded"
    assert event["target"] == "octo/repo"
    assert event["correlation_id"] == out["correlation_id"]
    assert "tok" not in lines[0]


@pytest.mark.asyncio
async def test_dispatch_records_failed_outcome(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("GITHUB_PAT", "tok")

    async def fake_get_project_details(_config: AppConfig, *, project_id: str | None = None) -> dict[str, Any]:
        return {"ok": False, "code": "ProjectNotFound", "message": f"Failed to fetch project details: {project_id}"}

    monkeypatch.setattr(tools, "get_project_details", fake_get_project_details)

    out = await dispatch_tool("get_project_details", {"project_id": "PVT_x"})

    assert out["code"] == "ProjectNotFound"
    event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert event["target"] == "PVT_x"
    assert event["outcome"] == "failed"
    assert event["reason"] == "Failed to fetch project details: PVT_x"


@pytest.mark.asyncio
async def test_invalid_config_is_reported_as_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_TIMEOUT_S", "soon")

    out = await dispatch_tool("list_projects", {})

    assert out["ok"] is False
    assert out["code"] == "Config"
