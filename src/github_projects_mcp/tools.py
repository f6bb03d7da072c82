"""Tool registry and dispatch layer.

This module:
- defines the three project tools (public contract surface)
- loads host configuration for every call and injects it into the operation
- creates a correlation_id per call and writes one audit event for it
- performs argument and secret checks before executing any operation
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from .audit import AuditLogger, build_event, new_correlation_id
from .config import AppConfig, load_config_from_env
from .errors import SafeError, internal_error, safe_error_to_result
from .models import DraftIssueRequest
from .projects import add_draft_issue, get_project_details, list_projects
from .safety import validate_no_secrets

TOOL_METADATA: dict[str, dict[str, Any]] = {
    "list_projects": {
        "description": "List your GitHub Projects (Projects v2), first 20.",
        "inputSchema": {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        },
    },
    "get_project_details": {
        "description": (
            "Get a GitHub Project (Projects v2) with its fields, views and items. "
            "Without project_id, uses the first project linked to the configured repository."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "project_id": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
    },
    "add_draft_issue": {
        "description": (
            "Create a draft issue in a GitHub Project (Projects v2). "
            "Without project_id, uses the first project linked to the configured repository."
        ),
        "inputSchema": {
            "type": "object",
            "required": ["title", "body"],
            "properties": {
                "title": {"type": "string", "minLength": 1},
                "body": {"type": "string"},
                "project_id": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
    },
}

# Outcomes recorded as "denied" rather than "failed" in the audit log.
_DENIED_CODES = frozenset({"UserInput", "Config", "MissingCredential", "MissingProjectContext"})

# Prose arguments; credential-looking words in them are ordinary text.
_FREE_TEXT_FIELDS = frozenset({"title", "body"})

ToolFunc = Callable[[AppConfig, dict[str, Any]], Awaitable[dict[str, Any]]]


def validate_tool_arguments(tool_name: str, arguments: dict[str, Any]) -> None:
    """Validate tool arguments against the tool's declared input schema.

    Enforces required fields, no extra properties, string types and minLength.
    It does NOT implement full JSON Schema.
    """
    if tool_name not in TOOL_METADATA:
        raise SafeError(code="UserInput", message="Unknown tool")

    schema = TOOL_METADATA[tool_name]["inputSchema"]
    props: dict[str, Any] = schema.get("properties", {})

    for k in schema.get("required", []):
        if k not in arguments:
            raise SafeError(code="UserInput", message=f"Missing required field: {k}")

    if schema.get("additionalProperties", True) is False:
        extras = [k for k in arguments if k not in props]
        if extras:
            raise SafeError(code="UserInput", message="Unexpected fields are not allowed")

    for k, spec in props.items():
        if k not in arguments:
            continue
        v = arguments[k]
        if spec.get("type") == "string":
            if not isinstance(v, str):
                raise SafeError(code="UserInput", message=f"Field '{k}' must be a string")
            min_len = spec.get("minLength")
            if isinstance(min_len, int) and len(v) < min_len:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be at least {min_len} characters")


async def _tool_list_projects(config: AppConfig, _arguments: dict[str, Any]) -> dict[str, Any]:
    return await list_projects(config)


async def _tool_get_project_details(config: AppConfig, arguments: dict[str, Any]) -> dict[str, Any]:
    return await get_project_details(config, project_id=arguments.get("project_id"))


async def _tool_add_draft_issue(config: AppConfig, arguments: dict[str, Any]) -> dict[str, Any]:
    request = DraftIssueRequest(
        title=arguments["title"],
        body=arguments["body"],
        project_id=arguments.get("project_id"),
    )
    return await add_draft_issue(config, request)


_TOOL_FUNCS: dict[str, ToolFunc] = {
    "list_projects": _tool_list_projects,
    "get_project_details": _tool_get_project_details,
    "add_draft_issue": _tool_add_draft_issue,
}


def _target_from_args(name: str, arguments: dict[str, Any], config: AppConfig | None) -> str:
    project_id = arguments.get("project_id")
    if isinstance(project_id, str) and project_id:
        return project_id
    if name == "list_projects":
        return "viewer"
    if config is not None and config.has_repo_context:
        return f"{config.owner}/{config.repo}"
    return "<unknown>"


async def dispatch_tool(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a tool call.

    Always returns an envelope that includes correlation_id.
    """
    correlation_id = new_correlation_id()
    config: AppConfig | None = None
    audit = AuditLogger()
    start = audit.measure_start()

    try:
        config = load_config_from_env()
        audit = AuditLogger(sink_path=config.audit_log_path)

        validate_no_secrets(arguments, free_text_fields=_FREE_TEXT_FIELDS)
        func = _TOOL_FUNCS.get(name)
        if func is None:
            raise SafeError(
                code="UserInput",
                message=f"Unknown tool: {name}",
                hint=f"Available tools: {', '.join(sorted(TOOL_METADATA.keys()))}",
            )
        validate_tool_arguments(name, arguments)

        result = await func(config, arguments)
    except SafeError as err:
        result = safe_error_to_result(err)
    except Exception:  # pylint: disable=broad-exception-caught  # pragma: no cover
        result = internal_error("Internal error")

    if result.get("ok"):
        outcome, reason = "succeeded", None
    else:
        outcome = "denied" if result.get("code") in _DENIED_CODES else "failed"
        reason = result.get("message")

    audit.write_event(
        build_event(
            correlation_id=correlation_id,
            operation=name,
            target=_target_from_args(name, arguments, config),
            outcome=outcome,
            reason=reason,
            duration_ms=audit.measure_duration_ms(start),
        )
    )

    out: dict[str, Any] = {"correlation_id": correlation_id}
    out.update(result)
    return out
