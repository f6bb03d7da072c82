"""Project operations: list projects, fetch project details, add a draft issue.

Each operation runs one linear pipeline:

    resolve credential -> resolve project (details/draft only) -> build query
    -> execute -> normalize

and always returns an envelope. Failures at any stage become a tagged error
envelope (`{"ok": False, "code": ..., "message": ...}`); nothing raises past
this module.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from .config import AppConfig
from .credentials import resolve_token
from .errors import SafeError, safe_error_to_result, unknown_failure
from .formatting import format_draft_issue, format_project_details, format_projects
from .github_graphql_client import GitHubGraphQLClient
from .locator import resolve_project_id
from .models import DraftIssueRequest
from .normalize import normalize_draft_issue, normalize_project_details, normalize_projects
from .queries import build_add_draft_issue_mutation, build_list_projects_query, build_project_details_query
from .safety import enforce_max_bytes, redact_text

logger = logging.getLogger(__name__)

LIST_PROJECTS_FAILURE = "Failed to fetch projects"
PROJECT_DETAILS_FAILURE = "Failed to fetch project details"
ADD_DRAFT_ISSUE_FAILURE = "Failed to add draft issue"


def _client(config: AppConfig, transport: httpx.AsyncBaseTransport | None) -> GitHubGraphQLClient:
    # The credential is resolved before any client exists, so a missing token
    # never reaches the network.
    token = resolve_token(config)
    return GitHubGraphQLClient(token=token, limits=config.limits, transport=transport)


async def _guarded(
    operation: str,
    failure_prefix: str,
    step: Callable[[], Awaitable[dict[str, Any]]],
) -> dict[str, Any]:
    try:
        result = await step()
    except SafeError as err:
        logger.error("%s failed: %s (%s)", operation, err.message, err.code)
        return safe_error_to_result(err, prefix=failure_prefix)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("%s failed unexpectedly", operation)
        return safe_error_to_result(unknown_failure(redact_text(str(exc)) or type(exc).__name__), prefix=failure_prefix)

    out: dict[str, Any] = {"ok": True}
    out.update(result)
    return out


async def list_projects(config: AppConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> dict[str, Any]:
    """List the first page of Projects V2 owned by the token's viewer."""

    async def step() -> dict[str, Any]:
        client = _client(config, transport)
        logger.info("Fetching GitHub Projects...")
        query, variables = build_list_projects_query()
        result = await client.execute(query=query, variables=variables)
        projects = normalize_projects(result.data)
        logger.info("Fetched %d projects.", len(projects))
        return {
            "projects": [p.to_dict() for p in projects],
            "summary": format_projects(projects),
        }

    return await _guarded("list_projects", LIST_PROJECTS_FAILURE, step)


async def get_project_details(
    config: AppConfig,
    *,
    project_id: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Fetch one project's metadata plus its first page of fields, views and items.

    Without `project_id` the project is the first one linked to the configured
    owner/repository.
    """

    async def step() -> dict[str, Any]:
        client = _client(config, transport)
        resolved = await resolve_project_id(client, explicit=project_id, owner=config.owner, repo=config.repo)
        logger.info("Fetching details for project ID: %s...", resolved)
        query, variables = build_project_details_query(resolved)
        result = await client.execute(query=query, variables=variables)
        details = normalize_project_details(result.data)
        logger.info("Successfully fetched details for project: %s", details.title)
        return {"project": details.to_dict(), "summary": format_project_details(details)}

    return await _guarded("get_project_details", PROJECT_DETAILS_FAILURE, step)


async def add_draft_issue(
    config: AppConfig,
    request: DraftIssueRequest,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Create a draft issue in the requested (or repository-linked) project."""

    async def step() -> dict[str, Any]:
        client = _client(config, transport)
        if not request.title:
            raise SafeError(code="UserInput", message="Field 'title' is required")
        enforce_max_bytes(
            data=request.title.encode("utf-8"),
            max_bytes=config.limits.draft_title_max_bytes,
            what="Draft issue title",
        )
        enforce_max_bytes(
            data=request.body.encode("utf-8"),
            max_bytes=config.limits.draft_body_max_bytes,
            what="Draft issue body",
        )

        resolved = await resolve_project_id(
            client,
            explicit=request.project_id,
            owner=config.owner,
            repo=config.repo,
        )
        logger.info("Adding draft issue to project ID: %s", resolved)
        query, variables = build_add_draft_issue_mutation(resolved, request.title, request.body)
        result = await client.execute(query=query, variables=variables)
        created = normalize_draft_issue(result.data)
        logger.info("Created draft issue item: %s", created.item_id)
        return {"item": created.to_dict(), "summary": format_draft_issue(created)}

    return await _guarded("add_draft_issue", ADD_DRAFT_ISSUE_FAILURE, step)
