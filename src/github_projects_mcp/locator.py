"""Project resolution: explicit id first, repository-owner lookup second."""

from __future__ import annotations

import logging

from .errors import missing_project_context, project_not_found
from .github_graphql_client import GitHubGraphQLClient
from .normalize import first_repository_project_id
from .queries import build_repository_project_query

logger = logging.getLogger(__name__)


async def resolve_project_id(
    client: GitHubGraphQLClient,
    *,
    explicit: str | None = None,
    owner: str | None = None,
    repo: str | None = None,
) -> str:
    """Resolve a call target to exactly one project id.

    A non-empty explicit id is returned unchanged without any network call; whether it
    exists is discovered by the request that uses it. Otherwise the first Project V2
    linked to `owner/repo` is used.

    Raises:
        SafeError: MissingProjectContext if owner or repo is missing,
            ProjectNotFound if the repository has no linked project.
    """
    if explicit:
        return explicit

    if not owner or not repo:
        raise missing_project_context()

    logger.info("Looking up first project linked to %s/%s", owner, repo)
    query, variables = build_repository_project_query(owner, repo)
    result = await client.execute(query=query, variables=variables)

    project_id = first_repository_project_id(result.data)
    if project_id is None:
        raise project_not_found(owner=owner, repo=repo)
    return project_id
