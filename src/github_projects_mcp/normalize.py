"""Map raw GraphQL `data` payloads into flat result records.

Absent collections become empty tuples and absent optional scalars take their
documented defaults; only the conditions below are failures:
- detail payload without a project node -> ProjectNotFound
- draft-issue payload without `projectItem.id` -> DraftIssueCreationFailed
"""

from __future__ import annotations

from typing import Any

from .errors import draft_issue_creation_failed, project_not_found
from .models import (ITEM_TYPE_DRAFT_ISSUE, ITEM_TYPE_ISSUE,
                     ITEM_TYPE_PULL_REQUEST, ITEM_TYPE_REDACTED, DraftIssueResult,
                     ItemContent, Project, ProjectDetails, ProjectField,
                     ProjectItem, ProjectView)

UNKNOWN_DATA_TYPE = "Unknown"


def _dig(obj: object, *keys: str) -> object:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _nodes(connection: object) -> list[dict[str, Any]]:
    nodes = _dig(connection, "nodes")
    if not isinstance(nodes, list):
        return []
    # GitHub returns null entries for nodes the token cannot see.
    return [n for n in nodes if isinstance(n, dict)]


def _opt_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def normalize_projects(data: dict[str, Any]) -> list[Project]:
    """`data.viewer.projectsV2.nodes` -> projects, empty when absent."""
    projects: list[Project] = []
    for node in _nodes(_dig(data, "viewer", "projectsV2")):
        project_id = node.get("id")
        if not isinstance(project_id, str):
            continue
        projects.append(Project(id=project_id, title=_opt_str(node.get("title")) or ""))
    return projects


def first_repository_project_id(data: dict[str, Any]) -> str | None:
    """Return the id of the first Project V2 linked to the looked-up repository."""
    for node in _nodes(_dig(data, "repository", "projectsV2")):
        project_id = node.get("id")
        if isinstance(project_id, str) and project_id:
            return project_id
    return None


def _normalize_field(node: dict[str, Any]) -> ProjectField:
    return ProjectField(
        id=_opt_str(node.get("id")) or "",
        name=_opt_str(node.get("name")) or "",
        data_type=_opt_str(node.get("dataType")) or UNKNOWN_DATA_TYPE,
    )


def _normalize_view(node: dict[str, Any]) -> ProjectView:
    return ProjectView(
        id=_opt_str(node.get("id")) or "",
        name=_opt_str(node.get("name")) or "",
        layout=_opt_str(node.get("layout")),
    )


def _normalize_content(kind: str, content: dict[str, Any]) -> ItemContent | None:
    title = _opt_str(content.get("title"))
    if kind in (ITEM_TYPE_ISSUE, ITEM_TYPE_PULL_REQUEST):
        number = content.get("number")
        return ItemContent(
            title=title,
            number=number if isinstance(number, int) else None,
            repository=_opt_str(_dig(content, "repository", "name")),
        )
    if kind == ITEM_TYPE_DRAFT_ISSUE:
        return ItemContent(title=title)
    return None


def _item_kind(node: dict[str, Any]) -> str:
    content = node.get("content")
    typename = _dig(content, "__typename")
    if typename in (ITEM_TYPE_ISSUE, ITEM_TYPE_PULL_REQUEST, ITEM_TYPE_DRAFT_ISSUE):
        return str(typename)
    return ITEM_TYPE_REDACTED


def _normalize_item(node: dict[str, Any]) -> ProjectItem:
    kind = _item_kind(node)
    content = node.get("content")
    return ProjectItem(
        id=_opt_str(node.get("id")) or "",
        type=kind,
        content=_normalize_content(kind, content) if isinstance(content, dict) else None,
    )


def normalize_project_details(data: dict[str, Any]) -> ProjectDetails:
    """Map `data.node` into ProjectDetails.

    Raises:
        SafeError: ProjectNotFound when the node is null or not a project.
    """
    node = data.get("node")
    if not isinstance(node, dict) or not isinstance(node.get("id"), str):
        raise project_not_found()

    description = node.get("shortDescription", node.get("description"))
    return ProjectDetails(
        id=node["id"],
        title=_opt_str(node.get("title")) or "",
        description=_opt_str(description),
        url=_opt_str(node.get("url")),
        created_at=_opt_str(node.get("createdAt")),
        updated_at=_opt_str(node.get("updatedAt")),
        fields=tuple(_normalize_field(n) for n in _nodes(node.get("fields"))),
        views=tuple(_normalize_view(n) for n in _nodes(node.get("views"))),
        items=tuple(_normalize_item(n) for n in _nodes(node.get("items"))),
    )


def normalize_draft_issue(data: dict[str, Any]) -> DraftIssueResult:
    """Extract `data.addProjectV2DraftIssue.projectItem.id`.

    Raises:
        SafeError: DraftIssueCreationFailed when the item id is missing.
    """
    item_id = _dig(data, "addProjectV2DraftIssue", "projectItem", "id")
    if not isinstance(item_id, str) or not item_id:
        raise draft_issue_creation_failed()
    return DraftIssueResult(item_id=item_id)
