"""Markdown summaries of operation results for agent display."""

from __future__ import annotations

from datetime import datetime, timezone

from .models import DraftIssueResult, Project, ProjectDetails, ProjectItem


def _format_timestamp(value: str | None) -> str:
    if not value:
        return "unknown"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def format_projects(projects: list[Project]) -> str:
    if not projects:
        return "No GitHub Projects V2 found."
    lines = ["Your GitHub Projects:"]
    lines.extend(f"- {p.title} (ID: {p.id})" for p in projects)
    return "\n".join(lines)


def _format_item(item: ProjectItem) -> str:
    content = item.content
    if content is not None and content.title:
        if content.number and content.repository:
            return f"- {content.title} ({content.repository}#{content.number})"
        return f"- {content.title}"
    return f"- {item.type} (ID: {item.id})"


def format_project_details(details: ProjectDetails) -> str:
    """Render project details as a markdown document with Fields/Views/Items sections."""
    lines = [f"# {details.title}", ""]
    if details.description:
        lines += [f"**Description:** {details.description}", ""]
    lines += [
        f"**URL:** {details.url or 'unknown'}",
        f"**Created:** {_format_timestamp(details.created_at)}",
        f"**Updated:** {_format_timestamp(details.updated_at)}",
        "",
        f"## Fields ({len(details.fields)})",
    ]
    if details.fields:
        lines.extend(f"- {f.name} ({f.data_type})" for f in details.fields)
    else:
        lines.append("No fields defined")

    lines += ["", f"## Views ({len(details.views)})"]
    if details.views:
        lines.extend(f"- {v.name} ({v.layout or 'unknown'})" for v in details.views)
    else:
        lines.append("No views defined")

    lines += ["", f"## Items ({len(details.items)})"]
    if details.items:
        lines.extend(_format_item(i) for i in details.items)
    else:
        lines.append("No items in this project")
    return "\n".join(lines)


def format_draft_issue(result: DraftIssueResult) -> str:
    return f"Draft issue created (item ID: {result.item_id})"
