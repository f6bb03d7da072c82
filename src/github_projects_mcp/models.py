"""Flat result records for the project operations.

Every record is built fresh from a GraphQL response and discarded after the
operation returns; nothing here is cached or persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Item kinds, taken from the `__typename` of the item's content.
ITEM_TYPE_ISSUE = "Issue"
ITEM_TYPE_PULL_REQUEST = "PullRequest"
ITEM_TYPE_DRAFT_ISSUE = "DraftIssue"
ITEM_TYPE_REDACTED = "RedactedItem"


@dataclass(frozen=True, slots=True)
class Project:
    id: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title}


@dataclass(frozen=True, slots=True)
class ProjectField:
    """A project column definition.

    For iteration and single-select fields `data_type` is the field's GraphQL type
    name (e.g. "ProjectV2IterationField") rather than a scalar data type.
    """

    id: str
    name: str
    data_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "dataType": self.data_type}


@dataclass(frozen=True, slots=True)
class ProjectView:
    id: str
    name: str
    layout: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "layout": self.layout}


@dataclass(frozen=True, slots=True)
class ItemContent:
    """Readable fields of the issue, pull request or draft issue behind an item."""

    title: str | None = None
    number: int | None = None
    repository: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.title is not None:
            out["title"] = self.title
        if self.number is not None:
            out["number"] = self.number
        if self.repository is not None:
            out["repository"] = self.repository
        return out


@dataclass(frozen=True, slots=True)
class ProjectItem:
    id: str
    type: str
    content: ItemContent | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "type": self.type}
        if self.content is not None:
            out["content"] = self.content.to_dict()
        return out


@dataclass(frozen=True, slots=True)
class ProjectDetails:
    id: str
    title: str
    description: str | None
    url: str | None
    created_at: str | None
    updated_at: str | None
    fields: tuple[ProjectField, ...] = field(default_factory=tuple)
    views: tuple[ProjectView, ...] = field(default_factory=tuple)
    items: tuple[ProjectItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "fields": [f.to_dict() for f in self.fields],
            "views": [v.to_dict() for v in self.views],
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True, slots=True)
class DraftIssueRequest:
    title: str
    body: str
    project_id: str | None = None


@dataclass(frozen=True, slots=True)
class DraftIssueResult:
    item_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"itemId": self.item_id}
