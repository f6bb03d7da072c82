"""Fixed GraphQL documents for the project operations.

Builders are pure: they return `(query, variables)` and perform no I/O.
"""

from __future__ import annotations

from typing import Any

PROJECTS_PAGE_SIZE = 20
FIELDS_PAGE_SIZE = 20
VIEWS_PAGE_SIZE = 10
ITEMS_PAGE_SIZE = 20

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def graphql_string(value: str) -> str:
    """Return `value` as a double-quoted GraphQL string literal.

    Backslash is escaped before anything else; remaining control characters
    become `\\uXXXX` escapes.
    """
    out: list[str] = []
    for ch in value:
        escaped = _SIMPLE_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


_QUERY_LIST_VIEWER_PROJECTS = f"""
query {{
  viewer {{
    projectsV2(first: {PROJECTS_PAGE_SIZE}) {{
      nodes {{
        id
        title
      }}
    }}
  }}
}}
""".strip()


_QUERY_REPOSITORY_FIRST_PROJECT = """
query($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    projectsV2(first: 1) {
      nodes {
        id
        title
      }
    }
  }
}
""".strip()


_QUERY_PROJECT_DETAILS = f"""
query($id: ID!) {{
  node(id: $id) {{
    ... on ProjectV2 {{
      id
      title
      shortDescription
      url
      createdAt
      updatedAt
      fields(first: {FIELDS_PAGE_SIZE}) {{
        nodes {{
          ... on ProjectV2Field {{
            id
            name
            dataType
          }}
          ... on ProjectV2IterationField {{
            id
            name
            dataType: __typename
          }}
          ... on ProjectV2SingleSelectField {{
            id
            name
            dataType: __typename
          }}
        }}
      }}
      views(first: {VIEWS_PAGE_SIZE}) {{
        nodes {{
          id
          name
          layout
        }}
      }}
      items(first: {ITEMS_PAGE_SIZE}) {{
        nodes {{
          id
          content {{
            __typename
            ... on Issue {{
              title
              number
              repository {{
                name
              }}
            }}
            ... on PullRequest {{
              title
              number
              repository {{
                name
              }}
            }}
            ... on DraftIssue {{
              title
            }}
          }}
        }}
      }}
    }}
  }}
}}
""".strip()


def build_list_projects_query() -> tuple[str, dict[str, Any] | None]:
    return _QUERY_LIST_VIEWER_PROJECTS, None


def build_repository_project_query(owner: str, repo: str) -> tuple[str, dict[str, Any]]:
    return _QUERY_REPOSITORY_FIRST_PROJECT, {"owner": owner, "repo": repo}


def build_project_details_query(project_id: str) -> tuple[str, dict[str, Any]]:
    return _QUERY_PROJECT_DETAILS, {"id": project_id}


def build_add_draft_issue_mutation(project_id: str, title: str, body: str) -> tuple[str, dict[str, Any] | None]:
    """Build the draft-issue mutation with every argument embedded as an escaped literal."""
    mutation = f"""
mutation {{
  addProjectV2DraftIssue(input: {{
    projectId: {graphql_string(project_id)},
    title: {graphql_string(title)},
    body: {graphql_string(body)}
  }}) {{
    projectItem {{
      id
    }}
  }}
}}
""".strip()
    return mutation, None
