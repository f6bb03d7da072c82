"""Safe error types and serialization helpers.

Every failure inside the project layer is a SafeError carrying one of the codes
below. Errors returned to agents must be non-secret and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

MISSING_CREDENTIAL = "MissingCredential"
MISSING_PROJECT_CONTEXT = "MissingProjectContext"
PROJECT_NOT_FOUND = "ProjectNotFound"
API_REQUEST_FAILED = "ApiRequestFailed"
GRAPHQL_ERROR = "GraphQlError"
DRAFT_ISSUE_CREATION_FAILED = "DraftIssueCreationFailed"
UNKNOWN_FAILURE = "UnknownFailure"

# Response bodies quoted back in hints are capped.
_MAX_BODY_HINT_CHARS = 2048


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An error safe to expose to agents.

    This must never include the access token.
    """

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


def missing_credential() -> SafeError:
    return SafeError(
        code=MISSING_CREDENTIAL,
        message="GitHub token not found in environment variables",
        hint="Set GITHUB_PAT in the MCP client 'env' configuration",
    )


def missing_project_context() -> SafeError:
    return SafeError(
        code=MISSING_PROJECT_CONTEXT,
        message="No project ID given and GITHUB_OWNER/GITHUB_REPO are not both configured",
        hint="Pass project_id or set GITHUB_OWNER and GITHUB_REPO",
    )


def project_not_found(*, owner: str | None = None, repo: str | None = None) -> SafeError:
    """Return a ProjectNotFound error, naming the repository when the lookup was repo-scoped."""
    if owner and repo:
        return SafeError(
            code=PROJECT_NOT_FOUND,
            message=f"No GitHub Project V2 is linked to repository {owner}/{repo}",
        )
    return SafeError(code=PROJECT_NOT_FOUND, message="Project not found or invalid project ID")


def api_request_failed(*, status_code: int | None, reason_phrase: str = "", body: str = "") -> SafeError:
    """Return an ApiRequestFailed error for non-2xx responses and network failures.

    `status_code` is None when no HTTP response was received at all.
    """
    if status_code is None:
        return SafeError(code=API_REQUEST_FAILED, message="GitHub API request failed: network error", hint=body or None)
    detail = f"{status_code} {reason_phrase}".strip()
    return SafeError(
        code=API_REQUEST_FAILED,
        message=f"GitHub API request failed: {detail}",
        hint=body[:_MAX_BODY_HINT_CHARS] or None,
        status_code=status_code,
    )


def graphql_error(message: str | None, *, status_code: int | None = None) -> SafeError:
    return SafeError(
        code=GRAPHQL_ERROR,
        message=f"GraphQL error: {message or 'Unknown GraphQL error'}",
        status_code=status_code,
    )


def draft_issue_creation_failed() -> SafeError:
    return SafeError(
        code=DRAFT_ISSUE_CREATION_FAILED,
        message="GitHub did not return an item ID for the new draft issue",
    )


def unknown_failure(message: str = "An unknown error occurred") -> SafeError:
    return SafeError(code=UNKNOWN_FAILURE, message=message)


def safe_error_to_result(err: SafeError, *, prefix: str | None = None) -> dict[str, Any]:
    """Convert a SafeError into the standard tool envelope.

    `prefix` names the operation that failed, e.g. "Failed to fetch projects".
    """
    message = f"{prefix}: {err.message}" if prefix else err.message
    out = to_error_result(code=err.code, message=message, hint=err.hint)
    if err.status_code is not None:
        out["status_code"] = err.status_code
    return out


def to_error_result(*, code: str, message: str, hint: str | None = None) -> dict[str, Any]:
    """Build a standard tool error envelope."""
    out: dict[str, Any] = {"ok": False, "code": code, "message": message}
    if hint:
        out["hint"] = hint
    return out


def user_input_error(message: str, hint: str | None = None) -> dict[str, Any]:
    """Error for invalid tool arguments or unknown tools."""
    return to_error_result(code="UserInput", message=message, hint=hint)


def internal_error(message: str = "Internal error") -> dict[str, Any]:
    """Error for unexpected failures."""
    return to_error_result(code=UNKNOWN_FAILURE, message=message)
