"""GitHub GraphQL client.

Provides:
- a single authenticated POST per call to https://api.github.com/graphql
- no redirects and no retries; a failed call surfaces immediately
- classification of HTTP-level and GraphQL-level failures into SafeError

This client is intended only for the fixed query/mutation documents in `queries`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import LimitsConfig
from .errors import SafeError, api_request_failed, graphql_error

logger = logging.getLogger(__name__)

GITHUB_API_BASE_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class GraphQLResult:
    """Parsed GraphQL response.

    `data` is the response's `data` object as returned by GitHub; absent or null
    data is represented as an empty dict.
    """

    data: dict[str, Any]


def _first_error_message(errors: list[Any]) -> str | None:
    first = errors[0]
    if isinstance(first, dict) and isinstance(first.get("message"), str):
        return first["message"]
    return None


def _graphql_errors(payload: object) -> list[Any] | None:
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        return errors
    return None


class GitHubGraphQLClient:
    """Minimal GitHub GraphQL client (POST /graphql only)."""

    def __init__(
        self,
        *,
        token: str,
        limits: LimitsConfig,
        api_base_url: str = GITHUB_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a GraphQL client bound to api.github.com.

        Args:
            token: GitHub access token, sent as a bearer credential.
            limits: Transport timeouts.
            api_base_url: Must be https://api.github.com (enforced).
            transport: Optional httpx transport for tests.
        """
        self._token = token
        self._limits = limits
        self._api_base_url = api_base_url.rstrip("/")
        self._transport = transport

        if self._api_base_url != GITHUB_API_BASE_URL:
            raise SafeError(code="Config", message=f"Only {GITHUB_API_BASE_URL} is allowed")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"bearer {self._token}",
            "Accept": "application/json",
        }

    def _log_errors(self, errors: list[Any]) -> None:
        for err in errors:
            message = err.get("message") if isinstance(err, dict) else err
            logger.warning("GitHub GraphQL API error: %s", message)

    async def execute(self, *, query: str, variables: dict[str, Any] | None = None) -> GraphQLResult:
        """Execute one GraphQL document and return its `data` object.

        Raises:
            SafeError: ApiRequestFailed for network failures, non-2xx responses and
                non-JSON bodies; GraphQlError when the body carries an `errors` array.
        """
        if not isinstance(query, str) or not query.strip():
            raise SafeError(code="UnknownFailure", message="GraphQL query is missing")

        url = f"{self._api_base_url}/graphql"
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        timeout = httpx.Timeout(self._limits.timeout_s, connect=self._limits.connect_timeout_s)

        try:
            async with httpx.AsyncClient(
                follow_redirects=False,
                timeout=timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(url, headers=self._headers(), json=body)
        except httpx.HTTPError as exc:
            logger.error("GitHub GraphQL request failed: %s", type(exc).__name__)
            raise api_request_failed(status_code=None, body=type(exc).__name__) from exc

        try:
            payload = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = None

        errors = _graphql_errors(payload)

        if not resp.is_success:
            if errors is not None:
                self._log_errors(errors)
                raise graphql_error(_first_error_message(errors), status_code=resp.status_code)
            raise api_request_failed(
                status_code=resp.status_code,
                reason_phrase=resp.reason_phrase,
                body=resp.text,
            )

        if not isinstance(payload, dict):
            raise api_request_failed(
                status_code=resp.status_code,
                reason_phrase="GitHub returned invalid JSON",
            )

        if errors is not None:
            self._log_errors(errors)
            raise graphql_error(_first_error_message(errors))

        data = payload.get("data")
        return GraphQLResult(data=data if isinstance(data, dict) else {})
