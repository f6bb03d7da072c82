"""Configuration loading for github-projects-mcp.

Configuration is supplied by the host environment (e.g., MCP client `env` block), not by
the agent. It is loaded per tool call and passed explicitly into each operation; the
operations themselves never read the process environment.

The access token is a secret and must never be emitted to agents, logs, or audit reasons.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import SafeError

ENV_TOKEN = "GITHUB_PAT"
ENV_OWNER = "GITHUB_OWNER"
ENV_REPO = "GITHUB_REPO"
ENV_AUDIT_LOG_PATH = "GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH"
ENV_TIMEOUT_S = "GITHUB_PROJECTS_MCP_TIMEOUT_S"

DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Non-functional limits."""

    # Network (httpx transport timeouts; requests are never retried)
    timeout_s: float = DEFAULT_TIMEOUT_S
    connect_timeout_s: float = 5.0

    # Payload limits
    draft_title_max_bytes: int = 1024
    draft_body_max_bytes: int = 64 * 1024


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Per-call configuration injected into the project operations."""

    token: str | None = field(default=None, repr=False)
    owner: str | None = None
    repo: str | None = None
    audit_log_path: Path | None = None
    limits: LimitsConfig = field(default_factory=LimitsConfig)

    @property
    def has_repo_context(self) -> bool:
        return bool(self.owner and self.repo)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _parse_timeout(value: str | None) -> float:
    if value is None:
        return DEFAULT_TIMEOUT_S
    try:
        parsed = float(value)
    except ValueError as exc:
        raise SafeError(code="Config", message=f"{ENV_TIMEOUT_S} must be a number") from exc
    if parsed <= 0:
        raise SafeError(code="Config", message=f"{ENV_TIMEOUT_S} must be positive")
    return parsed


def load_config_from_env(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from environment variables.

    A missing token is not a configuration error: each operation reports
    MissingCredential on its own so the server can still start and list tools.

    Raises:
        SafeError: If an optional setting is present but invalid.
    """
    env = os.environ if environ is None else environ

    audit_path: Path | None = None
    audit_path_raw = _clean(env.get(ENV_AUDIT_LOG_PATH))
    if audit_path_raw:
        p = Path(audit_path_raw)
        if not p.is_absolute():
            raise SafeError(code="Config", message=f"{ENV_AUDIT_LOG_PATH} must be an absolute path when set")
        audit_path = p

    return AppConfig(
        token=_clean(env.get(ENV_TOKEN)),
        owner=_clean(env.get(ENV_OWNER)),
        repo=_clean(env.get(ENV_REPO)),
        audit_log_path=audit_path,
        limits=LimitsConfig(timeout_s=_parse_timeout(_clean(env.get(ENV_TIMEOUT_S)))),
    )
