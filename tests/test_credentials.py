"""Credential resolution tests."""

from __future__ import annotations

import logging

import pytest
from github_projects_mcp.config import AppConfig
from github_projects_mcp.credentials import resolve_token
from github_projects_mcp.errors import MISSING_CREDENTIAL, SafeError


def test_resolve_token_returns_configured_token() -> None:
    assert resolve_token(AppConfig(token="tok")) == "tok"


@pytest.mark.parametrize("token", [None, ""])
def test_resolve_token_fails_when_absent(token: str | None) -> None:
    with pytest.raises(SafeError) as exc:
        resolve_token(AppConfig(token=token))
    assert exc.value.code == MISSING_CREDENTIAL


def test_resolve_token_logs_length_not_value(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="github_projects_mcp.credentials")

    resolve_token(AppConfig(token="ghp_abcdef"))

    assert "length: 10" in caplog.text
    assert "ghp_abcdef" not in caplog.text
