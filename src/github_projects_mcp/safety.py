"""Safety helpers.

Implements deterministic secret detection/redaction rules and size limit helpers.

Key rule: if an agent-provided input appears to be a credential, reject the request
and do not echo the suspected secret value. The token comes from the host, never
from tool arguments.
"""

from __future__ import annotations

import re
from typing import Any

from .errors import SafeError

_CRED_FIELD_NAMES = {
    "token",
    "access_token",
    "authorization",
    "password",
    "pat",
    "github_pat",
}

_TOKEN_PREFIXES = (
    "ghp_",
    "gho_",
    "ghu_",
    "ghs_",
    "ghr_",
    "github_pat_",
)

_JWT_LIKE_RE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def looks_like_secret_value(value: str) -> bool:
    """Return True if the value looks like a credential.

    - GitHub token prefixes at the start, after trimming leading whitespace
    - "bearer " prefix, case-insensitive
    - long JWT-looking values
    """
    if not isinstance(value, str):
        return False
    trimmed = value.lstrip()
    lowered = trimmed.lower()
    if lowered.startswith("bearer "):
        return True
    if lowered.startswith(_TOKEN_PREFIXES):
        return True
    return len(trimmed) >= 40 and bool(_JWT_LIKE_RE.match(trimmed))


def validate_no_secrets(obj: Any, *, free_text_fields: frozenset[str] = frozenset()) -> None:
    """Reject agent-provided input that appears to contain credentials.

    Values of top-level keys in `free_text_fields` (prose such as an issue title or
    body) skip the value heuristics; their key names are still checked.

    Raises SafeError without echoing any suspected secret values.
    """
    if isinstance(obj, dict):
        for k, v in obj.items():
            if str(k).strip().lower() in _CRED_FIELD_NAMES:
                raise SafeError(code="UserInput", message="Credential-like fields are not allowed")
            if k in free_text_fields:
                continue
            validate_no_secrets(v)
    elif isinstance(obj, list):
        for item in obj:
            validate_no_secrets(item)
    elif isinstance(obj, str) and looks_like_secret_value(obj):
        raise SafeError(code="UserInput", message="Credential-like values are not allowed")


def enforce_max_bytes(*, data: bytes, max_bytes: int, what: str) -> None:
    """Enforce an upper bound on byte payloads."""
    if len(data) > max_bytes:
        raise SafeError(code="UserInput", message=f"{what} exceeds size limit ({max_bytes} bytes)")


def redact_text(text: str) -> str:
    """Return a representation of `text` safe for logs and error messages."""
    if not isinstance(text, str):
        return "<non-string>"
    if any(looks_like_secret_value(word) for word in text.split()) or looks_like_secret_value(text):
        return "<redacted>"
    return text
