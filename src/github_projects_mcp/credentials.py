"""Access token resolution."""

from __future__ import annotations

import logging

from .config import AppConfig
from .errors import missing_credential

logger = logging.getLogger(__name__)


def resolve_token(config: AppConfig) -> str:
    """Return the configured GitHub token or raise MissingCredential.

    Only the presence and length of the token are logged, never its value.
    """
    token = config.token
    if not token:
        logger.error("GitHub token check failed: no token configured")
        raise missing_credential()
    logger.debug("GitHub token found, length: %d", len(token))
    return token
