"""Structured audit logging.

One event per tool call, as a JSON line on stderr and optionally appended to a
host-configured file. Events never contain the token.
"""

from __future__ import annotations

import json
import sys
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single audit event."""

    timestamp: str
    correlation_id: str
    operation: str
    target: str
    outcome: str
    reason: str | None
    duration_ms: int | None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "correlation_id": self.correlation_id,
            "operation": self.operation,
            "target": self.target,
            "outcome": self.outcome,
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        if self.duration_ms is not None:
            payload["duration_ms"] = self.duration_ms
        return payload


class AuditLogger:
    """Writes audit events as JSONL to stderr and optionally to a file."""

    def __init__(self, *, sink_path: Path | None = None) -> None:
        self._sink_path = sink_path

    def write_event(self, event: AuditEvent) -> None:
        """Write an event; failures writing the file sink never break the tool call."""
        line = json.dumps(event.to_dict(), sort_keys=True, separators=(",", ":"))
        print(line, file=sys.stderr)
        if self._sink_path is None:
            return
        try:
            self._sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self._sink_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:  # pragma: no cover
            return

    def measure_start(self) -> float:
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        return int((time.monotonic() - start) * 1000)


def build_event(
    *,
    correlation_id: str,
    operation: str,
    target: str,
    outcome: str,
    reason: str | None = None,
    duration_ms: int | None = None,
) -> AuditEvent:
    """Construct an audit event stamped with the current UTC time."""
    return AuditEvent(
        timestamp=_now_rfc3339(),
        correlation_id=correlation_id,
        operation=operation,
        target=target,
        outcome=outcome,
        reason=reason,
        duration_ms=duration_ms,
    )
