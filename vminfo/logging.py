"""
vminfo.logging
AUTHOR: carter-vin

Structured JSON event logging for the probe

Contract:
- One JSON object per line to stdout
- Closed event vocabulary
- UTC timestamps only
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

VALID_EVENT_TYPES = {
    "probe_start",
    "vmem_read",
    "vmem_report_emitted",
    "source_unavailable",
    "probe_shutdown",
}

MESSAGE_LIMIT = 200


def _truncate_message(value: str, *, limit: int = MESSAGE_LIMIT) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def utc_now_iso() -> str:
    """
    Current time in ISO 8601 (UTC); shared by events and report timing
    """
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, probe_version: str, **fields: Any) -> None:
    """
    Print one event line

    Rules:
    - event_type must be in VALID_EVENT_TYPES (ValueError otherwise)
    - event_type, probe_version, utc_now always present
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if isinstance(fields.get("message"), str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "probe_version": probe_version,
        **fields,
    }

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
