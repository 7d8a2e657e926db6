"""Structured audit logging for owner and admin changes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

audit_logger = logging.getLogger("commons_youth.audit")


def _to_serializable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_serializable(v) for v in value]
    return str(value)


def log_audit_event(
    event_type: str,
    *,
    actor: Any = None,
    resource: str | None = None,
    resource_id: Any = None,
    details: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Emit one JSON audit line and return the payload that was logged."""
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event_type,
    }
    if resource:
        payload["resource"] = resource
        payload["resource_id"] = _to_serializable(resource_id)

    if actor is not None:
        actor_id = getattr(actor, "id", None)
        payload["actor"] = {
            "id": str(actor_id) if actor_id else None,
            "email": getattr(actor, "email", None),
            "role": getattr(actor, "role", None),
        }

    if details:
        payload["details"] = _to_serializable(details)

    # ensure_ascii=False keeps Thai names readable in the log
    audit_logger.info(json.dumps(payload, ensure_ascii=False))
    return payload
