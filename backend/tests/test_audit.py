import json
import logging
from types import SimpleNamespace
from uuid import UUID

from commons_youth.utils.audit import log_audit_event


def test_audit_event_is_logged_as_json(caplog):
    actor = SimpleNamespace(id=UUID(int=7), email="admin@example.org", role="admin")
    with caplog.at_level(logging.INFO, logger="commons_youth.audit"):
        payload = log_audit_event(
            "group_visibility_changed",
            actor=actor,
            resource="group",
            resource_id=UUID(int=1),
            details={"is_hidden": True, "province": "เชียงใหม่"},
        )

    assert payload["event"] == "group_visibility_changed"
    assert payload["resource_id"] == str(UUID(int=1))
    assert payload["actor"] == {"id": str(UUID(int=7)), "email": "admin@example.org", "role": "admin"}

    record = next(r for r in caplog.records if r.name == "commons_youth.audit")
    logged = json.loads(record.getMessage())
    assert logged["details"] == {"is_hidden": True, "province": "เชียงใหม่"}
    # Thai text is kept readable
    assert "เชียงใหม่" in record.getMessage()


def test_audit_event_without_actor_or_resource():
    payload = log_audit_event("boundaries_reloaded")
    assert set(payload) == {"ts", "event"}
