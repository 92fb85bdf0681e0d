from flask import g

from models.audit_trail import AuditTrail
from utils import audit
from utils.audit import log_audit_trail


def test_records_actor_ip_and_coordinates(app):
    with app.test_request_context(
        "/api/v1/msg-apis/add",
        method="POST",
        json={"latitude": "12.97", "longitude": "77.59"},
        headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    ):
        g.current_user = {"id": 7, "role": "admin"}
        entry = log_audit_trail("msg_apis", 3, "create", "Created API Gupshup", "Active")

    assert entry is not None
    stored = AuditTrail.query.one()
    assert stored.created_by == 7
    assert stored.ip_address == "203.0.113.9"
    assert (stored.latitude, stored.longitude) == (12.97, 77.59)
    assert stored.status == "Active"


def test_works_outside_a_request(app):
    entry = log_audit_trail("products", 1, "delete", "Deleted product", "Deleted")
    assert entry.created_by is None
    assert AuditTrail.query.count() == 1


def test_failures_are_swallowed(app, monkeypatch):
    def broken_context():
        raise RuntimeError("context unavailable")

    monkeypatch.setattr(audit, "_request_context", broken_context)

    assert log_audit_trail("products", 1, "update", "Updated", "Active") is None
    assert AuditTrail.query.count() == 0
