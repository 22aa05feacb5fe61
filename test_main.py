# type: ignore
"""
Mailing List Service — HTTP tests
=================================
Collaborators are swapped through ``app.dependency_overrides``: an
in-memory directory and a MagicMock notifier.

Run:  pytest test_main.py -v --cov=app --cov=main --cov-report=term-missing
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from app.core.config import settings
from app.core.dependencies import get_notifier, get_user_directory
from app.core.exceptions import NotificationError, PersistenceError
from app.middleware import normalize_path
from app.repositories.memory_user_repository import InMemoryUserDirectory
from main import app

client = TestClient(app, raise_server_exceptions=False)

directory = InMemoryUserDirectory()
notifier = MagicMock()


@pytest.fixture(autouse=True)
def reset():
    directory.clear()
    notifier.reset_mock(side_effect=True)
    app.dependency_overrides[get_user_directory] = lambda: directory
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield
    app.dependency_overrides.clear()


# ── Helpers ───────────────────────────────────────────────────────────────
def _enroll(**overrides):
    body = {"username": "alice", "list_id": "blog_list"}
    body.update(overrides)
    return client.post("/api/v1/enrollments", json=body)


def _enrollments(outcome):
    return REGISTRY.get_sample_value("enrollments_total", {"outcome": outcome}) or 0.0


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == "mailing-list-service"

    def test_readiness_ok(self):
        directory.find_or_create("alice")
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["users"] == 1

    def test_readiness_degraded(self):
        broken = MagicMock()
        broken.verify_connection.side_effect = Exception("db down")
        app.dependency_overrides[get_user_directory] = lambda: broken
        r = client.get("/health/ready")
        assert r.status_code == 503
        assert r.json()["status"] == "degraded"

    def test_readiness_directory_cannot_be_built(self):
        def unbuildable():
            raise RuntimeError("no database")

        app.dependency_overrides[get_user_directory] = unbuildable
        r = client.get("/health/ready")
        assert r.status_code == 503
        assert "no database" in r.json()["detail"]

    def test_metrics_endpoint(self):
        _enroll()
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "enrollments_total" in r.text

    def test_request_id_propagated(self):
        r = client.get("/health", headers={"X-Request-ID": "my-req-42"})
        assert r.headers["X-Request-ID"] == "my-req-42"

    def test_request_id_generated(self):
        assert client.get("/health").headers["X-Request-ID"]


# ═══════════════════════════════════════════════════════════════════════════
# POST /api/v1/enrollments
# ═══════════════════════════════════════════════════════════════════════════
class TestEnrollment:
    def test_enroll_creates_user(self):
        r = _enroll()
        assert r.status_code == 200
        d = r.json()
        assert d["username"] == "alice"
        assert d["list_membership"] == "blog_list"
        assert d["updated_at"] is not None
        assert directory.get("alice").list_membership == "blog_list"

    def test_notifier_called_with_user_and_list(self):
        _enroll()
        notifier.notify.assert_called_once()
        user, list_id = notifier.notify.call_args.args
        assert user.username == "alice"
        assert list_id == "blog_list"

    def test_enroll_existing_user_switches_list(self):
        _enroll(list_id="old_list")
        r = _enroll(list_id="new_list")
        assert r.json()["list_membership"] == "new_list"
        assert directory.count() == 1

    def test_strict_unknown_user_404(self):
        r = _enroll(strict=True)
        assert r.status_code == 404
        assert r.json()["error"] == "user_not_found"
        notifier.notify.assert_not_called()
        assert directory.get("alice") is None

    def test_strict_existing_user(self):
        directory.find_or_create("alice")
        r = _enroll(strict=True)
        assert r.status_code == 200
        assert r.json()["list_membership"] == "blog_list"

    def test_notification_failure_502_and_no_membership(self):
        notifier.notify.side_effect = NotificationError("smtp down")
        r = _enroll(list_id="news")
        assert r.status_code == 502
        assert r.json()["error"] == "notification_failed"
        assert directory.get("alice").list_membership is None

    def test_persistence_failure_409(self):
        with patch.object(directory, "update", side_effect=PersistenceError("unique violation")):
            r = _enroll()
        assert r.status_code == 409
        assert r.json()["error"] == "persistence_error"

    def test_error_body_carries_request_id(self):
        r = client.post("/api/v1/enrollments", json={"username": "alice", "list_id": "l", "strict": True},
                        headers={"X-Request-ID": "req-404"})
        assert r.json()["request_id"] == "req-404"

    def test_unhandled_error_500(self):
        notifier.notify.side_effect = RuntimeError("boom")
        r = _enroll()
        assert r.status_code == 500
        assert r.json()["error"] == "internal_server_error"

    def test_missing_username_422(self):
        assert client.post("/api/v1/enrollments", json={"list_id": "blog_list"}).status_code == 422

    def test_missing_list_422(self):
        assert client.post("/api/v1/enrollments", json={"username": "alice"}).status_code == 422

    @pytest.mark.parametrize("field", ["username", "list_id"])
    def test_blank_field_422(self, field):
        before = _enrollments("invalid_request")
        r = client.post("/api/v1/enrollments",
                        json={"username": "alice", "list_id": "blog_list", field: "   "},
                        headers={"X-Request-ID": "rid-1"})
        assert r.status_code == 422
        d = r.json()
        assert d["error"] == "invalid_request"
        assert field in d["detail"]
        assert d["request_id"] == "rid-1"
        assert _enrollments("invalid_request") == before + 1
        notifier.notify.assert_not_called()

    def test_missing_field_uses_error_envelope(self):
        r = client.post("/api/v1/enrollments", json={"list_id": "blog_list"})
        assert r.status_code == 422
        assert r.json()["error"] == "invalid_request"
        assert "username" in r.json()["detail"]
        assert r.json()["request_id"] == r.headers["X-Request-ID"]

    def test_strict_false_overrides_strict_server_default(self):
        with patch.object(settings, "USER_LOOKUP_MODE", "strict"):
            r = _enroll(strict=False)
        assert r.status_code == 200
        assert directory.get("alice").list_membership == "blog_list"

    def test_strict_omitted_uses_server_default(self):
        with patch.object(settings, "USER_LOOKUP_MODE", "strict"):
            r = _enroll()
        assert r.status_code == 404
        assert r.json()["error"] == "user_not_found"


# ═══════════════════════════════════════════════════════════════════════════
# READS
# ═══════════════════════════════════════════════════════════════════════════
class TestReads:
    def test_get_user(self):
        _enroll()
        r = client.get("/api/v1/users/alice")
        assert r.status_code == 200
        assert r.json()["list_membership"] == "blog_list"

    def test_get_user_404(self):
        r = client.get("/api/v1/users/ghost")
        assert r.status_code == 404
        assert r.json()["error"] == "user_not_found"

    def test_list_members(self):
        _enroll(username="bob")
        _enroll(username="alice")
        _enroll(username="carol", list_id="other")
        r = client.get("/api/v1/lists/blog_list/members")
        assert r.status_code == 200
        d = r.json()
        assert d["total"] == 2
        assert [m["username"] for m in d["members"]] == ["alice", "bob"]

    def test_list_members_empty(self):
        assert client.get("/api/v1/lists/nobody/members").json() == {
            "list_id": "nobody", "total": 0, "members": [],
        }


# ═══════════════════════════════════════════════════════════════════════════
# MIDDLEWARE
# ═══════════════════════════════════════════════════════════════════════════
class TestNormalizePath:
    @pytest.mark.parametrize("path,expected", [
        ("/api/v1/users/alice", "/api/v1/users/{param}"),
        ("/api/v1/lists/blog_list/members", "/api/v1/lists/{param}/members"),
        ("/api/v1/enrollments", "/api/v1/enrollments"),
        ("/", "/"),
    ])
    def test_normalize(self, path, expected):
        assert normalize_path(path) == expected
