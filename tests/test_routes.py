# =============================================================================
# tests/test_routes.py - API Endpoint Tests
# =============================================================================
# Drives the FastAPI app through TestClient with real HS256 tokens signed
# with the test JWT secret. Data lives in the FakeSupabase store.
# =============================================================================

import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.main import app
from lib.auth_errors import ACCOUNT_EXISTS, INVALID_CREDENTIALS


def _token(account_id, email="sam@example.com", expires_in=3600) -> str:
    now = int(time.time())
    claims = {
        "sub": str(account_id),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def _auth(account_id) -> dict:
    return {"Authorization": f"Bearer {_token(account_id)}"}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def family(family_with_two_profiles):
    f = dict(family_with_two_profiles)
    f["headers"] = _auth(f["account_id"])
    return f


# =============================================================================
# Auth Endpoints
# =============================================================================

class TestLogin:

    def test_success(self, client, store):
        session = SimpleNamespace(access_token="a", refresh_token="r", expires_in=3600, token_type="bearer")
        store.sign_in = MagicMock(return_value=SimpleNamespace(user=None, session=session))

        response = client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "pw"})

        assert response.status_code == 200
        assert response.json()["access_token"] == "a"

    def test_failure_is_sanitized(self, client, store):
        store.sign_in = MagicMock(
            side_effect=Exception("Invalid login credentials (gotrue /srv/api/token.go:88)")
        )

        response = client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "pw"})

        assert response.status_code == 401
        assert response.json()["detail"] == INVALID_CREDENTIALS
        assert "token.go" not in response.text


class TestSignup:

    def _form(self, **overrides):
        data = {
            "name": "Sam",
            "email": "sam@example.com",
            "password": "correct-horse",
            "confirm_password": "correct-horse",
        }
        data.update(overrides)
        return data

    def test_success_enqueues_setup(self, client, store):
        user_id = uuid4()
        store.sign_up = MagicMock(return_value=SimpleNamespace(
            user=SimpleNamespace(id=str(user_id), email="sam@example.com", identities=[{}]),
            session=None,
        ))

        with patch("workers.tasks.setup_new_account") as task:
            task.delay.return_value = SimpleNamespace(id="task-1")
            response = client.post("/api/v1/auth/signup", json=self._form())

        assert response.status_code == 201
        body = response.json()
        assert body["account_id"] == str(user_id)
        assert body["setup_task_id"] == "task-1"
        assert body["session"] is None
        task.delay.assert_called_once_with(str(user_id))

    def test_short_password_does_not_echo_input(self, client, store):
        response = client.post(
            "/api/v1/auth/signup",
            json=self._form(password="hunter2", confirm_password="hunter2"),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["detail"] == "Password must be at least 8 characters"
        assert body["errors"][0]["field"] == "password"
        assert "hunter2" not in response.text

    def test_password_mismatch(self, client, store):
        response = client.post("/api/v1/auth/signup", json=self._form(confirm_password="different-1"))

        assert response.status_code == 422
        assert response.json()["detail"] == "Passwords do not match"
        assert "different-1" not in response.text

    def test_duplicate_email(self, client, store):
        store.sign_up = MagicMock(side_effect=Exception("User already registered"))

        response = client.post("/api/v1/auth/signup", json=self._form())

        assert response.status_code == 400
        assert response.json()["detail"] == ACCOUNT_EXISTS


class TestAccessState:

    def test_anonymous(self, client, store):
        response = client.get("/api/v1/auth/state")

        assert response.json() == {
            "state": "unauthenticated",
            "authenticated": False,
            "profile_selected": False,
        }

    def test_invalid_token_is_anonymous(self, client, store):
        response = client.get("/api/v1/auth/state", headers={"Authorization": "Bearer garbage"})

        assert response.json()["state"] == "unauthenticated"

    def test_provisioning_queues_setup_again(self, client, store):
        account_id = store.add_account("new@example.com")

        with patch("workers.tasks.setup_new_account") as task:
            task.delay.return_value = SimpleNamespace(id="task-2")
            response = client.get("/api/v1/auth/state", headers=_auth(account_id))

        assert response.json()["state"] == "provisioning"
        task.delay.assert_called_once_with(account_id)

    def test_provisioning_survives_broker_outage(self, client, store):
        account_id = store.add_account("new@example.com")

        with patch("workers.tasks.setup_new_account") as task:
            task.delay.side_effect = ConnectionError("redis down")
            response = client.get("/api/v1/auth/state", headers=_auth(account_id))

        assert response.status_code == 200
        assert response.json()["state"] == "provisioning"

    def test_ready(self, client, family):
        response = client.get("/api/v1/auth/state", headers=family["headers"])

        assert response.json() == {
            "state": "ready",
            "authenticated": True,
            "profile_selected": True,
        }

    def test_me(self, client, family):
        response = client.get("/api/v1/auth/me", headers=family["headers"])

        body = response.json()
        assert body["id"] == family["account_id"]
        assert body["profile_id"] == family["p1"]
        assert body["needs_profile"] is False

    def test_me_anonymous_is_null(self, client, store):
        assert client.get("/api/v1/auth/me").json() is None


class TestVerify:

    def test_valid_token(self, client, family):
        response = client.get("/api/v1/auth/verify", headers=family["headers"])

        assert response.status_code == 200
        assert response.json()["user_id"] == family["account_id"]

    def test_expired_token(self, client, store):
        headers = {"Authorization": f"Bearer {_token(uuid4(), expires_in=-60)}"}

        response = client.get("/api/v1/auth/verify", headers=headers)

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_bad_signature_detail_is_generic(self, client, store):
        token = jwt.encode(
            {"sub": str(uuid4()), "aud": "authenticated", "exp": int(time.time()) + 60},
            "some-other-secret",
            algorithm="HS256",
        )

        response = client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"


# =============================================================================
# Profile Endpoints
# =============================================================================

class TestProfileEndpoints:

    def test_list_anonymous_is_empty(self, client, family):
        response = client.get("/api/v1/profiles")

        assert response.status_code == 200
        assert response.json() == {"profiles": []}

    def test_list_own_family(self, client, family, other_family):
        response = client.get("/api/v1/profiles", headers=family["headers"])

        ids = {p["id"] for p in response.json()["profiles"]}
        assert ids == {family["p1"], family["p2"]}

    def test_current(self, client, family):
        response = client.get("/api/v1/profiles/current", headers=family["headers"])

        assert response.json()["id"] == family["p1"]

    def test_select(self, client, store, family):
        response = client.post(f"/api/v1/profiles/{family['p2']}/select", headers=family["headers"])

        assert response.status_code == 200
        assert response.json() == {"success": True, "profile_id": family["p2"]}
        assert store.accounts[family["account_id"]]["profile_id"] == family["p2"]

    def test_select_other_family_is_404(self, client, store, family, other_family):
        response = client.post(f"/api/v1/profiles/{other_family['p3']}/select", headers=family["headers"])

        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found in your family"
        assert store.accounts[family["account_id"]]["profile_id"] == family["p1"]

    def test_select_malformed_id_is_422(self, client, family):
        response = client.post("/api/v1/profiles/not-a-uuid/select", headers=family["headers"])

        assert response.status_code == 422

    def test_write_requires_authentication(self, client, family):
        response = client.post(f"/api/v1/profiles/{family['p2']}/select")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_create(self, client, store, family):
        response = client.post(
            "/api/v1/profiles",
            json={"name": " Robin ", "color": "#ec4899"},
            headers=family["headers"],
        )

        assert response.status_code == 201
        row = store.profiles[response.json()["profile_id"]]
        assert row["name"] == "Robin"
        assert row["color"] == "#EC4899"

    def test_create_blank_name(self, client, family):
        response = client.post("/api/v1/profiles", json={"name": "   ", "color": "#3B82F6"}, headers=family["headers"])

        assert response.status_code == 422
        assert response.json()["detail"] == "Name is required"

    def test_create_requires_color(self, client, store, family):
        response = client.post("/api/v1/profiles", json={"name": "Robin"}, headers=family["headers"])

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "color"
        assert len(store.family_profiles(family["family_id"])) == 2

    def test_create_without_family_is_409(self, client, store):
        account_id = store.add_account("new@example.com")

        response = client.post("/api/v1/profiles", json={"name": "Robin", "color": "#3B82F6"}, headers=_auth(account_id))

        assert response.status_code == 409
        assert response.json()["detail"] == "User has no family"

    def test_update(self, client, store, family):
        response = client.patch(
            f"/api/v1/profiles/{family['p2']}",
            json={"name": "Alexis"},
            headers=family["headers"],
        )

        assert response.status_code == 200
        assert store.profiles[family["p2"]]["name"] == "Alexis"

    def test_delete_selected_moves_selection(self, client, store, family):
        response = client.delete(f"/api/v1/profiles/{family['p1']}", headers=family["headers"])

        assert response.status_code == 200
        assert store.accounts[family["account_id"]]["profile_id"] == family["p2"]

        state = client.get("/api/v1/auth/state", headers=family["headers"]).json()
        assert state["state"] == "ready"

    def test_delete_last_is_409(self, client, store):
        family_id = store.add_family()
        p1 = store.add_profile(family_id, "Only")
        account_id = store.add_account(family_id=family_id, profile_id=p1)

        response = client.delete(f"/api/v1/profiles/{p1}", headers=_auth(account_id))

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot delete the last profile in a family"
        assert p1 in store.profiles

    def test_clear_current(self, client, store, family):
        response = client.delete("/api/v1/profiles/current", headers=family["headers"])

        assert response.status_code == 204
        assert store.accounts[family["account_id"]]["profile_id"] is None
        state = client.get("/api/v1/auth/state", headers=family["headers"]).json()
        assert state["state"] == "needs_profile"


# =============================================================================
# Task & Health Endpoints
# =============================================================================

class TestTaskStatus:

    def test_failure_hides_raw_error(self, client, family):
        failed = SimpleNamespace(status="FAILURE", result=RuntimeError("password=s3cret host=db.internal"))

        with patch("workers.celery_app.celery_app") as celery_app:
            celery_app.AsyncResult.return_value = failed
            response = client.get("/api/v1/tasks/task-1", headers=family["headers"])

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "FAILURE"
        assert body["message"] == "Account setup failed"
        assert body["result"] is None
        assert "s3cret" not in response.text

    def test_success_returns_result(self, client, family):
        done = SimpleNamespace(status="SUCCESS", result={"account_id": family["account_id"], "provisioned": True})

        with patch("workers.celery_app.celery_app") as celery_app:
            celery_app.AsyncResult.return_value = done
            response = client.get("/api/v1/tasks/task-1", headers=family["headers"])

        assert response.json()["result"]["provisioned"] is True

    def test_other_accounts_task_is_hidden(self, client, family, other_family):
        done = SimpleNamespace(status="SUCCESS", result={"account_id": other_family["account_id"], "provisioned": True})

        with patch("workers.celery_app.celery_app") as celery_app:
            celery_app.AsyncResult.return_value = done
            response = client.get("/api/v1/tasks/task-1", headers=family["headers"])

        assert response.status_code == 404
        assert other_family["account_id"] not in response.text


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"
