"""
Integration tests for the login endpoint.
"""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from unittest.mock import patch

from core import config
from core.database import get_db
from main import app
from services.jwt_service import jwt_service

client = TestClient(app)


@pytest.fixture(autouse=True)
def override_db(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    yield
    app.dependency_overrides.clear()


class TestLogin:
    """Test POST /api/auth/login."""

    def test_login_success(self, test_user):
        response = client.post("/api/auth/login", json={"username": "tester", "password": "Str0ng-Passw0rd!"})

        assert response.status_code == 200
        body = response.json()
        payload = jwt_service.verify_token(body["token"])
        assert payload is not None
        assert payload.name == "tester"
        assert payload.iss == config.JWT_VALID_ISSUER
        assert payload.aud == config.JWT_VALID_AUDIENCE

        expiration = datetime.fromisoformat(body["expiration"])
        now = datetime.now(timezone.utc)
        assert now < expiration <= now + timedelta(hours=3)

    def test_token_grants_access(self, test_user):
        token = client.post(
            "/api/auth/login", json={"username": "tester", "password": "Str0ng-Passw0rd!"}
        ).json()["token"]

        response = client.get("/api/patients", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    def test_wrong_password_and_unknown_user_look_the_same(self, test_user):
        wrong_password = client.post("/api/auth/login", json={"username": "tester", "password": "nope"})
        unknown_user = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()

    @pytest.mark.parametrize("body", [
        {"username": "", "password": "x"},
        {"username": "tester", "password": ""},
        {"username": "   ", "password": "x"},
        {},
    ])
    def test_missing_fields(self, body):
        response = client.post("/api/auth/login", json=body)

        assert response.status_code == 400

    def test_credential_check_runs_off_the_event_loop(self):
        """Password hashing happens in a worker thread, not on the event loop."""
        seen = {}

        def fake_authenticate(db, username, password):
            try:
                asyncio.get_running_loop()
                seen["on_event_loop"] = True
            except RuntimeError:
                seen["on_event_loop"] = False
            return None

        with patch("api.auth.AuthService.authenticate", side_effect=fake_authenticate):
            response = client.post("/api/auth/login", json={"username": "tester", "password": "pw"})

        assert response.status_code == 401
        assert seen == {"on_event_loop": False}
