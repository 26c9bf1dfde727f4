import asyncio
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.exceptions import ForbiddenError, InvalidPasswordError, UnknownEmailError
from app.core.security import JWT_ALGORITHM
from app.services import auth_service
from tests.helpers import auth_header, register


def test_register_assigns_sequential_ids(client):
    first = register(client, "amy@example.com")
    second = register(client, "ben@example.com")

    assert first.status_code == 200
    assert first.json()["code"] == 0
    assert first.json()["data"]["user"]["id"] == "C01"
    assert second.json()["data"]["user"]["id"] == "C02"


def test_register_duplicate_email_fails(client):
    register(client, "amy@example.com")
    response = register(client, "amy@example.com", password="other")

    assert response.status_code == 400
    assert response.json()["code"] == 400

    login = client.post("/login", json={"email": "amy@example.com", "password": "secret123"})
    assert login.status_code == 200


def test_register_stores_hashed_password(client, db_path):
    register(client, "amy@example.com")

    stored = json.loads(db_path.read_text(encoding="utf-8"))["user"][0]
    assert stored["password"] != "secret123"
    assert stored["password"].startswith("$2")
    assert stored["createdAt"].endswith("Z")


def test_register_response_has_no_password(client):
    data = register(client, "amy@example.com").json()["data"]
    assert "password" not in data["user"]
    assert set(data["user"]) == {"id", "name", "email", "phone", "birthday", "createdAt"}
    assert data["token"]


def test_register_missing_fields_is_rejected(client):
    response = client.post("/register", json={"email": "amy@example.com"})
    assert response.status_code == 422


def test_user_ids_are_not_reused_after_deletion(client):
    from app.db.store import get_store

    register(client, "amy@example.com")
    register(client, "ben@example.com")

    store = get_store()
    with store.transaction() as doc:
        doc["user"] = [u for u in doc["user"] if u["id"] != "C02"]

    response = register(client, "cat@example.com")
    assert response.json()["data"]["user"]["id"] == "C03"


def test_counter_seeded_from_existing_users(db_path, seed_document):
    seed_document["user"] = [
        {"id": "C01", "email": "a@example.com", "password": "x"},
        {"id": "C07", "email": "b@example.com", "password": "x"},
    ]
    db_path.write_text(json.dumps(seed_document), encoding="utf-8")

    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as fresh_client:
        response = register(fresh_client, "c@example.com")
    assert response.json()["data"]["user"]["id"] == "C08"


def test_login_unknown_email(client):
    response = client.post("/login", json={"email": "nobody@example.com", "password": "x"})
    assert response.status_code == 401
    assert response.json()["code"] == 401


def test_login_wrong_password(client):
    register(client, "amy@example.com")
    response = client.post("/login", json={"email": "amy@example.com", "password": "wrong"})
    assert response.status_code == 403
    assert response.json()["code"] == 403


def test_login_returns_token_for_that_user(client):
    register(client, "amy@example.com")
    response = client.post("/login", json={"email": "amy@example.com", "password": "secret123"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == "C01"
    assert "password" not in data["user"]

    history = client.get("/orders/history", headers=auth_header(data["token"]))
    assert history.status_code == 200


def test_legacy_token_is_deterministic(client, test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "TOKEN_SCHEME", "legacy")
    register(client, "amy@example.com")

    tokens = {
        client.post("/login", json={"email": "amy@example.com", "password": "secret123"}).json()["data"]["token"]
        for _ in range(3)
    }
    assert tokens == {"fake-jwt-token-C01"}
    assert client.get("/orders/history", headers=auth_header("fake-jwt-token-C01")).status_code == 200
    assert client.get("/orders/history", headers=auth_header("fake-jwt-token-C99")).status_code == 401


def test_legacy_token_not_accepted_under_jwt_scheme(client):
    register(client, "amy@example.com")
    response = client.get("/orders/history", headers=auth_header("fake-jwt-token-C01"))
    assert response.status_code == 401


def test_missing_or_malformed_header_is_unauthorized(client):
    assert client.get("/orders/history").status_code == 401
    assert client.get("/orders/history", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/orders/history", headers={"Authorization": "Bearer "}).status_code == 401


def test_tampered_and_expired_tokens_are_rejected(client, test_settings):
    token = register(client, "amy@example.com").json()["data"]["token"]
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}.{signature[::-1]}"
    assert client.get("/orders/history", headers=auth_header(tampered)).status_code == 401

    forged = jwt.encode(
        {"sub": "C01", "ver": 0, "iat": datetime.now(timezone.utc), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "not-the-secret",
        algorithm=JWT_ALGORITHM,
    )
    assert client.get("/orders/history", headers=auth_header(forged)).status_code == 401

    past = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = jwt.encode(
        {"sub": "C01", "ver": 0, "iat": past, "exp": past + timedelta(hours=1)},
        test_settings.SECRET_KEY,
        algorithm=JWT_ALGORITHM,
    )
    assert client.get("/orders/history", headers=auth_header(expired)).status_code == 401


def test_change_password(client):
    token = register(client, "amy@example.com").json()["data"]["token"]

    response = client.patch(
        "/users/C01",
        json={"oldPassword": "secret123", "newPassword": "newsecret"},
        headers=auth_header(token),
    )
    assert response.status_code == 200
    assert response.json() == {"code": 0, "message": "Password changed"}

    assert client.post("/login", json={"email": "amy@example.com", "password": "secret123"}).status_code == 403
    assert client.post("/login", json={"email": "amy@example.com", "password": "newsecret"}).status_code == 200


def test_change_password_for_other_user_is_forbidden(client):
    register(client, "amy@example.com")
    ben_token = register(client, "ben@example.com").json()["data"]["token"]

    response = client.patch(
        "/users/C01",
        json={"oldPassword": "secret123", "newPassword": "hijacked"},
        headers=auth_header(ben_token),
    )
    assert response.status_code == 403
    assert client.post("/login", json={"email": "amy@example.com", "password": "secret123"}).status_code == 200


def test_change_password_wrong_old_password(client):
    token = register(client, "amy@example.com").json()["data"]["token"]

    response = client.patch(
        "/users/C01",
        json={"oldPassword": "wrong", "newPassword": "newsecret"},
        headers=auth_header(token),
    )
    assert response.status_code == 405
    assert response.json()["code"] == 405


def test_change_password_requires_token(client):
    register(client, "amy@example.com")
    response = client.patch("/users/C01", json={"oldPassword": "secret123", "newPassword": "x"})
    assert response.status_code == 401


def test_plaintext_password_is_upgraded_on_login(db_path, seed_document):
    seed_document["user"] = [{
        "id": "C01", "email": "old@example.com", "password": "plain123",
        "name": "Old", "phone": "", "birthday": "", "createdAt": "2024-01-01T00:00:00.000Z",
    }]
    db_path.write_text(json.dumps(seed_document), encoding="utf-8")

    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as fresh_client:
        response = fresh_client.post("/login", json={"email": "old@example.com", "password": "plain123"})
        assert response.status_code == 200

    stored = json.loads(db_path.read_text(encoding="utf-8"))["user"][0]
    assert stored["password"].startswith("$2")


def test_service_errors(store):
    asyncio.run(auth_service.register_user("amy@example.com", "secret123"))
    asyncio.run(auth_service.register_user("ben@example.com", "secret123"))

    with pytest.raises(UnknownEmailError):
        asyncio.run(auth_service.login("nobody@example.com", "x"))
    with pytest.raises(InvalidPasswordError):
        asyncio.run(auth_service.login("amy@example.com", "wrong"))
    with pytest.raises(ForbiddenError):
        asyncio.run(auth_service.change_password("C01", "C02", "secret123", "new"))

    user, token = asyncio.run(auth_service.login("amy@example.com", "secret123"))
    assert asyncio.run(auth_service.authenticate(f"Bearer {token}")) == user["id"]


def test_bcrypt_work_does_not_block_event_loop(store, test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "BCRYPT_ROUNDS", 12)
    asyncio.run(auth_service.register_user("amy@example.com", "secret123"))

    async def run():
        done = False
        longest_gap = 0.0

        async def ticker():
            nonlocal longest_gap
            loop = asyncio.get_running_loop()
            last = loop.time()
            while not done:
                await asyncio.sleep(0.005)
                now = loop.time()
                longest_gap = max(longest_gap, now - last)
                last = now

        tick = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        try:
            await auth_service.login("amy@example.com", "secret123")
        finally:
            done = True
            await tick
        return longest_gap

    assert asyncio.run(run()) < 0.1
