import json

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.store import init_store, close_store
from app.main import app
from app.services.password_reset_service import reset_tokens


@pytest.fixture
def seed_document():
    return {
        "user": [],
        "menu": {
            "categories": [{"id": "cat1", "name": "Coffee"}],
            "products": [{"id": "p1", "categoryId": "cat1", "name": "Latte", "price": 120}],
            "extras": [{"id": "e1", "name": "Oat milk", "price": 15}],
        },
        "orders": [],
        "banners": [{"id": 1, "image": "/img/banner-1.jpg"}, {"id": 2, "image": "/img/banner-2.jpg"}],
    }


@pytest.fixture
def db_path(tmp_path, seed_document):
    path = tmp_path / "db.json"
    path.write_text(json.dumps(seed_document), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def test_settings(monkeypatch, tmp_path, db_path):
    monkeypatch.setattr(settings, "DB_PATH", str(db_path))
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "TOKEN_SCHEME", "jwt")
    monkeypatch.setattr(settings, "STATIC_INDEX_PATH", str(tmp_path / "dist" / "index.html"))
    reset_tokens.clear()
    yield settings
    reset_tokens.clear()
    close_store()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store(db_path):
    return init_store(db_path)

