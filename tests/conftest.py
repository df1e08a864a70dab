"""
Fixtures chung cho pytest:
- app FastAPI mới cho mỗi test (store rỗng, bcrypt rounds thấp cho nhanh)
- TestClient
- payload đăng ký mẫu
"""

import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("MEMBERS_BCRYPT_ROUNDS", "4")
os.environ.pop("MEMBERS_API_KEY", None)

from config import Settings
from main import create_app


@pytest.fixture
def settings():
    return Settings(bcrypt_rounds=4)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def member_payload():
    return {
        "email": "a@b.com",
        "password": "pw1",
        "name": "A",
        "date_of_birth": "2000-01-01",
        "gender": "F",
        "address": "X",
        "subscribed": True,
    }


@pytest.fixture
def registered(client, member_payload):
    resp = client.post("/register", json=member_payload)
    assert resp.status_code == 200
    return member_payload
