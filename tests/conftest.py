import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["MONGODB_DB"] = "placement_test"
os.environ["ADMIN_EMAIL"] = "admin@college.edu"
os.environ["ADMIN_PASSWORD"] = "admin-pass"

import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_portal.db import mongodb
from placement_portal.main import app

ADMIN_EMAIL = "admin@college.edu"
ADMIN_PASSWORD = "admin-pass"

FULL_PROFILE = {
    "name": "Asha Patil",
    "className": "BE",
    "division": "3",
    "branch": "IT",
    "gender": "Female",
    "mobileNumber": "9876543210",
    "tenthMarks": 85,
    "twelfthMarks": 80,
    "cgpaAggregate": 8.2,
    "activeBacklog": "no",
}


@pytest.fixture(autouse=True)
def mongo_db():
    mongodb._client = mongomock.MongoClient()
    mongodb._db = None
    yield mongodb.get_mongo_db()
    mongodb.reset_mongo()


@pytest.fixture
def client(mongo_db):
    with TestClient(app) as test_client:
        yield test_client


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def register_student(client, email, password="secret123", profile=None):
    resp = client.post("/api/students/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    body = resp.json()
    if profile is not None:
        update = client.put("/api/students/profile", json=profile, headers=bearer(body["token"]))
        assert update.status_code == 200, update.text
    return body


def add_company(client, headers, name, tenth=70, twelfth=70, cgpa=7.5, backlog="no"):
    resp = client.post("/api/companies", headers=headers, json={
        "name": name,
        "visitingDate": "2026-11-15T10:00:00",
        "eligibility": {
            "tenthMarks": tenth,
            "twelfthMarks": twelfth,
            "cgpaAggregate": cgpa,
            "activeBacklog": backlog,
        },
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["company"]


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return bearer(resp.json()["token"])


@pytest.fixture
def student(client):
    """A fully registered student: returns (id, headers)."""
    body = register_student(client, "asha@college.edu", profile=FULL_PROFILE)
    return body["id"], bearer(body["token"])
