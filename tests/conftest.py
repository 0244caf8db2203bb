"""Shared fixtures: in-memory Mongo, a mock scoring service and a test client."""

import mongomock
import pytest

from app import create_app
from auth import create_token, hash_password
from cache import TTLCache
from config import COLLECTION_NAME, USERS_COLLECTION
from errors import UpstreamUnavailableError
from scoring_client import parse_recommendations


# ============================================================================
# Mock Services
# ============================================================================

class MockScoringClient:
    """Stand-in for the external model.

    Set ``response`` to the decoded JSON body the model should return, or
    ``error`` to an exception instance to raise instead.
    """

    def __init__(self):
        self.response = {"recommendations": {"nearby_ids": [], "remote_ids": []}}
        self.error = None
        self.payloads = []

    @property
    def call_count(self):
        return len(self.payloads)

    def recommend(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return parse_recommendations(self.response)

    def go_down(self):
        self.error = UpstreamUnavailableError("connection refused")


class FakeClock:
    def __init__(self, now):
        self.now = now

    def time(self):
        return self.now


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def db():
    return mongomock.MongoClient().db


@pytest.fixture
def users(db):
    return db[USERS_COLLECTION]


@pytest.fixture
def internships(db):
    return db[COLLECTION_NAME]


@pytest.fixture
def cache():
    return TTLCache()


@pytest.fixture
def scoring():
    return MockScoringClient()


# ============================================================================
# App Fixtures
# ============================================================================

@pytest.fixture
def app(db, cache, scoring):
    app = create_app(db=db, cache=cache, scoring_client=scoring)
    app.config["TESTING"] = True
    yield app
    app.extensions["recommender"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def recommender(app):
    return app.extensions["recommender"]


@pytest.fixture
def make_user(users):
    def _make_user(**profile):
        doc = {
            "username": profile.pop("username", "asha"),
            "email": profile.pop("email", "asha@example.com"),
            "password": hash_password(profile.pop("password", "secret123")),
            "skills": [],
            "sectors": [],
            "education": "",
            "location": "",
        }
        doc.update(profile)
        doc["_id"] = users.insert_one(doc).inserted_id
        return doc
    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_token(user)}"}
    return _auth_headers


def internship(title, **fields):
    """Minimal internship document for seeding."""
    doc = {
        "title": title,
        "company_name": fields.pop("company_name", f"{title} Co"),
        "description": "",
        "sector": "",
        "skills": [],
        "location_city": "",
        "mode": "On-site",
        "stipend": 10000,
        "remote_work_allowed": False,
    }
    doc.update(fields)
    return doc
