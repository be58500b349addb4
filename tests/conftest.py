import os

os.environ.setdefault("ENVIRONMENT", "test")

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from pymongo import MongoClient  # noqa: E402

from database import Database  # noqa: E402
from main import create_app  # noqa: E402
from settings import Settings  # noqa: E402

COURSES = [
    {"id": 1, "title": "Guitar", "description": "Chords and strumming", "location": "Hendon",
     "subject": "Music", "spaces": 5},
    {"id": 2, "title": "Algebra", "description": "Equations and graphs", "location": "Colindale",
     "subject": "Maths", "spaces": 8},
    {"id": 3, "title": "Yoga", "description": "Breathing and flexibility", "location": "Brent Cross",
     "subject": "Fitness", "spaces": 10},
    {"id": 4, "title": "Chess", "description": "Openings and endgames", "location": "Hendon",
     "subject": "Games", "spaces": 8},
]


@pytest.fixture()
def settings():
    return Settings(environment="test")


@pytest.fixture()
def database():
    db = Database(mongomock.MongoClient(), "storefront_test")
    yield db
    db.close()


@pytest.fixture()
def unreachable_database():
    """A real client pointed at a port nothing listens on."""
    client = MongoClient("mongodb://127.0.0.1:1", serverSelectionTimeoutMS=100, connect=False)
    db = Database(client, "storefront_test")
    yield db
    db.close()


@pytest.fixture()
def courses(database):
    database["courses"].insert_many([dict(course) for course in COURSES])
    return database["courses"]


@pytest.fixture()
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture()
def client(app):
    return TestClient(app)
