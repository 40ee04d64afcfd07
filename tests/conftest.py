"""
Shared fixtures: an in-memory MongoDB (mongomock), a temporary upload
directory and a TestClient over a freshly built application.

Route tests never enter the application lifespan, so no real MongoDB
server is needed.
"""

import os
import tempfile

# must be set before the application modules read their settings
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="faculty_uploads_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "http://frontend.test"

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo import ASCENDING

from main import create_app
from utils.config import Settings
from utils.database import USERS, get_db


@pytest.fixture
def mongo_db():
    client = mongomock.MongoClient()
    db = client["faculty_profiles_test"]
    db[USERS].create_index([("username", ASCENDING)], unique=True)
    yield db
    client.close()


@pytest.fixture
def upload_dir(tmp_path):
    directory = tmp_path / "faculty_uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def app(mongo_db, upload_dir):
    application = create_app(
        Settings(
            upload_dir=str(upload_dir),
            cors_origins="http://frontend.test",
            log_level="WARNING",
        )
    )
    application.dependency_overrides[get_db] = lambda: mongo_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def jpeg_bytes():
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


@pytest.fixture
def png_bytes():
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


@pytest.fixture
def faculty_data():
    return {
        "name": "Dr. Asha Rao",
        "designation": "Associate Professor",
        "department": "Computer Science",
        "publications": "Graph Mining at Scale (2021)",
        "researchProjects": "Federated learning for hospitals",
        "articlesAndJournals": "IEEE TKDE",
        "workshops": "Deep Learning Bootcamp",
        "coursesHandled": "Data Structures; Compilers",
        "awardsReceived": "Best Teacher 2022",
    }
