from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from main import create_app
from routers.user_router import build_password_context, hash_password, verify_password
from utils.config import Settings
from utils.database import USERS, get_db


def register(client, username="janedoe", password="s3cret"):
    return client.post("/register", json={"username": username, "password": password})


class TestRegister:

    def test_register_creates_user(self, app, client, mongo_db):
        response = register(client)

        assert response.status_code == 201
        assert response.json() == {"message": "User registered successfully"}
        user = mongo_db[USERS].find_one({"username": "janedoe"})
        assert user is not None
        assert user["password"] != "s3cret"
        assert verify_password(app.state.pwd_context, "s3cret", user["password"])

    def test_register_twice_conflicts(self, client, mongo_db):
        assert register(client).status_code == 201

        response = register(client, password="another")

        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"
        assert mongo_db[USERS].count_documents({"username": "janedoe"}) == 1

    def test_register_accepts_urlencoded_form(self, client, mongo_db):
        response = client.post("/register", data={"username": "formuser", "password": "pw"})

        assert response.status_code == 201
        assert mongo_db[USERS].find_one({"username": "formuser"}) is not None

    def test_register_missing_password_is_rejected(self, client):
        response = client.post("/register", json={"username": "janedoe"})

        assert response.status_code == 422

    def test_register_database_failure_is_internal_error(self, app, client):
        broken_db = MagicMock()
        broken_db.__getitem__.return_value.find_one.side_effect = PyMongoError("down")
        app.dependency_overrides[get_db] = lambda: broken_db

        response = register(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}

    def test_concurrent_duplicate_insert_conflicts(self, app, client):
        racing_db = MagicMock()
        racing_db.__getitem__.return_value.find_one.return_value = None
        racing_db.__getitem__.return_value.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        app.dependency_overrides[get_db] = lambda: racing_db

        response = register(client)

        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"

    def test_register_hashes_with_app_settings_rounds(self, mongo_db, upload_dir):
        app = create_app(Settings(upload_dir=str(upload_dir), bcrypt_rounds=11, log_level="WARNING"))
        app.dependency_overrides[get_db] = lambda: mongo_db

        response = register(TestClient(app))

        assert response.status_code == 201
        stored_hash = mongo_db[USERS].find_one({"username": "janedoe"})["password"]
        assert stored_hash.split("$")[2] == "11"


class TestLogin:

    def test_login_success_returns_username(self, client):
        register(client)

        response = client.post("/login", json={"username": "janedoe", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json() == {"message": "Welcome janedoe", "username": "janedoe"}

    def test_login_with_form_body(self, client):
        register(client)

        response = client.post("/login", data={"username": "janedoe", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json()["username"] == "janedoe"

    def test_wrong_password_and_unknown_user_look_the_same(self, client):
        register(client)

        wrong_password = client.post("/login", json={"username": "janedoe", "password": "nope"})
        unknown_user = client.post("/login", json={"username": "ghost", "password": "s3cret"})

        assert wrong_password.status_code == unknown_user.status_code == 400
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["message"] == "Invalid username or password"

    def test_login_does_not_issue_a_token(self, client):
        register(client)

        response = client.post("/login", json={"username": "janedoe", "password": "s3cret"})

        assert set(response.json()) == {"message", "username"}
        assert "set-cookie" not in response.headers

    def test_login_database_failure_is_internal_error(self, app, client):
        broken_db = MagicMock()
        broken_db.__getitem__.return_value.find_one.side_effect = PyMongoError("down")
        app.dependency_overrides[get_db] = lambda: broken_db

        response = client.post("/login", json={"username": "janedoe", "password": "s3cret"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error logging in"}


def test_hash_password_is_salted():
    pwd_context = build_password_context(10)
    first = hash_password(pwd_context, "same-password")
    second = hash_password(pwd_context, "same-password")

    assert first != second
    assert verify_password(pwd_context, "same-password", first)
    assert verify_password(pwd_context, "same-password", second)
    # bcrypt cost factor lives in the hash: $2b$<rounds>$
    assert int(first.split("$")[2]) >= 10
