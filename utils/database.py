import logging
from typing import Tuple

from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

USERS = "users"
FACULTIES = "faculties"


def connect(uri: str, db_name: str, timeout_ms: int = 5000) -> Tuple[MongoClient, Database]:
    """
    Open the process-wide MongoDB connection.

    Pings the server so an unreachable database fails here, before the app
    accepts traffic, and makes sure usernames are unique at the index level.
    Raises RuntimeError on any driver error.
    """
    client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
    try:
        client.admin.command("ping")
        db = client.get_default_database(default=db_name)
        db[USERS].create_index([("username", ASCENDING)], unique=True)
    except PyMongoError as e:
        client.close()
        logger.error("MongoDB connection error: %s", e)
        raise RuntimeError(f"Could not connect to MongoDB: {e}") from e

    logger.info("MongoDB connected (database=%s)", db.name)
    return client, db


def get_db(request: Request) -> Database:
    return request.app.state.db
