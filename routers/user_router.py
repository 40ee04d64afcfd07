import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from passlib.context import CryptContext
from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from models.user_model import UserCredentials
from utils.database import USERS, get_db
from utils.exceptions import ConflictError, InternalError, UnauthorizedError

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_pwd_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def hash_password(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


async def read_credentials(request: Request) -> UserCredentials:
    """Accept the credentials either as a JSON body or as a URL-encoded form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        data = dict(await request.form())
    else:
        try:
            data = await request.json()
        except ValueError:
            data = None
    try:
        return UserCredentials.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(
    credentials: UserCredentials = Depends(read_credentials),
    db: Database = Depends(get_db),
    pwd_context: CryptContext = Depends(get_pwd_context),
):
    try:
        existing_user = db[USERS].find_one({"username": credentials.username})
        if existing_user:
            raise ConflictError("Username already exists")
        db[USERS].insert_one(
            {"username": credentials.username, "password": hash_password(pwd_context, credentials.password)}
        )
    except DuplicateKeyError as e:
        # lost a race against a concurrent registration
        raise ConflictError("Username already exists") from e
    except PyMongoError as e:
        logger.exception("Registration failed for %s", credentials.username)
        raise InternalError("Server error") from e

    logger.info("Registered user %s", credentials.username)
    return {"message": "User registered successfully"}


@router.post("/login")
def login_user(
    credentials: UserCredentials = Depends(read_credentials),
    db: Database = Depends(get_db),
    pwd_context: CryptContext = Depends(get_pwd_context),
):
    try:
        user = db[USERS].find_one({"username": credentials.username})
        if not user or not verify_password(pwd_context, credentials.password, user["password"]):
            raise UnauthorizedError()
    except (PyMongoError, ValueError) as e:
        logger.exception("Login failed for %s", credentials.username)
        raise InternalError("Error logging in") from e

    return {"message": f"Welcome {user['username']}", "username": user["username"]}
