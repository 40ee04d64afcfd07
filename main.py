import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from routers import faculty_routes, user_router
from utils.config import Settings, settings
from utils.database import connect
from utils.exceptions import FacultyAppError
from utils.uploads import PhotoStore

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("pymongo").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings
    # a RuntimeError here aborts startup and uvicorn exits
    client, app.state.db = connect(
        app_settings.mongo_uri,
        app_settings.mongo_db_name,
        app_settings.mongo_timeout_ms,
    )
    logger.info("Server running at http://%s:%d", app_settings.host, app_settings.port)

    yield

    client.close()
    logger.info("MongoDB connection closed")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FacultyAppError)
    async def handle_app_error(request: Request, exc: FacultyAppError):
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Server error"},
        )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level)

    app = FastAPI(title="Faculty Profile API", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.photo_store = PhotoStore(app_settings.upload_dir, app_settings.upload_url_prefix)
    app.state.pwd_context = user_router.build_password_context(app_settings.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.mount(
        app.state.photo_store.url_prefix,
        StaticFiles(directory=str(app.state.photo_store.directory)),
        name="faculty_uploads",
    )

    register_exception_handlers(app)

    app.include_router(user_router.router, tags=["Users"])
    app.include_router(faculty_routes.router, prefix="/api/faculty", tags=["Faculty"])

    @app.get("/")
    async def root():
        return {"message": "Backend API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
