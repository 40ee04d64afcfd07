from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration read from environment variables or a .env file.

    PORT and MONGO_URI keep the names used by the existing deployment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # ── MongoDB ───────────────────────────────────────────────────────────
    mongo_uri: str = Field(default="mongodb://localhost:27017/faculty_profiles")
    # used only when the URI does not name a database
    mongo_db_name: str = Field(default="faculty_profiles")
    mongo_timeout_ms: int = Field(default=5000, ge=100)

    # ── CORS ──────────────────────────────────────────────────────────────
    # comma-separated
    cors_origins: str = Field(default="https://faculty-profile-app.vercel.app")

    # ── Uploads ───────────────────────────────────────────────────────────
    upload_dir: str = Field(default="faculty_uploads")
    upload_url_prefix: str = Field(default="/faculty_uploads")

    bcrypt_rounds: int = Field(default=10, ge=10, le=31)

    log_level: str = Field(default="INFO")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @field_validator("upload_url_prefix")
    @classmethod
    def validate_upload_url_prefix(cls, v: str) -> str:
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("upload_url_prefix cannot be the site root")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper


settings = Settings()
