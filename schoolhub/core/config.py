import os
import json
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, EmailStr, field_validator
from typing import Annotated, Optional, List, Dict, Set
from datetime import timedelta


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "SchoolHub"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(...)
    DATABASE_ECHO: bool = Field(default=False)

    # Authentication Settings
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24)
    TOKEN_ISSUER: str = Field(default="schoolhub")
    PASSWORD_HASH_ROUNDS: int = Field(default=12)
    DEFAULT_PASSWORD: str = Field(default="password")

    # Cookie Settings
    COOKIE_NAME: str = Field(default="access_token")
    COOKIE_SECURE: bool = Field(default=True)
    COOKIE_HTTPONLY: bool = Field(default=True)
    COOKIE_SAMESITE: str = Field(default="lax")
    COOKIE_PATH: str = Field(default="/")

    # CORS Settings
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    # File Upload Settings
    STORAGE_BACKEND: str = Field(default="local")
    UPLOAD_FOLDER: str = Field(default="uploads")
    MAX_UPLOAD_SIZE: int = Field(default=5 * 1024 * 1024)
    ALLOWED_IMAGE_TYPES: Annotated[Set[str], NoDecode] = Field(
        default={"image/jpeg", "image/png", "image/webp", "image/gif", "image/svg+xml"}
    )
    DROPBOX_ACCESS_TOKEN: Optional[str] = Field(default=None)
    DROPBOX_ROOT: str = Field(default="/schoolhub")

    # Student Settings
    DEFAULT_ADMISSION_PREFIX: str = Field(default="HALL")

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    # Bootstrap super administrator, created on startup when both are set
    SUPER_ADMIN_EMAIL: Optional[EmailStr] = Field(default=None)
    SUPER_ADMIN_PASSWORD: Optional[str] = Field(default=None)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("ALLOWED_IMAGE_TYPES", mode="before")
    @classmethod
    def parse_allowed_image_types(cls, v):
        if isinstance(v, str):
            return set(t.strip().lower() for t in v.split(",") if t.strip())
        return v

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("local", "dropbox"):
            raise ValueError("STORAGE_BACKEND must be 'local' or 'dropbox'")
        return v

    @field_validator("PASSWORD_HASH_ROUNDS")
    @classmethod
    def validate_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )


# Initialize settings
settings = Settings()


# Helper Functions
def get_token_expires_delta(minutes: Optional[int] = None) -> timedelta:
    if minutes is None:
        minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return timedelta(minutes=minutes)


def get_jwt_settings() -> dict:
    return {
        "secret_key": settings.SECRET_KEY,
        "algorithm": settings.ALGORITHM,
        "access_token_expire_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        "token_issuer": settings.TOKEN_ISSUER
    }


def get_upload_folder() -> str:
    folder = os.path.abspath(settings.UPLOAD_FOLDER)
    os.makedirs(folder, exist_ok=True)
    return folder


def get_logging_config() -> Dict[str, Optional[str]]:
    return {
        "log_level": settings.LOG_LEVEL,
        "log_dir": settings.LOG_DIR
    }
