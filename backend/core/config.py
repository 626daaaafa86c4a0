from functools import lru_cache

from pydantic_settings import BaseSettings

MIB = 1024 * 1024


class Settings(BaseSettings):
    APP_NAME: str = "Nite Store API"
    APP_VERSION: str = "0.1.0"

    # Backend
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 5000
    APP_DEBUG: bool = True
    CLIENT_URL: str = "http://localhost:5173"  # CORS origin, credentials allowed

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    SLOW_REQUEST_MS: float = 1000

    # Uploads
    UPLOAD_MAX_FILE_SIZE: int = 5 * MIB
    UPLOAD_MAX_FILES: int = 10
    UPLOAD_IMAGE_MIME_TYPES: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    ]
    # None leaves the multi-file rule without a MIME allow-list
    UPLOAD_MULTIPLE_MIME_TYPES: list[str] | None = None

    # Multipart text fields
    FORM_MAX_FIELDS: int = 1000
    FORM_MAX_FIELD_SIZE: int = MIB

    # OTP issuance
    OTP_DAILY_LIMIT: int = 3
    OTP_MAX_FAILED_ATTEMPTS: int = 5

    @property
    def is_production(self) -> bool:
        return not self.APP_DEBUG

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
