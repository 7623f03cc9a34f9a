from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

from linkshort.utils.encoding import MAX_SHORT_CODE_LENGTH


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"

    # Public address short links are built from (required to start app)
    BASE_URL: str

    # Storage
    STORE_BACKEND: Literal["sql", "memory"] = "sql"
    DATABASE_URL: str = "sqlite:///./url.db"

    # Optional shared cache / counter backend
    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 86400
    CACHE_SIZE: int = 10000

    # Code generation
    CODE_STRATEGY: Literal["random", "counter"] = "random"
    SHORT_CODE_LENGTH: int = 7
    MAX_CREATE_ATTEMPTS: int = 5

    MAX_URL_LENGTH: int = 2048
    REQUEST_TIMEOUT_SECONDS: float = 2.0
    DEDUPLICATE_URLS: bool = True
    TRACK_HITS: bool = True

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @field_validator("BASE_URL")
    def validate_base_url(cls, v):
        v = v.strip()
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("SHORT_CODE_LENGTH")
    def validate_code_length(cls, v):
        if not 4 <= v <= MAX_SHORT_CODE_LENGTH:
            raise ValueError(f"SHORT_CODE_LENGTH must be between 4 and {MAX_SHORT_CODE_LENGTH}")
        return v

    @field_validator("MAX_CREATE_ATTEMPTS", "CACHE_SIZE")
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("must be at least 1")
        return v


settings = Settings()
