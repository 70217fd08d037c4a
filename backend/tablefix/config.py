"""
Runtime settings, read from the environment.

Values may also come from a .env file in the working directory; main.py
additionally calls load_dotenv() before anything else.

    TABLEFIX_CORS_ORIGINS      comma-separated list of allowed origins
    TABLEFIX_LOG_LEVEL         DEBUG, INFO, WARNING, ... (default INFO)
    TABLEFIX_MAX_UPLOAD_BYTES  largest accepted upload (default 5 MiB)
    TABLEFIX_SAMPLE_SIZE       default rows used for column type inference
"""

from typing import Annotated, List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TABLEFIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Plain comma-separated text, not JSON
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS)
    )
    log_level: str = "INFO"
    max_upload_bytes: int = Field(5 * 1024 * 1024, gt=0)
    sample_size: int = Field(50, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


def get_settings() -> Settings:
    """Build Settings from the current environment; unset variables keep their defaults."""
    return Settings()
