from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COMMERCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    BASE_URL: str = "https://api.example.com"
    API_VERSION: Optional[str] = None
    ACCESS_TOKEN: Optional[str] = None
    USER_AGENT: str = "commerce-records/0.1.0"

    # Transport settings
    DEFAULT_TIMEOUT: float = 10.0  # seconds

    # Rate limit settings
    WAIT_WHEN_API_LIMIT_EXCEEDED: bool = True
    DEFAULT_RATE_LIMIT_WAIT: float = 30.0  # seconds
    RATE_LIMIT_RESET_HEADER: str = "X-Rate-Limit-Reset"

    # Pagination settings
    PAGINATION_HEADER: str = "X-Pagination"
    DEFAULT_PAGE_LIMIT: int = 100

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = False

    @field_validator("BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be joined with a single slash."""
        return v.rstrip("/")

    @field_validator("DEFAULT_RATE_LIMIT_WAIT", "DEFAULT_TIMEOUT")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v


def load_env_file(env_file: str = ".env") -> bool:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".

    Returns:
        bool: True if the file existed and was loaded
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        return load_dotenv(env_path)
    return False


@lru_cache()
def get_settings() -> Settings:
    """
    Get client settings with caching for efficiency.

    Returns:
        Settings: Client settings instance
    """
    return Settings()
