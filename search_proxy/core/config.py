from functools import lru_cache
from typing import Annotated, Any, List
import json
import os

from dotenv import load_dotenv
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from search_proxy.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    PROJECT_NAME: str = "Catalog Search Proxy"
    DOCS_URL: str = "/api"
    DEBUG: bool = False
    PORT: int = 3111

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # Upstream catalog settings
    WALMART_SEARCH_API_URL: str
    WALMART_CONSUMER_ID: str
    PRIVATE_KEY_PATH: str
    KEY_VERSION: str = "1"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    @field_validator("WALMART_SEARCH_API_URL", "WALMART_CONSUMER_ID", "PRIVATE_KEY_PATH")
    @classmethod
    def require_non_blank(cls, v: str) -> str:
        """Reject blank values for settings the upstream call cannot work without."""
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("UPSTREAM_TIMEOUT_SECONDS")
    @classmethod
    def require_positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            return json.loads(v)
        elif isinstance(v, list):
            return v
        raise ValueError(v)


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Invalid or missing configuration: {', '.join(fields)}",
            context={"fields": fields},
        ) from e
