"""
Settings shared by the CLI, the fetch client and snapshot storage.

Every value can be overridden through the environment:

    TRAININGCAL_API_URL     base URL of the training-center API
    TRAININGCAL_API_TOKEN   bearer token sent with every request
    TRAININGCAL_DATA_DIR    where groups.json / sessions.json are cached
    TRAININGCAL_LOG_LEVEL   loguru level for the CLI
    TRAININGCAL_TIMEOUT     request timeout in seconds
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# PACKAGE_DIR always points to the folder where this file is located
PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_DATA_DIR = PACKAGE_DIR / "data" / "raw"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseSettings):
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float = DEFAULT_TIMEOUT

    # blank variables fall back to the defaults above
    model_config = SettingsConfigDict(env_prefix="TRAININGCAL_", env_ignore_empty=True, frozen=True)

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/") or DEFAULT_API_URL

    @field_validator("api_token", mode="before")
    @classmethod
    def blank_token_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper() or DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """
    Build Settings from the TRAININGCAL_* environment variables.
    """
    return Settings()
