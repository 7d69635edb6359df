"""
Anagram server configuration
"""
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANAGRAM_", env_file=".env")

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # Dictionary file ingested at startup (whitespace-delimited words)
    PRELOAD: Optional[str] = None

    LOG_LEVEL: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
