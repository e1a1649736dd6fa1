from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the repository root directory (parent of the launchpad package)
REPO_ROOT = Path(__file__).parent.parent.absolute()


class Settings(BaseSettings):
    """Application settings."""

    # Version and environment
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Database settings
    DATABASE_URL: str = f"sqlite:///{REPO_ROOT / 'launchpad.db'}"
    DATABASE_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Pub/sub: None keeps an unbounded buffer per subscriber
    PUBSUB_MAX_BUFFER: Optional[int] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()


def get_settings() -> Settings:
    return settings
