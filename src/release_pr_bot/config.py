"""Configuration management using Pydantic settings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from release_pr_bot.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded once from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Required settings
    org_id: str = Field(
        ...,
        description="GitHub organization the app is installed on (also the repo owner)",
    )
    app_id: str = Field(
        ...,
        description="GitHub App ID, parsed as a 64-bit integer",
    )
    cert_path: str = Field(
        ...,
        description="Path to the GitHub App private key (PEM)",
    )
    webhook_secret: str = Field(
        ...,
        description="Secret for validating GitHub webhook signatures",
    )
    repo_name: str = Field(
        ...,
        description="Repository in which pull requests are created",
    )

    # Optional settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    head_branch: str = Field(default="develop", description="Head branch of created PRs")
    base_branch: str = Field(default="master", description="Base branch of created PRs")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3210, description="Server port")

    # Worker settings
    worker_count: int = Field(
        default=4,
        ge=1,
        description="Number of workers processing webhook events",
    )
    queue_size: int = Field(
        default=100,
        ge=1,
        description="Maximum number of events waiting for a worker",
    )

    @property
    def app_id_int(self) -> int:
        """App ID as an integer; 0 when APP_ID is not a valid int64."""
        try:
            value = int(self.app_id)
        except ValueError:
            logger.warning(f"APP_ID is not an integer: {self.app_id!r}, using 0")
            return 0
        if not -(2**63) <= value < 2**63:
            logger.warning(f"APP_ID is out of int64 range: {self.app_id!r}, using 0")
            return 0
        return value

    def get(self, key: str) -> str:
        """Look up a setting by its environment variable name."""
        name = key.lower()
        if name not in type(self).model_fields:
            return ""
        return str(getattr(self, name))


ENV_FILE = ".env"


def load_settings(env_file: str = ENV_FILE) -> Settings:
    """
    Load settings from an env file plus the process environment.

    Raises:
        ConfigurationError: If the env file cannot be read
        ValidationError: If a required setting is missing
    """
    path = Path(env_file)
    try:
        path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Error loading {env_file} file: {e}") from e

    return Settings(_env_file=path)  # type: ignore[call-arg]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
