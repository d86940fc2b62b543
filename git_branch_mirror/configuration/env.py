"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from git_branch_mirror.configuration.models import CredentialType


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Repository settings
    REPOSITORY_PATH: Path = Path(".")
    BRANCH: str | None = None
    SOURCE_URL: str | None = None
    BRANCH_PATTERN: str | None = None
    FORCED_PREFIX: str | None = None

    # Credential settings
    SOURCE_TOKEN: str | None = None
    TARGET_TOKEN: str | None = None
    CREDENTIAL_TYPE: CredentialType = CredentialType.URL

    # Traversal settings
    SYNC_DELAY: float = 0.0
    CONTINUE_ON_ERROR: bool = False


settings = Settings()
