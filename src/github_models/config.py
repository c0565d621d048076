"""Configuration management with pydantic-settings for github-models.

- pydantic-settings for type-safe configuration
- .env file loading, environment variables take precedence
- SecretStr for the API token
- Frozen config (immutable after load)

References:
- Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "GitHubModelsConfig",
    "get_config",
    "reset_config",
]

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_API_VERSION = "2022-11-28"
DEFAULT_PAGE_SIZE = 30  # GitHub's own per_page default
MAX_PAGE_SIZE = 100  # GitHub rejects larger per_page values

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class GitHubModelsConfig(BaseSettings):
    """Configuration for the GitHub data models.

    Loads from (in order of precedence):
    1. Keyword arguments
    2. Environment variables (GITHUB_MODELS_ prefix; token also from GITHUB_TOKEN)
    3. .env file in the working directory
    4. Default values

    Attributes:
        token: GitHub token sent as a Bearer credential (optional)
        base_url: REST API root, also the root of the /graphql endpoint
        api_version: Value of the X-GitHub-Api-Version header
        user_agent: User-Agent header value
        page_size: Default per_page for list models (1-100)
        connect_timeout: httpx connect timeout in seconds
        read_timeout: httpx read timeout in seconds
        log_level: Logging level for the github_models logger
        log_format: json for machine consumption, text for development
    """

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_MODELS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    token: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("GITHUB_MODELS_TOKEN", "GITHUB_TOKEN"),
        description="GitHub personal access token. Empty means anonymous requests.",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="GitHub REST API base URL (GitHub Enterprise: https://host/api/v3)",
    )

    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        description="REST API version requested through X-GitHub-Api-Version",
    )

    user_agent: str = Field(
        default="github-models/0.1",
        description="User-Agent header sent with every request",
    )

    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Default page size for list models",
    )

    connect_timeout: float = Field(default=5.0, gt=0, description="Connect timeout (seconds)")

    read_timeout: float = Field(default=30.0, gt=0, description="Read timeout (seconds)")

    log_level: str = Field(default="WARNING", description="Logging level")

    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text formatters exist."""
        fmt = v.lower()
        if fmt not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return fmt


@lru_cache(maxsize=1)
def get_config() -> GitHubModelsConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Returns:
        GitHubModelsConfig singleton instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return GitHubModelsConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code.
    """
    get_config.cache_clear()
