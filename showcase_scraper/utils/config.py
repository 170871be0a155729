"""Configuration management system using Pydantic v2 and YAML.

This module provides type-safe configuration loading with validation
for the showcase scraper. Every setting has a default, so a missing
default config file simply yields ``AppConfig()``.
"""

import os
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigurationError


CONFIG_ENV_VAR = "SHOWCASE_SCRAPER_CONFIG"
DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/101.0.4951.64 Safari/537.36"
)


class ScraperConfig(BaseModel):
    """Configuration for listing discovery and project scraping."""

    base_url: str = Field(default="https://ethglobal.com/showcase", description="Paginated listing URL")
    site_origin: Optional[str] = Field(
        default=None, description="Origin prepended to relative item links (default: derived from base_url)"
    )
    max_pages: int = Field(default=10000, ge=1, description="Upper bound on listing pages to visit")
    page_concurrency: int = Field(default=100, ge=1, description="Listing pages fetched in parallel")
    project_concurrency: int = Field(default=10, ge=1, description="Project pages fetched in parallel")
    batch_delay: float = Field(default=2.0, ge=0.0, description="Pause between batches in seconds")
    max_retries: int = Field(default=3, ge=0, description="Re-attempts after a failed request")
    retry_delay: float = Field(default=3.0, ge=0.0, description="Pause between attempts in seconds")
    timeout: float = Field(default=10.0, gt=0.0, description="Per-request timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header sent with every request")
    pagination_policy: Literal["last", "any"] = Field(
        default="last",
        description="'last': the last page of a batch decides whether to continue; "
                    "'any': continue if any page in the batch has a next page",
    )
    show_progress: bool = Field(default=True, description="Display tqdm progress bars")

    @field_validator('base_url', 'site_origin')
    @classmethod
    def validate_http_url(cls, v: Optional[str]) -> Optional[str]:
        """Require an absolute http(s) URL."""
        if v is None:
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError("URL must be absolute and start with http:// or https://")
        return v

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Ensure a user agent is provided."""
        if not v.strip():
            raise ValueError("user_agent must not be empty")
        return v

    @property
    def origin(self) -> str:
        """Origin used to absolutize relative item links."""
        if self.site_origin:
            return self.site_origin.rstrip('/')
        parsed = urlparse(self.base_url)
        return f"{parsed.scheme}://{parsed.netloc}"


class OutputConfig(BaseModel):
    """Configuration for export destinations."""

    csv_path: str = Field(default="ethglobal_projects.csv", description="CSV file for scraped projects")
    failed_json_path: str = Field(
        default="ethglobal_failed_projects.json", description="JSON file for permanently failed projects"
    )


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""

    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[str] = Field(default=None, description="Directory for rotating log files")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Choose from: {valid_levels}")
        return v_upper


# Singleton pattern for configuration
_config: Optional[AppConfig] = None


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Load and validate configuration from a YAML file.

    Resolution order: explicit ``config_path``, then the
    SHOWCASE_SCRAPER_CONFIG environment variable, then
    ``config/config.yaml`` in the working directory. When none of these is
    given and the default file is absent, built-in defaults are used.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigFileNotFoundError: If an explicitly requested file doesn't exist
        ConfigurationError: If the YAML or its values are invalid
    """
    explicit = True
    if config_path is None:
        env_config_path = os.environ.get(CONFIG_ENV_VAR)
        if env_config_path:
            config_path = Path(env_config_path)
        else:
            config_path = DEFAULT_CONFIG_PATH
            explicit = False
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        if explicit:
            raise ConfigFileNotFoundError(
                f"Configuration file not found: {config_path}. "
                f"Copy config/config.example.yaml and customize it, "
                f"or unset {CONFIG_ENV_VAR}.",
                path=str(config_path),
            )
        return AppConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse {config_path}: {e}", context={"path": str(config_path)}
        ) from e

    return build_config(config_dict, source=str(config_path))


def build_config(config_dict: dict, source: str = "<dict>") -> AppConfig:
    """Validate a raw mapping into an AppConfig.

    Args:
        config_dict: Raw configuration values
        source: Where the values came from, for error messages

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration in {source} must be a mapping", context={"source": source}
        )
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source}: {e}", context={"source": source}
        ) from e


def get_config(config_path: Optional[Path | str] = None, reload: bool = False) -> AppConfig:
    """Get configuration instance (singleton pattern).

    Args:
        config_path: Path to configuration file (only used on first call or if reload=True)
        reload: Force reload of configuration

    Returns:
        Cached or newly loaded AppConfig instance
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config


def reset_config() -> None:
    """Reset cached configuration (useful for testing)."""
    global _config
    _config = None
