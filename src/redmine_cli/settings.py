"""Configuration settings loaded from flags, environment variables and .env."""

from __future__ import annotations

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from redmine_cli.redmine.errors import RedmineConfigError

# field -> (human name, environment variable, flag)
_REQUIRED_HINTS = {
    "url": ("Redmine URL", "REDMINE_URL", "--url"),
    "api_key": ("Redmine API key", "REDMINE_API_KEY", "--key"),
}


class RedmineSettings(BaseSettings):
    """Redmine CLI settings.

    All settings are loaded from environment variables prefixed with REDMINE_,
    falling back to a ``.env`` file in the working directory. Keyword
    arguments passed to the constructor win over both, which is how the
    command-line flags take precedence.
    """

    model_config = {"env_prefix": "REDMINE_", "env_file": ".env", "extra": "ignore"}

    # Required
    url: str
    api_key: str

    # Optional
    timeout: int = 30
    log_level: str = "WARNING"
    page_size: int = 25
    search_page_size: int = 100


def load_settings(url: str | None = None, api_key: str | None = None) -> RedmineSettings:
    """Resolve settings with flag > environment precedence.

    Raises:
        RedmineConfigError: when the URL or API key is missing or empty.
    """
    overrides = {}
    if url:
        overrides["url"] = url
    if api_key:
        overrides["api_key"] = api_key

    try:
        settings = RedmineSettings(**overrides)
    except ValidationError as e:
        missing = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]
        for field in _REQUIRED_HINTS:
            if field in missing:
                raise RedmineConfigError(_missing_message(field)) from e
        raise RedmineConfigError(f"Invalid configuration: {e}") from e

    for field in _REQUIRED_HINTS:
        if not getattr(settings, field).strip():
            raise RedmineConfigError(_missing_message(field))
    return settings


def _missing_message(field: str) -> str:
    label, env_var, flag = _REQUIRED_HINTS[field]
    return f"{label} is not set. Please set {env_var} environment variable or use {flag} flag"
