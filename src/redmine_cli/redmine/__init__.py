from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import (
    EmptyUpdateError,
    RedmineAPIError,
    RedmineAuthenticationError,
    RedmineConfigError,
    RedmineError,
    RedmineMalformedResponseError,
    RedmineNotFoundError,
    RedmineTransportError,
    RedmineValidationError,
    VersionNotFoundError,
)

__all__ = [
    "RedmineClient",
    "EmptyUpdateError",
    "RedmineAPIError",
    "RedmineAuthenticationError",
    "RedmineConfigError",
    "RedmineError",
    "RedmineMalformedResponseError",
    "RedmineNotFoundError",
    "RedmineTransportError",
    "RedmineValidationError",
    "VersionNotFoundError",
]
