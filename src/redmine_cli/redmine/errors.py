"""Redmine exception hierarchy."""

from __future__ import annotations


class RedmineError(Exception):
    """Base exception for everything the client reports."""


class RedmineConfigError(RedmineError):
    """Raised when the base URL or API key is missing or invalid."""


class RedmineAPIError(RedmineError):
    """Base exception for Redmine API errors."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class RedmineAuthenticationError(RedmineAPIError):
    """Raised when authentication fails (401)."""

    def __init__(self, url: str | None = None):
        super().__init__(
            f"Authentication failed: invalid API key or unauthorized access\nURL: {url}",
            status_code=401,
            url=url,
        )


class RedmineNotFoundError(RedmineAPIError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str = "Resource not found.", url: str | None = None, status_code: int | None = 404):
        super().__init__(message, status_code=status_code, url=url)


class RedmineTransportError(RedmineAPIError):
    """Raised when the request never produced a response (DNS, connect, timeout)."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, url=url)


class RedmineMalformedResponseError(RedmineAPIError):
    """Raised when the body is HTML or cannot be decoded into the expected record."""


class VersionNotFoundError(RedmineNotFoundError):
    """Raised when no version of a project carries the requested name."""

    def __init__(self, project_id: str | int, version_name: str):
        self.project_id = project_id
        self.version_name = version_name
        super().__init__(
            f"Version '{version_name}' not found in project '{project_id}'",
            status_code=None,
        )


class RedmineValidationError(RedmineError):
    """Raised before any request when the caller's input is incomplete."""


class EmptyUpdateError(RedmineValidationError):
    """Raised when an update carries no field at all."""

    def __init__(self, message: str = "No updates specified."):
        super().__init__(message)
