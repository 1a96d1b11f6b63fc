"""Command-line client for the Redmine REST API."""

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.settings import RedmineSettings, load_settings

__all__ = ["RedmineClient", "RedmineSettings", "load_settings"]
