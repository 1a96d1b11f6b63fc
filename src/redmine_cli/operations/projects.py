"""Project operations: list and get project details."""

from __future__ import annotations

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.models import Project


def list_projects(client: RedmineClient) -> list[Project]:
    """List up to 100 projects visible to the API key.

    There is no pagination loop; larger installations are truncated.
    """
    return client.list_projects().projects


def get_project(client: RedmineClient, id_or_identifier: int | str) -> Project:
    """Get a project by numeric id or identifier, trackers included."""
    return client.get_project(id_or_identifier)


def resolve_project_id(client: RedmineClient, id_or_identifier: int | str) -> int:
    return get_project(client, id_or_identifier).id
