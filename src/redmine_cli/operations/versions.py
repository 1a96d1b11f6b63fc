"""Version operations: list a project's versions and find one by name."""

from __future__ import annotations

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import VersionNotFoundError
from redmine_cli.redmine.models import Version


def list_versions(client: RedmineClient, project_id: int | str) -> list[Version]:
    return client.list_versions(project_id).versions


def find_version_by_name(client: RedmineClient, project_id: int | str, name: str) -> Version:
    """Return the version whose name equals ``name`` exactly (case-sensitive).

    Raises:
        VersionNotFoundError: naming the project and the version.
    """
    for version in list_versions(client, project_id):
        if version.name == name:
            return version
    raise VersionNotFoundError(project_id, name)
