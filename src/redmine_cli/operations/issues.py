"""Issue operations: list, get, create, update, comment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from redmine_cli.operations.custom_fields import parse_assignment, resolve_custom_fields
from redmine_cli.operations.projects import resolve_project_id
from redmine_cli.operations.versions import find_version_by_name
from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import EmptyUpdateError, RedmineValidationError
from redmine_cli.redmine.models import Issue, IssueCreate, IssuesPage, IssueUpdate

logger = logging.getLogger("redmine_cli")

DEFAULT_PAGE_SIZE = 25


@dataclass
class IssueFilter:
    """Filter for the issue listing. Empty fields are not sent."""

    project_id: str | None = None
    status_id: str | None = None
    assigned_to: str | None = None  # user id or "me"
    limit: int | None = None
    offset: int | None = None

    def to_params(self, default_limit: int = DEFAULT_PAGE_SIZE) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.project_id:
            params["project_id"] = self.project_id
        if self.status_id:
            params["status_id"] = self.status_id
        if self.assigned_to:
            params["assigned_to_id"] = self.assigned_to
        params["limit"] = str(self.limit if self.limit and self.limit > 0 else default_limit)
        if self.offset and self.offset > 0:
            params["offset"] = str(self.offset)
        return params


def list_issues(
    client: RedmineClient,
    issue_filter: IssueFilter | None = None,
    default_limit: int = DEFAULT_PAGE_SIZE,
) -> IssuesPage:
    """Fetch one page of issues matching the filter."""
    return client.list_issues((issue_filter or IssueFilter()).to_params(default_limit))


def get_issue(client: RedmineClient, issue_id: int, include_journals: bool = False) -> Issue:
    return client.get_issue(issue_id, include_journals=include_journals)


def create_issue(client: RedmineClient, payload: IssueCreate) -> Issue:
    """Create an issue. ``payload.project_id`` must already be numeric.

    Raises:
        RedmineValidationError: empty subject or missing project, before any request.
    """
    if not payload.subject.strip():
        raise RedmineValidationError("Issue subject is required.")
    if payload.project_id <= 0:
        raise RedmineValidationError("A resolved project id is required.")
    created = client.create_issue(payload)
    logger.info("Created issue #%d in project %s", created.id, created.project.name)
    return created


def create_issue_in_project(
    client: RedmineClient,
    project: str,
    subject: str,
    field_assignments: list[str] | None = None,
    **fields: Any,
) -> Issue:
    """Resolve ``project`` (id or identifier) and create the issue in it.

    ``field_assignments`` are ``ID=VALUE`` strings; only numeric ids can be
    used here because a new issue has no custom fields to resolve names against.
    """
    if not subject or not subject.strip():
        raise RedmineValidationError("Issue subject is required.")
    if not project:
        raise RedmineValidationError("Project is required.")

    custom_fields = resolve_custom_fields(field_assignments or [], known=None)
    payload = IssueCreate(
        project_id=resolve_project_id(client, project),
        subject=subject,
        custom_fields=custom_fields or None,
        **{k: v for k, v in fields.items() if v is not None},
    )
    return create_issue(client, payload)


def update_issue(client: RedmineClient, issue_id: int, payload: IssueUpdate) -> None:
    """Send a partial update.

    Raises:
        EmptyUpdateError: if the payload has no field set; no request is made.
    """
    if payload.is_empty():
        raise EmptyUpdateError()
    client.update_issue(issue_id, payload)
    logger.info("Updated issue #%d (%s)", issue_id, ", ".join(sorted(payload.model_fields_set)))


def add_comment(client: RedmineClient, issue_id: int, text: str) -> None:
    """Add a note to an issue without touching any other field."""
    if not text or not text.strip():
        raise RedmineValidationError("Comment cannot be empty.")
    update_issue(client, issue_id, IssueUpdate(notes=text))


def resolve_assignee(client: RedmineClient, assignee: str) -> int:
    """Turn ``"me"`` or a numeric string into a user id."""
    if assignee == "me":
        return client.get_current_user().id
    if assignee.isdigit():
        return int(assignee)
    raise RedmineValidationError(f"Invalid assignee '{assignee}': use a user id or 'me'.")


def build_issue_update(
    client: RedmineClient,
    issue_id: int,
    changes: dict[str, Any] | None = None,
    assignee: str | None = None,
    version_name: str | None = None,
    field_assignments: list[str] | None = None,
) -> IssueUpdate:
    """Assemble an ``IssueUpdate`` from user input, resolving names to ids.

    Only keys present in ``changes`` are set on the payload. A version name
    costs extra round trips: the issue is fetched to learn its project, then
    the project's versions are listed and matched by exact name. Custom field
    names are resolved against the fields the issue already carries, and so
    is any comma-separated value, since only the field definition says
    whether it holds multiple values.

    Raises:
        RedmineValidationError: malformed ``KEY=VALUE`` input, before any request.
    """
    data: dict[str, Any] = dict(changes or {})
    parsed = [parse_assignment(a) for a in field_assignments or []]

    if assignee:
        data["assigned_to_id"] = resolve_assignee(client, assignee)

    issue: Issue | None = None
    needs_issue = bool(version_name) or any(
        not key.isdigit() or "," in value for key, value in parsed
    )
    if needs_issue:
        issue = client.get_issue(issue_id)

    if version_name:
        version = find_version_by_name(client, issue.project.id, version_name)
        data["fixed_version_id"] = version.id

    if field_assignments:
        known = issue.custom_fields if issue is not None else None
        data["custom_fields"] = resolve_custom_fields(field_assignments, known=known)

    return IssueUpdate(**data)
