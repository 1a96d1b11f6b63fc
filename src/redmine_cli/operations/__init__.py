from redmine_cli.operations.issues import (
    IssueFilter,
    add_comment,
    build_issue_update,
    create_issue,
    create_issue_in_project,
    get_issue,
    list_issues,
    resolve_assignee,
    update_issue,
)
from redmine_cli.operations.projects import get_project, list_projects, resolve_project_id
from redmine_cli.operations.search import SearchOptions, search, search_all
from redmine_cli.operations.versions import find_version_by_name, list_versions

__all__ = [
    "IssueFilter",
    "SearchOptions",
    "add_comment",
    "build_issue_update",
    "create_issue",
    "create_issue_in_project",
    "find_version_by_name",
    "get_issue",
    "get_project",
    "list_issues",
    "list_projects",
    "list_versions",
    "resolve_assignee",
    "resolve_project_id",
    "search",
    "search_all",
    "update_issue",
]
