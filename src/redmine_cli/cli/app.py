"""rd: command-line interface for Redmine."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from redmine_cli.cli import render
from redmine_cli.logging.logger import setup_logger
from redmine_cli.operations import (
    IssueFilter,
    SearchOptions,
    add_comment,
    build_issue_update,
    create_issue,
    create_issue_in_project,
    get_issue,
    list_issues,
    list_projects,
    list_versions,
    search,
    search_all,
    update_issue,
)
from redmine_cli.operations.search import SCOPES
from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import RedmineError
from redmine_cli.redmine.models import IssueCreate
from redmine_cli.settings import RedmineSettings, load_settings

app = typer.Typer(
    help="rd is a command-line interface for Redmine. Manage issues and projects from your terminal.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


@dataclass
class CLIState:
    url: str | None = None
    key: str | None = None
    json_output: bool = False
    debug: bool = False


@app.callback()
def main_options(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", help="Redmine URL (overrides REDMINE_URL)"),
    key: str | None = typer.Option(None, "--key", help="Redmine API key (overrides REDMINE_API_KEY)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
    debug: bool = typer.Option(False, "--debug", help="Log HTTP requests to stderr"),
):
    ctx.obj = CLIState(url=url, key=key, json_output=json_output, debug=debug)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


@contextmanager
def redmine_session(ctx: typer.Context) -> Iterator[tuple[RedmineClient, RedmineSettings]]:
    """Load settings and open a client; report any RedmineError and exit 1."""
    state: CLIState = ctx.obj or CLIState()
    try:
        settings = load_settings(url=state.url, api_key=state.key)
        logger = setup_logger(level="DEBUG" if state.debug else settings.log_level)
        with RedmineClient(
            settings.url, settings.api_key, timeout=settings.timeout, logger=logger
        ) as client:
            yield client, settings
    except RedmineError as e:
        _fail(str(e))


def _json_requested(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.json_output)


def _check_date(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not a date (expected YYYY-MM-DD)")
    return value


def _check_scope(value: str | None) -> str | None:
    if value is not None and value not in SCOPES:
        raise typer.BadParameter(f"scope must be one of: {', '.join(SCOPES)}")
    return value


# ----------------------------------------------------------------------
# Issues
# ----------------------------------------------------------------------


@app.command("list")
def list_command(
    ctx: typer.Context,
    project: str | None = typer.Option(None, "--project", "-p", help="Filter by project id or identifier"),
    status: str | None = typer.Option(None, "--status", "-s", help="Filter by status id (open, closed, * or a number)"),
    assignee: str | None = typer.Option(None, "--assignee", "-a", help="Filter by assignee id, or 'me'"),
    show_all: bool = typer.Option(False, "--all", help="Include closed issues"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Page size (default 25)"),
    offset: int | None = typer.Option(None, "--offset", min=0, help="Skip this many issues"),
    oneline: bool = typer.Option(False, "--oneline", help="Display in one line format"),
    as_csv: bool = typer.Option(False, "--csv", help="Output in CSV format"),
):
    """List Redmine issues."""
    issue_filter = IssueFilter(
        project_id=project,
        status_id=status or ("*" if show_all else None),
        assigned_to=assignee,
        limit=limit,
        offset=offset,
    )
    with redmine_session(ctx) as (client, settings):
        page = list_issues(client, issue_filter, default_limit=settings.page_size)

    if _json_requested(ctx):
        typer.echo(render.to_json(page))
    elif oneline:
        if page.issues:
            typer.echo(render.issues_oneline(page.issues))
    elif as_csv:
        typer.echo(render.issues_csv(page.issues), nl=False)
    else:
        console.print(render.issues_table(page.issues))
        console.print(
            f"Showing {len(page.issues)} of {page.total_count} issues (offset {page.offset})",
            style="dim",
        )


@app.command("get")
def get_command(
    ctx: typer.Context,
    issue_id: int = typer.Argument(..., help="Issue id"),
    comments: bool = typer.Option(False, "--comments", "-c", help="Include comments"),
):
    """Display detailed information about an issue."""
    with redmine_session(ctx) as (client, _settings):
        issue = get_issue(client, issue_id, include_journals=comments)

    if _json_requested(ctx):
        typer.echo(render.to_json(issue))
    else:
        render.print_issue_detail(console, issue)


@app.command("create")
def create_command(
    ctx: typer.Context,
    title: str | None = typer.Option(None, "--title", "-t", help="Issue title"),
    project: str | None = typer.Option(None, "--project", "-p", help="Project id or identifier"),
    description: str | None = typer.Option(None, "--description", "-d", help="Issue description"),
    assignee: int | None = typer.Option(None, "--assignee", "-a", help="Assignee user id"),
    tracker: int | None = typer.Option(None, "--tracker", help="Tracker id"),
    priority: int | None = typer.Option(None, "--priority", help="Priority id"),
    status: int | None = typer.Option(None, "--status", help="Status id"),
    start_date: str | None = typer.Option(None, "--start-date", callback=_check_date, help="Start date (YYYY-MM-DD)"),
    due_date: str | None = typer.Option(None, "--due-date", callback=_check_date, help="Due date (YYYY-MM-DD)"),
    fields: list[str] | None = typer.Option(None, "--field", "-f", help="Custom field by id (format: ID=VALUE)"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Interactive mode"),
):
    """Create a new issue."""
    if not interactive:
        if not title:
            _fail("title is required (use --title or --interactive)")
        if not project:
            _fail("project is required (use --project or --interactive)")

    with redmine_session(ctx) as (client, _settings):
        if interactive:
            created = _create_interactive(client)
        else:
            created = create_issue_in_project(
                client,
                project,
                title,
                field_assignments=fields,
                description=description,
                assigned_to_id=assignee,
                tracker_id=tracker,
                priority_id=priority,
                status_id=status,
                start_date=start_date,
                due_date=due_date,
            )
        issue_url = client.issue_url(created.id)

    if _json_requested(ctx):
        typer.echo(render.to_json(created))
    else:
        typer.echo(f"Issue #{created.id} created successfully")
        typer.echo(f"URL: {issue_url}")


def _create_interactive(client: RedmineClient):
    projects = list_projects(client)
    if not projects:
        _fail("no projects available")

    typer.echo("Available projects:")
    for number, project in enumerate(projects, start=1):
        typer.echo(f"{number}. {project.name}")
    choice = typer.prompt("\nSelect project number", type=int)
    if choice < 1 or choice > len(projects):
        _fail("invalid project number")

    subject = typer.prompt("Issue title")
    description = typer.prompt(
        "Description (optional, press Enter to skip)", default="", show_default=False
    )
    payload = IssueCreate(
        project_id=projects[choice - 1].id,
        subject=subject,
        description=description or None,
    )
    return create_issue(client, payload)


@app.command("update")
def update_command(
    ctx: typer.Context,
    issue_id: int = typer.Argument(..., help="Issue id"),
    status: int | None = typer.Option(None, "--status", help="Status id"),
    assign: str | None = typer.Option(None, "--assign", help="Assign to user id (or 'me')"),
    unassign: bool = typer.Option(False, "--unassign", help="Clear the assignee"),
    priority: int | None = typer.Option(None, "--priority", help="Priority id"),
    done_ratio: int | None = typer.Option(None, "--done-ratio", min=0, max=100, help="Done ratio (0-100)"),
    subject: str | None = typer.Option(None, "--subject", help="New subject"),
    description: str | None = typer.Option(None, "--description", help="New description"),
    start_date: str | None = typer.Option(None, "--start-date", callback=_check_date, help="Start date (YYYY-MM-DD)"),
    due_date: str | None = typer.Option(None, "--due-date", callback=_check_date, help="Due date (YYYY-MM-DD)"),
    clear_start_date: bool = typer.Option(False, "--clear-start-date", help="Clear the start date"),
    clear_due_date: bool = typer.Option(False, "--clear-due-date", help="Clear the due date"),
    version: str | None = typer.Option(None, "--version", help="Target version name (exact match)"),
    note: str | None = typer.Option(None, "--note", help="Add a note/comment"),
    fields: list[str] | None = typer.Option(None, "--field", "-f", help="Custom field (format: NAME=VALUE or ID=VALUE)"),
):
    """Update an existing issue."""
    if assign and unassign:
        _fail("--assign and --unassign cannot be combined")
    if start_date and clear_start_date:
        _fail("--start-date and --clear-start-date cannot be combined")
    if due_date and clear_due_date:
        _fail("--due-date and --clear-due-date cannot be combined")

    options = {
        "status_id": status,
        "priority_id": priority,
        "done_ratio": done_ratio,
        "subject": subject,
        "description": description,
        "start_date": start_date,
        "due_date": due_date,
        "notes": note,
    }
    changes = {key: value for key, value in options.items() if value is not None}
    if unassign:
        changes["assigned_to_id"] = None
    if clear_start_date:
        changes["start_date"] = None
    if clear_due_date:
        changes["due_date"] = None

    with redmine_session(ctx) as (client, _settings):
        payload = build_issue_update(
            client,
            issue_id,
            changes,
            assignee=assign,
            version_name=version,
            field_assignments=fields,
        )
        update_issue(client, issue_id, payload)

    typer.echo(f"Issue #{issue_id} updated successfully")


@app.command("comment")
def comment_command(
    ctx: typer.Context,
    issue_id: int = typer.Argument(..., help="Issue id"),
    text: list[str] = typer.Argument(..., help="Comment text"),
):
    """Add a comment (note) to an issue."""
    with redmine_session(ctx) as (client, _settings):
        add_comment(client, issue_id, " ".join(text))
    typer.echo(f"Comment added to issue #{issue_id}")


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------


@app.command("search")
def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query"),
    all_types: bool = typer.Option(False, "--all-types", help="Search all resource types"),
    issues: bool = typer.Option(False, "--issues", help="Search issues (default when no type is given)"),
    wiki: bool = typer.Option(False, "--wiki", help="Search wiki pages"),
    news: bool = typer.Option(False, "--news", help="Search news"),
    documents: bool = typer.Option(False, "--documents", help="Search documents"),
    changesets: bool = typer.Option(False, "--changesets", help="Search changesets"),
    messages: bool = typer.Option(False, "--messages", help="Search forum messages"),
    projects: bool = typer.Option(False, "--projects", help="Search projects"),
    scope: str | None = typer.Option(None, "--scope", callback=_check_scope, help="all, my_projects or subprojects"),
    titles_only: bool = typer.Option(False, "--titles-only", help="Search in titles only"),
    all_words: bool = typer.Option(False, "--all-words", help="Match all query words"),
    fetch_all: bool = typer.Option(False, "--all", help="Fetch all result pages"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Results per page (default 100)"),
    offset: int = typer.Option(0, "--offset", min=0, help="Skip this many results"),
    oneline: bool = typer.Option(False, "--oneline", help="Display in one line format"),
):
    """Search issues and other resources."""
    selected = {
        "news": news,
        "documents": documents,
        "changesets": changesets,
        "wiki_pages": wiki,
        "messages": messages,
        "projects": projects,
    }
    options = SearchOptions(
        query=query,
        offset=offset,
        scope=scope,
        titles_only=titles_only,
        all_words=all_words,
        issues=issues or not any(selected.values()),
        **selected,
    )
    if all_types:
        options = options.include_all_types()

    with redmine_session(ctx) as (client, settings):
        options.limit = limit or settings.search_page_size
        if fetch_all:
            results = search_all(client, options)
            total = len(results)
        else:
            page = search(client, options)
            results, total = page.results, page.total_count

    if _json_requested(ctx):
        typer.echo(render.to_json({"results": results, "total": total}))
    elif oneline:
        if results:
            typer.echo(render.search_oneline(results))
    else:
        console.print(render.search_table(results))
        console.print(f"\nFound {len(results)} results matching '{escape(query)}'")


# ----------------------------------------------------------------------
# Projects and versions
# ----------------------------------------------------------------------


@app.command("projects")
def projects_command(ctx: typer.Context):
    """List projects (first 100)."""
    with redmine_session(ctx) as (client, _settings):
        projects = list_projects(client)

    if _json_requested(ctx):
        typer.echo(render.to_json(projects))
    else:
        console.print(render.projects_table(projects))


@app.command("versions")
def versions_command(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project id or identifier"),
):
    """List the versions of a project."""
    with redmine_session(ctx) as (client, _settings):
        versions = list_versions(client, project)

    if _json_requested(ctx):
        typer.echo(render.to_json(versions))
    else:
        console.print(render.versions_table(versions))


def main() -> None:
    app()
