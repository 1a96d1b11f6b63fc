"""Text, table, CSV and JSON rendering of Redmine records."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from redmine_cli.redmine.models import Issue, Project, SearchResult, Version

_HIGHLIGHT_TAGS = ('<strong class="highlight">', "</strong>")


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def to_json(data: Any) -> str:
    """Pretty JSON for models, lists of models, or plain dicts of them."""
    return json.dumps(_jsonable(data), indent=2, ensure_ascii=False)


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    return data


# ----------------------------------------------------------------------
# Issues
# ----------------------------------------------------------------------


def _assignee(issue: Issue, empty: str = "-") -> str:
    return issue.assigned_to.name if issue.assigned_to else empty


def issues_oneline(issues: Iterable[Issue]) -> str:
    return "\n".join(f"#{issue.id} {issue.subject}" for issue in issues)


def issues_csv(issues: Iterable[Issue]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["ID", "Project", "Status", "Priority", "Subject", "Assignee"])
    for issue in issues:
        writer.writerow([
            issue.id,
            issue.project.name,
            issue.status.name,
            issue.priority.name,
            issue.subject,
            _assignee(issue, empty=""),
        ])
    return buf.getvalue()


def issues_table(issues: Iterable[Issue]) -> Table:
    table = Table(show_lines=False)
    for column in ("ID", "Project", "Status", "Priority", "Subject", "Assignee"):
        table.add_column(column, no_wrap=column != "Subject")
    for issue in issues:
        table.add_row(
            str(issue.id),
            escape(issue.project.name),
            escape(issue.status.name),
            escape(issue.priority.name),
            escape(truncate(issue.subject, 40)),
            escape(_assignee(issue)),
        )
    return table


def print_issue_detail(console: Console, issue: Issue) -> None:
    rule = "=" * 80
    lines = [
        f"Issue #{issue.id}",
        rule,
        f"Subject:     {issue.subject}",
        f"Project:     {issue.project.name}",
        f"Tracker:     {issue.tracker.name}",
        f"Status:      {issue.status.name}",
        f"Priority:    {issue.priority.name}",
        f"Author:      {issue.author.name}",
        f"Assigned to: {_assignee(issue)}",
    ]
    if issue.fixed_version:
        lines.append(f"Version:     {issue.fixed_version.name}")
    if issue.start_date:
        lines.append(f"Start Date:  {issue.start_date.isoformat()}")
    if issue.due_date:
        lines.append(f"Due Date:    {issue.due_date.isoformat()}")
    lines.append(f"Done Ratio:  {issue.done_ratio}%")
    if issue.estimated_hours is not None:
        lines.append(f"Estimated:   {issue.estimated_hours:.1f} hours")
    lines.append(f"Created:     {issue.created_on.isoformat()}")
    lines.append(f"Updated:     {issue.updated_on.isoformat()}")

    if issue.custom_fields:
        lines.append("")
        lines.append("Custom Fields:")
        for field in issue.custom_fields:
            value = ", ".join(field.value) if isinstance(field.value, list) else field.value
            lines.append(f"  {field.name}: {'' if value is None else value}")

    if issue.description:
        lines += ["", "Description:", "-" * 80, issue.description]

    commented = [journal for journal in issue.journals if journal.notes]
    if commented:
        lines += ["", "Comments:", "-" * 80]
        for journal in commented:
            stamp = journal.created_on.strftime("%Y-%m-%d %H:%M")
            lines += ["", f"[{stamp}] {journal.user.name}:", journal.notes]

    console.print("\n".join(lines), markup=False, highlight=False, soft_wrap=True)


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------


def strip_highlight(text: str) -> str:
    for tag in _HIGHLIGHT_TAGS:
        text = text.replace(tag, "")
    return text


def id_from_url(url: str) -> str:
    """Display id of a search hit, taken from the last path segment of its URL."""
    last = url.rstrip("/").rsplit("/", 1)[-1] if url else ""
    return last or "-"


def search_oneline(results: Iterable[SearchResult]) -> str:
    return "\n".join(f"{id_from_url(result.url)}: {result.title}" for result in results)


def search_table(results: Iterable[SearchResult]) -> Table:
    table = Table()
    for column in ("Type", "ID", "Title", "Description"):
        table.add_column(column, no_wrap=column in ("Type", "ID"))
    for result in results:
        table.add_row(
            escape(result.result_type),
            escape(id_from_url(result.url)),
            escape(truncate(result.title, 50)),
            escape(truncate(strip_highlight(result.description), 30)),
        )
    return table


# ----------------------------------------------------------------------
# Projects and versions
# ----------------------------------------------------------------------


def projects_table(projects: Iterable[Project]) -> Table:
    table = Table()
    for column in ("ID", "Identifier", "Name", "Public"):
        table.add_column(column)
    for project in projects:
        table.add_row(
            str(project.id),
            escape(project.identifier),
            escape(project.name),
            "yes" if project.is_public else "no",
        )
    return table


def versions_table(versions: Iterable[Version]) -> Table:
    table = Table()
    for column in ("ID", "Name", "Status", "Due Date"):
        table.add_column(column)
    for version in versions:
        table.add_row(
            str(version.id),
            escape(version.name),
            escape(version.status),
            version.due_date.isoformat() if version.due_date else "-",
        )
    return table
