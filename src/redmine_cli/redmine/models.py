"""Pydantic models for Redmine API requests and responses.

Field names follow the Redmine JSON keys exactly (``assigned_to``,
``start_date``, ``done_ratio`` ...). Response models are lenient about keys
the service adds over time; request models only emit what was set.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator

# Redmine sends custom field values as strings, or lists of strings for
# multi-value fields; booleans and numbers show up from some plugins.
CustomFieldValue = Union[str, int, float, bool, list[str], None]


class NamedRef(BaseModel):
    """Lightweight ``{id, name}`` association embedded in other records."""

    id: int
    name: str = ""


class User(NamedRef):
    pass


class CurrentUser(BaseModel):
    id: int
    login: str = ""
    firstname: str = ""
    lastname: str = ""
    mail: str | None = None

    @property
    def name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip() or self.login


class CustomField(BaseModel):
    id: int
    name: str = ""
    multiple: bool = False
    value: CustomFieldValue = None


class JournalDetail(BaseModel):
    property: str = ""
    name: str = ""
    old_value: str | None = None
    new_value: str | None = None


class Journal(BaseModel):
    id: int
    user: User
    notes: str | None = None
    created_on: datetime
    private_notes: bool = False
    details: list[JournalDetail] = Field(default_factory=list)


class Issue(BaseModel):
    id: int
    project: NamedRef
    tracker: NamedRef
    status: NamedRef
    priority: NamedRef
    author: User
    assigned_to: User | None = None
    fixed_version: NamedRef | None = None
    subject: str = ""
    description: str | None = ""
    start_date: date | None = None
    due_date: date | None = None
    done_ratio: int = 0
    estimated_hours: float | None = None
    custom_fields: list[CustomField] = Field(default_factory=list)
    created_on: datetime
    updated_on: datetime
    journals: list[Journal] = Field(default_factory=list)


class Project(BaseModel):
    id: int
    name: str
    identifier: str = ""
    description: str | None = ""
    status: int | None = None
    is_public: bool = True
    parent: NamedRef | None = None
    trackers: list[NamedRef] = Field(default_factory=list)
    created_on: datetime | None = None
    updated_on: datetime | None = None


class Version(BaseModel):
    id: int
    project: NamedRef | None = None
    name: str
    description: str | None = ""
    status: str = ""
    due_date: date | None = None
    sharing: str | None = None
    created_on: datetime | None = None
    updated_on: datetime | None = None


class SearchResult(BaseModel):
    id: int
    title: str = ""
    result_type: str = Field(alias="type", default="")
    url: str = ""
    description: str = ""
    timestamp: str = Field(alias="datetime", default="")

    model_config = {"populate_by_name": True}

    # Redmine sends null for events without a description.
    @field_validator("title", "result_type", "url", "description", "timestamp", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


# ----------------------------------------------------------------------
# Response envelopes
# ----------------------------------------------------------------------


class Page(BaseModel):
    total_count: int = 0
    offset: int = 0
    limit: int = 0


class IssuesPage(Page):
    issues: list[Issue] = Field(default_factory=list)


class ProjectsPage(Page):
    projects: list[Project] = Field(default_factory=list)


class SearchPage(Page):
    results: list[SearchResult] = Field(default_factory=list)


class VersionsList(BaseModel):
    versions: list[Version] = Field(default_factory=list)
    total_count: int = 0


class IssueEnvelope(BaseModel):
    issue: Issue


class ProjectEnvelope(BaseModel):
    project: Project


class CurrentUserEnvelope(BaseModel):
    user: CurrentUser


# ----------------------------------------------------------------------
# Request payloads
# ----------------------------------------------------------------------


class CustomFieldEntry(BaseModel):
    """Write-side custom field value, addressed by numeric id."""

    id: int
    value: CustomFieldValue = None


class IssueCreate(BaseModel):
    project_id: int
    subject: str
    description: str | None = None
    tracker_id: int | None = None
    status_id: int | None = None
    priority_id: int | None = None
    assigned_to_id: int | None = None
    fixed_version_id: int | None = None
    start_date: date | None = None
    due_date: date | None = None
    estimated_hours: float | None = None
    custom_fields: list[CustomFieldEntry] | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class IssueUpdate(BaseModel):
    """Partial update. Only fields passed explicitly are transmitted.

    ``IssueUpdate(due_date=None)`` clears the due date, while
    ``IssueUpdate()`` leaves it alone.
    """

    subject: str | None = None
    description: str | None = None
    status_id: int | None = None
    priority_id: int | None = None
    assigned_to_id: int | None = None
    fixed_version_id: int | None = None
    start_date: date | None = None
    due_date: date | None = None
    done_ratio: int | None = Field(default=None, ge=0, le=100)
    estimated_hours: float | None = None
    notes: str | None = None
    custom_fields: list[CustomFieldEntry] | None = None

    def is_empty(self) -> bool:
        return not self.model_fields_set

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
