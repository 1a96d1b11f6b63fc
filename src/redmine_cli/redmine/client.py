"""Synchronous Redmine REST API client using httpx."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from redmine_cli.redmine.errors import (
    RedmineAPIError,
    RedmineAuthenticationError,
    RedmineConfigError,
    RedmineMalformedResponseError,
    RedmineNotFoundError,
    RedmineTransportError,
)
from redmine_cli.redmine.models import (
    CurrentUser,
    CurrentUserEnvelope,
    Issue,
    IssueCreate,
    IssueEnvelope,
    IssuesPage,
    IssueUpdate,
    Project,
    ProjectEnvelope,
    ProjectsPage,
    SearchPage,
    VersionsList,
)
from redmine_cli.utils.timing import timed

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TIMEOUT = 30
PROJECTS_PAGE_SIZE = 100

_HTML_HINT = (
    "Invalid response: expected JSON but got HTML. Please check your REDMINE_URL "
    "is correct and includes the protocol (http:// or https://)"
)


class RedmineClient:
    """Wrapper around the Redmine REST API.

    Every call is a single blocking request; failures are raised immediately
    as subclasses of ``RedmineAPIError`` and never retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        logger: logging.Logger | None = None,
    ):
        self._base_url = _normalize_base_url(base_url)
        self._logger = logger or logging.getLogger("redmine_cli")
        self._client = httpx.Client(
            base_url=self._base_url,
            headers={
                "X-Redmine-API-Key": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def issue_url(self, issue_id: int) -> str:
        return f"{self._base_url}/issues/{issue_id}"

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RedmineClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    @timed
    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> bytes:
        request = self._client.build_request(method, path, params=params or None, json=json)
        url = str(request.url)
        self._logger.debug("%s %s", method, url)

        try:
            response = self._client.send(request)
        except httpx.RequestError as e:
            raise RedmineTransportError(f"Request failed: {e}\nURL: {url}", url=url) from e

        body = response.content
        if response.status_code == 401:
            raise RedmineAuthenticationError(url=url)
        if response.status_code == 404:
            raise RedmineNotFoundError(
                f"Not found: the requested resource does not exist\nURL: {url}", url=url
            )
        if body.lstrip().startswith(b"<"):
            raise RedmineMalformedResponseError(
                f"{_HTML_HINT}\nURL: {url}", status_code=response.status_code, url=url
            )
        if response.status_code >= 400:
            raise RedmineAPIError(
                f"API error (status {response.status_code}): {response.text}\nURL: {url}",
                status_code=response.status_code,
                url=url,
            )
        return body

    def _decode(self, body: bytes, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise RedmineMalformedResponseError(
                f"Failed to decode response as {model.__name__}: {e}"
            ) from e

    def _get(self, path: str, model: type[ModelT], params: dict[str, str] | None = None) -> ModelT:
        return self._decode(self._request("GET", path, params=params), model)

    def _post(self, path: str, model: type[ModelT], json: Any) -> ModelT:
        return self._decode(self._request("POST", path, json=json), model)

    def _put(self, path: str, json: Any) -> None:
        self._request("PUT", path, json=json)

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    def list_issues(self, params: dict[str, str]) -> IssuesPage:
        return self._get("/issues.json", IssuesPage, params=params)

    def get_issue(self, issue_id: int, include_journals: bool = False) -> Issue:
        params = {"include": "journals"} if include_journals else None
        return self._get(f"/issues/{issue_id}.json", IssueEnvelope, params=params).issue

    def create_issue(self, payload: IssueCreate) -> Issue:
        return self._post("/issues.json", IssueEnvelope, json={"issue": payload.to_payload()}).issue

    def update_issue(self, issue_id: int, payload: IssueUpdate) -> None:
        self._put(f"/issues/{issue_id}.json", json={"issue": payload.to_payload()})

    # ------------------------------------------------------------------
    # Projects and versions
    # ------------------------------------------------------------------

    def list_projects(self) -> ProjectsPage:
        return self._get("/projects.json", ProjectsPage, params={"limit": str(PROJECTS_PAGE_SIZE)})

    def get_project(self, id_or_identifier: int | str) -> Project:
        params = {"include": "trackers"}
        return self._get(f"/projects/{id_or_identifier}.json", ProjectEnvelope, params=params).project

    def list_versions(self, project_id: int | str) -> VersionsList:
        return self._get(f"/projects/{project_id}/versions.json", VersionsList)

    # ------------------------------------------------------------------
    # Users and search
    # ------------------------------------------------------------------

    def get_current_user(self) -> CurrentUser:
        return self._get("/users/current.json", CurrentUserEnvelope).user

    def search(self, params: dict[str, str]) -> SearchPage:
        return self._get("/search.json", SearchPage, params=params)


def _normalize_base_url(base_url: str) -> str:
    base_url = base_url.strip().rstrip("/")
    try:
        parsed = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise RedmineConfigError(f"Invalid base URL '{base_url}': {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RedmineConfigError(
            f"Invalid base URL '{base_url}': include the protocol and host "
            "(e.g. https://redmine.example.com)"
        )
    return base_url
