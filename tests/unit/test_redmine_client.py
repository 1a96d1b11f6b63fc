"""Tests for RedmineClient using respx to mock httpx."""

import json
import logging

import httpx
import pytest
import respx
from httpx import Response

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import (
    RedmineAPIError,
    RedmineAuthenticationError,
    RedmineConfigError,
    RedmineMalformedResponseError,
    RedmineNotFoundError,
    RedmineTransportError,
)
from redmine_cli.redmine.models import IssueCreate, IssueUpdate

BASE_URL = "https://redmine.example.com"


@respx.mock
def test_sends_api_key_and_json_headers(client, make_issue):
    route = respx.get(f"{BASE_URL}/issues/42.json").mock(
        return_value=Response(200, json={"issue": make_issue()})
    )
    client.get_issue(42)
    request = route.calls.last.request
    assert request.headers["X-Redmine-API-Key"] == "secret-key"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"


@respx.mock
def test_base_url_trailing_slash_is_stripped():
    route = respx.get("https://example.com/redmine/issues.json").mock(
        return_value=Response(200, json={"issues": [], "total_count": 0, "offset": 0, "limit": 25})
    )
    with RedmineClient("https://example.com/redmine/", "k") as c:
        assert c.base_url == "https://example.com/redmine"
        c.list_issues({"limit": "25"})
    assert str(route.calls.last.request.url) == "https://example.com/redmine/issues.json?limit=25"


@pytest.mark.parametrize("bad_url", ["", "redmine.example.com", "ftp://redmine.example.com", "https://"])
def test_malformed_base_url_is_config_error(bad_url):
    with pytest.raises(RedmineConfigError):
        RedmineClient(bad_url, "k")


@respx.mock
def test_get_issue_with_journals(client):
    route = respx.get(f"{BASE_URL}/issues/42.json").mock(
        return_value=Response(
            200,
            json={
                "issue": {
                    "id": 42,
                    "subject": "Bug",
                    "project": {"id": 1, "name": "Demo"},
                    "tracker": {"id": 1, "name": "Bug"},
                    "status": {"id": 1, "name": "New"},
                    "priority": {"id": 2, "name": "Normal"},
                    "author": {"id": 5, "name": "Alice"},
                    "created_on": "2024-01-01T00:00:00Z",
                    "updated_on": "2024-01-01T00:00:00Z",
                    "journals": [
                        {
                            "id": 1,
                            "user": {"id": 5, "name": "Alice"},
                            "notes": "Looks fixed",
                            "created_on": "2024-01-01T00:00:00Z",
                            "details": [
                                {"property": "attr", "name": "status_id", "old_value": "1", "new_value": "3"}
                            ],
                        }
                    ],
                }
            },
        )
    )
    issue = client.get_issue(42, include_journals=True)
    assert route.calls.last.request.url.params["include"] == "journals"
    assert issue.id == 42
    assert len(issue.journals) == 1
    assert issue.journals[0].notes == "Looks fixed"
    assert issue.journals[0].details[0].new_value == "3"
    assert issue.assigned_to is None


@respx.mock
def test_get_issue_without_journals_sends_no_query(client, make_issue):
    route = respx.get(f"{BASE_URL}/issues/42.json").mock(
        return_value=Response(200, json={"issue": make_issue()})
    )
    client.get_issue(42)
    assert route.calls.last.request.url.query == b""


@respx.mock
def test_create_issue_posts_envelope(client, make_issue):
    route = respx.post(f"{BASE_URL}/issues.json").mock(
        return_value=Response(201, json={"issue": make_issue(id=99, subject="New")})
    )
    created = client.create_issue(IssueCreate(project_id=1, subject="New", due_date="2024-03-01"))
    body = json.loads(route.calls.last.request.content)
    assert body == {"issue": {"project_id": 1, "subject": "New", "due_date": "2024-03-01"}}
    assert created.id == 99


@respx.mock
def test_update_issue_sends_only_set_fields(client):
    route = respx.put(f"{BASE_URL}/issues/42.json").mock(return_value=Response(204))
    client.update_issue(42, IssueUpdate(notes="Done"))
    body = json.loads(route.calls.last.request.content)
    assert body == {"issue": {"notes": "Done"}}


@respx.mock
def test_list_projects_requests_page_of_100(client):
    route = respx.get(f"{BASE_URL}/projects.json").mock(
        return_value=Response(
            200,
            json={
                "projects": [{"id": 1, "name": "Demo", "identifier": "demo", "is_public": True}],
                "total_count": 1,
                "offset": 0,
                "limit": 100,
            },
        )
    )
    page = client.list_projects()
    assert dict(route.calls.last.request.url.params) == {"limit": "100"}
    assert page.projects[0].identifier == "demo"


@respx.mock
def test_get_project_by_identifier(client):
    respx.get(f"{BASE_URL}/projects/demo.json").mock(
        return_value=Response(
            200,
            json={
                "project": {
                    "id": 1,
                    "name": "Demo",
                    "identifier": "demo",
                    "trackers": [{"id": 1, "name": "Bug"}, {"id": 2, "name": "Feature"}],
                }
            },
        )
    )
    project = client.get_project("demo")
    assert project.id == 1
    assert [t.name for t in project.trackers] == ["Bug", "Feature"]


@respx.mock
def test_get_current_user(client):
    respx.get(f"{BASE_URL}/users/current.json").mock(
        return_value=Response(
            200, json={"user": {"id": 7, "login": "jdoe", "firstname": "Jane", "lastname": "Doe"}}
        )
    )
    user = client.get_current_user()
    assert user.id == 7
    assert user.name == "Jane Doe"


@respx.mock
def test_auth_error(client):
    respx.get(f"{BASE_URL}/issues/1.json").mock(return_value=Response(401, text="Unauthorized"))
    with pytest.raises(RedmineAuthenticationError) as exc_info:
        client.get_issue(1)
    assert exc_info.value.url == f"{BASE_URL}/issues/1.json"
    assert "issues/1.json" in str(exc_info.value)


@respx.mock
def test_not_found_error(client):
    respx.get(f"{BASE_URL}/issues/999.json").mock(return_value=Response(404, text="Not Found"))
    with pytest.raises(RedmineNotFoundError) as exc_info:
        client.get_issue(999)
    assert exc_info.value.status_code == 404


@pytest.mark.parametrize("status", [200, 302, 500])
@respx.mock
def test_html_body_is_malformed_response_regardless_of_status(client, status):
    respx.get(f"{BASE_URL}/issues/1.json").mock(
        return_value=Response(status, text="  <!DOCTYPE html><html></html>")
    )
    with pytest.raises(RedmineMalformedResponseError, match="expected JSON but got HTML"):
        client.get_issue(1)


@respx.mock
def test_generic_api_error_includes_status_and_body(client):
    respx.post(f"{BASE_URL}/issues.json").mock(
        return_value=Response(422, json={"errors": ["Subject cannot be blank"]})
    )
    with pytest.raises(RedmineAPIError) as exc_info:
        client.create_issue(IssueCreate(project_id=1, subject="x"))
    assert exc_info.value.status_code == 422
    assert "Subject cannot be blank" in str(exc_info.value)


@respx.mock
def test_transport_error_is_wrapped(client):
    respx.get(f"{BASE_URL}/issues/1.json").mock(side_effect=httpx.ConnectError("connection refused"))
    with pytest.raises(RedmineTransportError) as exc_info:
        client.get_issue(1)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@respx.mock
def test_undecodable_json_is_malformed_response(client):
    respx.get(f"{BASE_URL}/issues/1.json").mock(return_value=Response(200, text="{not json"))
    with pytest.raises(RedmineMalformedResponseError, match="decode"):
        client.get_issue(1)


@respx.mock
def test_missing_required_association_is_malformed_response(client, make_issue):
    issue = make_issue()
    del issue["project"]
    respx.get(f"{BASE_URL}/issues/42.json").mock(return_value=Response(200, json={"issue": issue}))
    with pytest.raises(RedmineMalformedResponseError):
        client.get_issue(42)


@respx.mock
def test_requests_are_logged_at_debug(make_issue, caplog):
    logger = logging.getLogger("rd_client_test")
    respx.get(f"{BASE_URL}/issues/42.json").mock(return_value=Response(200, json={"issue": make_issue()}))
    with caplog.at_level(logging.DEBUG, logger="rd_client_test"):
        with RedmineClient(BASE_URL, "k", logger=logger) as c:
            c.get_issue(42)
    assert f"GET {BASE_URL}/issues/42.json" in caplog.text
    assert "_request completed in" in caplog.text
