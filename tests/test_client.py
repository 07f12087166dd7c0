"""Tests for client.py - HTTP repository client."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from lazyarchon.client import ArchonClient
from lazyarchon.errors import NotFoundError, PayloadError, RepositoryError

TASK = {
    "id": "t1",
    "project_id": "p1",
    "title": "Fix auth bug",
    "status": "todo",
    "task_order": 10,
    "feature": "ui",
    "created_at": "2024-01-02T03:04:05Z",
}


def _response(status: int = 200, payload: object = None, body: str | None = None) -> Mock:
    resp = Mock()
    resp.status_code = status
    if payload is not None:
        resp.text = json.dumps(payload)
        resp.json.return_value = payload
    else:
        resp.text = body or ""
        resp.json.side_effect = ValueError("No JSON")
    resp.content = resp.text.encode()
    return resp


@pytest.fixture
def client() -> ArchonClient:
    return ArchonClient("http://archon.test/", timeout=5.0, api_key="secret")


class TestSession:
    """Tests for session setup."""

    def test_headers(self, client: ArchonClient) -> None:
        assert client.base_url == "http://archon.test"
        assert client._session.headers["Authorization"] == "Bearer secret"

    def test_no_api_key(self) -> None:
        assert "Authorization" not in ArchonClient("http://archon.test")._session.headers


class TestListTasks:
    """Tests for list_tasks method."""

    def test_parses_tasks(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(payload={"tasks": [TASK]})) as req:
            tasks = client.list_tasks(project_id="p1")

        assert [t.id for t in tasks] == ["t1"]
        assert tasks[0].priority == 10
        method, url = req.call_args.args
        assert (method, url) == ("GET", "http://archon.test/api/tasks")
        assert req.call_args.kwargs["params"] == {"per_page": "100", "project_id": "p1", "include_closed": "true"}
        assert req.call_args.kwargs["timeout"] == 5.0

    def test_exclude_closed(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(payload={"tasks": []})) as req:
            client.list_tasks(status="doing", include_closed=False)
        assert req.call_args.kwargs["params"] == {"per_page": "100", "status": "doing"}

    def test_schema_mismatch(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(payload={"items": []})):
            with pytest.raises(PayloadError):
                client.list_tasks()

    def test_bad_json(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(body="<html>")):
            with pytest.raises(PayloadError, match="Invalid JSON"):
                client.list_tasks()

    def test_success_false(self, client: ArchonClient) -> None:
        payload = {"success": False, "error": "database unavailable"}
        with patch.object(client._session, "request", return_value=_response(payload=payload)):
            with pytest.raises(RepositoryError, match="database unavailable"):
                client.list_tasks()


class TestErrors:
    """Transport failures map onto RepositoryError."""

    def test_timeout(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(RepositoryError, match="timed out"):
                client.list_projects()

    def test_connection_error(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", side_effect=requests.exceptions.ConnectionError()):
            with pytest.raises(RepositoryError, match="Cannot connect"):
                client.list_projects()

    def test_http_error(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(500, body="boom")):
            with pytest.raises(RepositoryError, match="status 500"):
                client.list_projects()

    def test_not_found(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(404, body="")):
            with pytest.raises(NotFoundError):
                client.delete_task("gone")


class TestMutations:
    """Tests for update_task and delete_task methods."""

    def test_update_wrapped(self, client: ArchonClient) -> None:
        payload = {"success": True, "task": {**TASK, "status": "doing"}}
        with patch.object(client._session, "request", return_value=_response(payload=payload)) as req:
            task = client.update_task("t1", {"status": "doing"})

        assert task.status == "doing"
        assert req.call_args.args == ("PUT", "http://archon.test/api/tasks/t1")
        assert req.call_args.kwargs["json"] == {"status": "doing"}

    def test_update_bare(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(payload=TASK)):
            assert client.update_task("t1", {"status": "todo"}).id == "t1"

    def test_delete_no_content(self, client: ArchonClient) -> None:
        with patch.object(client._session, "request", return_value=_response(204, body="")) as req:
            assert client.delete_task("t1") is None
        assert req.call_args.args == ("DELETE", "http://archon.test/api/tasks/t1")


class TestListProjects:
    """Tests for list_projects method."""

    def test_parses_projects(self, client: ArchonClient) -> None:
        payload = {"projects": [{"id": "p1", "title": "Archon", "description": None}]}
        with patch.object(client._session, "request", return_value=_response(payload=payload)):
            projects = client.list_projects()
        assert [p.title for p in projects] == ["Archon"]
