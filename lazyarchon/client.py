"""
HTTP repository client for the Archon task server.

Blocking calls over a shared ``requests.Session``. Every failure is raised
as ``RepositoryError`` (or a subclass); deferred jobs turn those into
failure messages.
"""

from __future__ import annotations

import logging

import requests

from lazyarchon.errors import NotFoundError, PayloadError, RepositoryError
from lazyarchon.models import Project, Task, project_from_dict, task_from_dict
from lazyarchon.schemas import (
    PROJECTS_RESPONSE_SCHEMA,
    TASK_SCHEMA,
    TASKS_RESPONSE_SCHEMA,
    validate_payload,
)

logger = logging.getLogger(__name__)

PER_PAGE = 100


def _session(api_key: str | None) -> requests.Session:
    s = requests.Session()
    s.headers["Content-Type"] = "application/json"
    s.headers["Accept"] = "application/json"
    if api_key:
        s.headers["Authorization"] = f"Bearer {api_key}"
    return s


class ArchonClient:
    """Repository client talking to ``{base_url}/api``."""

    def __init__(self, base_url: str, timeout: float = 30.0, api_key: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = _session(api_key)

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, path: str, **kwargs) -> object:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.warning("%s %s timed out", method, path)
            raise RepositoryError(f"Request timed out after {self.timeout:g}s") from e
        except requests.exceptions.ConnectionError as e:
            logger.warning("%s %s could not connect: %s", method, path, e)
            raise RepositoryError(f"Cannot connect to {self.base_url}") from e
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise RepositoryError(str(e)) from e

        if resp.status_code == 404:
            logger.warning("%s %s: not found", method, path)
            raise NotFoundError(f"Not found: {path}")
        if resp.status_code >= 400:
            logger.warning("%s %s: status %d", method, path, resp.status_code)
            raise RepositoryError(f"API error (status {resp.status_code}): {resp.text[:200]}")

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            raise PayloadError(f"Invalid JSON from {path}") from e
        if isinstance(data, dict) and data.get("success") is False:
            reason = data.get("error") or data.get("message") or "request failed"
            logger.warning("%s %s: server reported failure: %s", method, path, reason)
            raise RepositoryError(str(reason))
        return data

    def list_tasks(
        self,
        project_id: str | None = None,
        status: str | None = None,
        include_closed: bool = True,
    ) -> list[Task]:
        params: dict[str, str] = {"per_page": str(PER_PAGE)}
        if project_id is not None:
            params["project_id"] = project_id
        if status is not None:
            params["status"] = status
        if include_closed:
            params["include_closed"] = "true"
        data = self._request("GET", "/api/tasks", params=params)
        validate_payload(data, TASKS_RESPONSE_SCHEMA)
        return [task_from_dict(item) for item in data["tasks"]]

    def update_task(self, task_id: str, fields: dict) -> Task:
        data = self._request("PUT", f"/api/tasks/{task_id}", json=fields)
        # The server wraps the task as {"task": {...}}; older versions return it bare.
        if isinstance(data, dict) and isinstance(data.get("task"), dict):
            data = data["task"]
        validate_payload(data, TASK_SCHEMA)
        return task_from_dict(data)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    def list_projects(self) -> list[Project]:
        data = self._request("GET", "/api/projects")
        validate_payload(data, PROJECTS_RESPONSE_SCHEMA)
        return [project_from_dict(item) for item in data["projects"]]
