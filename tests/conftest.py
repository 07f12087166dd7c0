"""Shared fixtures: task factory and an in-memory repository client."""

from __future__ import annotations

from datetime import datetime

import pytest

from lazyarchon.config import AppConfig
from lazyarchon.errors import NotFoundError, RepositoryError
from lazyarchon.models import Project, Task


def make_task(
    task_id: str,
    title: str | None = None,
    status: str = "todo",
    priority: int = 0,
    project_id: str = "p1",
    feature: str | None = None,
    created_at: datetime | None = None,
    description: str = "",
) -> Task:
    return Task(
        id=task_id,
        title=title if title is not None else f"Task {task_id}",
        status=status,
        priority=priority,
        project_id=project_id,
        feature=feature,
        description=description,
        created_at=created_at,
    )


class FakeClient:
    """Repository client backed by lists; set ``error`` to make calls fail."""

    def __init__(self, tasks: list[Task] | None = None, projects: list[Project] | None = None) -> None:
        self.tasks = list(tasks or [])
        self.projects = list(projects or [])
        self.error: RepositoryError | None = None
        self.calls: list[tuple] = []

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def list_tasks(self, project_id=None, status=None, include_closed=True) -> list[Task]:
        self.calls.append(("list_tasks", project_id, status, include_closed))
        self._check()
        return [t for t in self.tasks if project_id is None or t.project_id == project_id]

    def update_task(self, task_id: str, fields: dict) -> Task:
        self.calls.append(("update_task", task_id, fields))
        self._check()
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                self.tasks[i] = task.with_fields(fields)
                return self.tasks[i]
        raise NotFoundError(f"Not found: /api/tasks/{task_id}")

    def delete_task(self, task_id: str) -> None:
        self.calls.append(("delete_task", task_id))
        self._check()
        if not any(t.id == task_id for t in self.tasks):
            raise NotFoundError(f"Not found: /api/tasks/{task_id}")
        self.tasks = [t for t in self.tasks if t.id != task_id]

    def list_projects(self) -> list[Project]:
        self.calls.append(("list_projects",))
        self._check()
        return list(self.projects)


@pytest.fixture
def sample_tasks() -> list[Task]:
    """Five tasks across all statuses, two tagged ``ui``."""
    return [
        make_task("t1", "Fix auth bug", status="todo", priority=10, feature="ui"),
        make_task("t2", "Write docs", status="doing", priority=50, feature="docs"),
        make_task("t3", "Auth token refresh", status="review", priority=30, feature="ui"),
        make_task("t4", "Release", status="done", priority=70),
        make_task("t5", "Plan sprint", status="todo", priority=90, feature="backend"),
    ]


@pytest.fixture
def sample_projects() -> list[Project]:
    return [Project("p1", "Archon"), Project("p2", "Website")]


@pytest.fixture
def fake_client(sample_tasks: list[Task], sample_projects: list[Project]) -> FakeClient:
    return FakeClient(sample_tasks, sample_projects)


@pytest.fixture
def config() -> AppConfig:
    """Defaults with polling and push off so dispatcher tests see only load jobs."""
    return AppConfig(polling_interval=0)
