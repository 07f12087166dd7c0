"""
Collaborator protocols.

The core depends only on these interfaces. The HTTP client, the
Textual clipboard and the test fakes implement them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from lazyarchon.models import Project, Task


class RepositoryClient(Protocol):
    """Protocol for talking to the task server.

    Every method either returns a complete result or raises
    ``RepositoryError``. Calls are blocking and are only ever made from
    inside a deferred job.
    """

    def list_tasks(
        self,
        project_id: str | None = None,
        status: str | None = None,
        include_closed: bool = True,
    ) -> list[Task]:
        """Return the complete task snapshot for the given filters."""
        ...

    def update_task(self, task_id: str, fields: dict) -> Task:
        """Apply a partial update and return the server's copy of the task."""
        ...

    def delete_task(self, task_id: str) -> None:
        """Delete (archive) a task."""
        ...

    def list_projects(self) -> list[Project]:
        """Return the complete project snapshot."""
        ...


class PushEventKind(Enum):
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    PROJECT_UPDATED = "project_updated"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class PushEvent:
    """One typed event from the push source."""

    kind: PushEventKind
    entity_id: str | None = None


class PushSource(Protocol):
    """Protocol for an optional server-push channel."""

    def receive(self, timeout: float | None = None) -> PushEvent | None:
        """Block until the next event arrives; None on timeout or close."""
        ...


class Clipboard(Protocol):
    """Protocol for the clipboard used by the copy operations."""

    def __call__(self, text: str) -> None:
        ...
