"""
Deferred jobs.

A job is an immutable request value. ``run`` performs the blocking work
against the services it is handed and returns exactly one message; it
never touches the stores. Each job names the message types it can
produce in ``produces``.

Jobs catch ``RepositoryError`` and turn it into their failure message.
Anything else propagates to the coordinator, which reports it as
``JobCrashed``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Union

from lazyarchon.errors import NotFoundError, RepositoryError
from lazyarchon.messages import (
    Copied,
    CopyFailed,
    Message,
    ProjectsLoaded,
    ProjectsLoadFailed,
    PushFailed,
    PushReceived,
    TaskDeleted,
    TaskDeleteFailed,
    TasksLoaded,
    TasksLoadFailed,
    TaskUpdated,
    TaskUpdateFailed,
)
from lazyarchon.providers import Clipboard, PushSource, RepositoryClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """Collaborators available to running jobs."""

    client: RepositoryClient
    clipboard: Clipboard | None = None
    push_source: PushSource | None = None


@dataclass(frozen=True)
class LoadTasks:
    generation: int
    project_id: str | None = None
    include_closed: bool = True

    produces: ClassVar[tuple[type, ...]] = (TasksLoaded, TasksLoadFailed)
    tracks_loading: ClassVar[bool] = True

    def run(self, services: Services) -> Message:
        try:
            tasks = services.client.list_tasks(project_id=self.project_id, include_closed=self.include_closed)
        except RepositoryError as e:
            logger.warning("Loading tasks failed: %s", e)
            return TasksLoadFailed(self.generation, str(e))
        return TasksLoaded(self.generation, tuple(tasks))


@dataclass(frozen=True)
class LoadProjects:
    generation: int

    produces: ClassVar[tuple[type, ...]] = (ProjectsLoaded, ProjectsLoadFailed)
    tracks_loading: ClassVar[bool] = True

    def run(self, services: Services) -> Message:
        try:
            projects = services.client.list_projects()
        except RepositoryError as e:
            logger.warning("Loading projects failed: %s", e)
            return ProjectsLoadFailed(self.generation, str(e))
        return ProjectsLoaded(self.generation, tuple(projects))


@dataclass(frozen=True)
class UpdateTask:
    edit_id: int
    task_id: str
    fields: dict = field(hash=False)

    produces: ClassVar[tuple[type, ...]] = (TaskUpdated, TaskUpdateFailed)
    tracks_loading: ClassVar[bool] = True

    def run(self, services: Services) -> Message:
        try:
            task = services.client.update_task(self.task_id, dict(self.fields))
        except NotFoundError as e:
            return TaskUpdateFailed(self.edit_id, self.task_id, str(e), not_found=True)
        except RepositoryError as e:
            logger.warning("Updating task %s failed: %s", self.task_id, e)
            return TaskUpdateFailed(self.edit_id, self.task_id, str(e))
        return TaskUpdated(self.edit_id, task)


@dataclass(frozen=True)
class DeleteTask:
    task_id: str

    produces: ClassVar[tuple[type, ...]] = (TaskDeleted, TaskDeleteFailed)
    tracks_loading: ClassVar[bool] = True

    def run(self, services: Services) -> Message:
        try:
            services.client.delete_task(self.task_id)
        except NotFoundError as e:
            return TaskDeleteFailed(self.task_id, str(e), not_found=True)
        except RepositoryError as e:
            logger.warning("Deleting task %s failed: %s", self.task_id, e)
            return TaskDeleteFailed(self.task_id, str(e))
        return TaskDeleted(self.task_id)


@dataclass(frozen=True)
class CopyText:
    label: str
    text: str

    produces: ClassVar[tuple[type, ...]] = (Copied, CopyFailed)
    tracks_loading: ClassVar[bool] = False

    def run(self, services: Services) -> Message:
        if services.clipboard is None:
            return CopyFailed("No clipboard available")
        try:
            services.clipboard(self.text)
        except OSError as e:
            return CopyFailed(str(e))
        return Copied(self.label, self.text)


@dataclass(frozen=True)
class ListenForPush:
    """One blocking receive on the push source."""

    timeout: float = 30.0

    produces: ClassVar[tuple[type, ...]] = (PushReceived, PushFailed)
    tracks_loading: ClassVar[bool] = False

    def run(self, services: Services) -> Message:
        if services.push_source is None:
            return PushFailed("No push source configured")
        try:
            event = services.push_source.receive(timeout=self.timeout)
        except RepositoryError as e:
            logger.warning("Push source failed: %s", e)
            return PushFailed(str(e))
        return PushReceived(event)


@dataclass(frozen=True)
class Delay:
    """Deliver ``message`` after ``seconds``. Scheduled on a timer, not a worker."""

    seconds: float
    message: Message

    tracks_loading: ClassVar[bool] = False

    @property
    def produces(self) -> tuple[type, ...]:
        return (type(self.message),)

    def run(self, services: Services) -> Message:
        return self.message


Job = Union[LoadTasks, LoadProjects, UpdateTask, DeleteTask, CopyText, ListenForPush, Delay]
