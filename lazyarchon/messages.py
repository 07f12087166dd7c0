"""
Messages consumed by the dispatcher.

``Message`` is a closed union: every kind of input the dispatcher can
receive is one of the frozen dataclasses below, and the dispatcher's
handler table must cover each of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union, get_args

from lazyarchon.models import Project, Task
from lazyarchon.providers import PushEvent


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class DetailsResized:
    """Content size of the details panel, which wraps its text to fit."""

    width: int
    height: int


@dataclass(frozen=True)
class PollTick:
    """Recurring refresh timer fired."""


@dataclass(frozen=True)
class TasksLoaded:
    generation: int
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class TasksLoadFailed:
    generation: int
    error: str


@dataclass(frozen=True)
class ProjectsLoaded:
    generation: int
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class ProjectsLoadFailed:
    generation: int
    error: str


@dataclass(frozen=True)
class TaskUpdated:
    edit_id: int
    task: Task


@dataclass(frozen=True)
class TaskUpdateFailed:
    edit_id: int
    task_id: str
    error: str
    not_found: bool = False


@dataclass(frozen=True)
class TaskDeleted:
    task_id: str


@dataclass(frozen=True)
class TaskDeleteFailed:
    task_id: str
    error: str
    not_found: bool = False


@dataclass(frozen=True)
class Copied:
    label: str
    text: str


@dataclass(frozen=True)
class CopyFailed:
    error: str


@dataclass(frozen=True)
class PushReceived:
    """One receive from the push source finished; None means it timed out."""

    event: PushEvent | None


@dataclass(frozen=True)
class PushFailed:
    error: str


@dataclass(frozen=True)
class JobCrashed:
    """A job raised something other than a repository error."""

    job: str
    error: str
    tracks_loading: bool = False
    generation: int | None = None


Message = Union[
    KeyPressed,
    Resized,
    DetailsResized,
    PollTick,
    TasksLoaded,
    TasksLoadFailed,
    ProjectsLoaded,
    ProjectsLoadFailed,
    TaskUpdated,
    TaskUpdateFailed,
    TaskDeleted,
    TaskDeleteFailed,
    Copied,
    CopyFailed,
    PushReceived,
    PushFailed,
    JobCrashed,
]

MESSAGE_TYPES: tuple[type, ...] = get_args(Message)
