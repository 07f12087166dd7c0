"""
Mirrored server entities.

Tasks and projects are immutable snapshots supplied wholesale by the
repository client. The core never patches them field by field except through
``Task.with_fields`` on the optimistic-update path.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

STATUS_TODO = "todo"
STATUS_DOING = "doing"
STATUS_REVIEW = "review"
STATUS_DONE = "done"

STATUSES: tuple[str, ...] = (STATUS_TODO, STATUS_DOING, STATUS_REVIEW, STATUS_DONE)

STATUS_SYMBOLS = {
    STATUS_TODO: "○",
    STATUS_DOING: "◐",
    STATUS_REVIEW: "◉",
    STATUS_DONE: "●",
}

# Formats the server has been seen to emit for timestamps
_TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
)


class SortMode(Enum):
    """Four-way cyclic sort order for the visible task list."""

    STATUS_PRIORITY = 0
    PRIORITY = 1
    CREATED = 2
    ALPHABETICAL = 3

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    def next(self) -> SortMode:
        return SortMode((self.value + 1) % len(SortMode))

    def previous(self) -> SortMode:
        return SortMode((self.value - 1) % len(SortMode))

    @classmethod
    def from_label(cls, label: str) -> SortMode:
        for mode, name in _SORT_LABELS.items():
            if name == label:
                return mode
        raise ValueError(f"Unknown sort mode: {label!r}")


_SORT_LABELS = {
    SortMode.STATUS_PRIORITY: "status+priority",
    SortMode.PRIORITY: "priority",
    SortMode.CREATED: "time",
    SortMode.ALPHABETICAL: "alphabetical",
}

SORT_MODE_LABELS: tuple[str, ...] = tuple(_SORT_LABELS[m] for m in SortMode)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a server timestamp, returning None when it is missing or unreadable."""
    if not value:
        return None
    text = value.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of one task."""

    id: str
    title: str
    status: str
    priority: int
    project_id: str
    feature: str | None = None
    description: str = ""
    assignee: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def symbol(self) -> str:
        return STATUS_SYMBOLS.get(self.status, "?")

    @property
    def tag(self) -> str | None:
        """Feature tag, with the empty string treated as untagged."""
        return self.feature or None

    def with_fields(self, fields: dict) -> Task:
        """Return a copy with update fields (server names) applied."""
        changes = {}
        if "status" in fields:
            changes["status"] = fields["status"]
        if "task_order" in fields:
            changes["priority"] = fields["task_order"]
        if "feature" in fields:
            changes["feature"] = fields["feature"] or None
        if "title" in fields:
            changes["title"] = fields["title"]
        return replace(self, **changes)


@dataclass(frozen=True)
class Project:
    """Immutable snapshot of one project."""

    id: str
    title: str
    description: str = ""


def task_from_dict(data: dict) -> Task:
    """Convert a server task record to a Task."""
    return Task(
        id=data["id"],
        title=data.get("title", ""),
        status=data.get("status", STATUS_TODO),
        priority=data.get("task_order", 0) or 0,
        project_id=data.get("project_id") or "",
        feature=data.get("feature") or None,
        description=data.get("description") or "",
        assignee=data.get("assignee") or "",
        created_at=parse_timestamp(data.get("created_at")),
        updated_at=parse_timestamp(data.get("updated_at")),
    )


def project_from_dict(data: dict) -> Project:
    """Convert a server project record to a Project."""
    return Project(
        id=data["id"],
        title=data.get("title", ""),
        description=data.get("description") or "",
    )
