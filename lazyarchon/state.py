"""
Domain and presentation stores.

Both stores are plain mutable dataclasses written only by the dispatcher.
The domain store mirrors the server and holds the user's view preferences;
the presentation store holds transient view state such as the selected
index, which is only meaningful relative to the current visible list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from lazyarchon.config import AppConfig
from lazyarchon.models import STATUS_DONE, STATUSES, Project, SortMode, Task

SEARCH_HISTORY_LIMIT = 10


class ViewMode(Enum):
    TASK = "task"
    PROJECT_SELECT = "project_select"


class ActivePanel(Enum):
    LIST = "list"
    DETAILS = "details"


class SearchPhase(Enum):
    INACTIVE = "inactive"
    TYPING = "typing"
    COMMITTED = "committed"


@dataclass
class LoadTracker:
    """Generation counter for one kind of snapshot load.

    Every load is stamped with ``issue()``. A result is applied only if it
    is newer than the last applied one and not older than ``floor``.
    Generations stay in ``in_flight`` until their result is ``settle``d.
    """

    issued: int = 0
    applied: int = 0
    floor: int = 0
    in_flight: set[int] = field(default_factory=set)

    @property
    def outstanding(self) -> bool:
        return bool(self.in_flight)

    def issue(self) -> int:
        self.issued += 1
        self.in_flight.add(self.issued)
        return self.issued

    def settle(self, generation: int | None) -> None:
        """Mark a load as finished; None settles everything in flight."""
        if generation is None:
            self.in_flight.clear()
        else:
            self.in_flight.discard(generation)

    def accept(self, generation: int) -> bool:
        if generation <= self.applied or generation < self.floor:
            return False
        self.applied = generation
        return True

    def is_current(self, generation: int) -> bool:
        return generation > self.applied and generation >= self.floor

    def invalidate_outstanding(self) -> None:
        """Mark every load issued so far as stale."""
        self.floor = self.issued + 1


@dataclass(frozen=True)
class PendingEdit:
    task_id: str
    fields: dict
    previous: dict


@dataclass
class DomainStore:
    """Server-mirrored entities plus persistent view preferences."""

    tasks: list[Task] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    selected_project_id: str | None = None
    status_filter: dict[str, bool] = field(default_factory=lambda: {s: True for s in STATUSES})
    status_filter_active: bool = False
    feature_filter: dict[str, bool] | None = None
    sort_mode: SortMode = SortMode.STATUS_PRIORITY
    status_rank: tuple[str, ...] = STATUSES
    show_completed: bool = True
    connected: bool = False
    loading: int = 0
    loading_message: str = ""
    last_error: str | None = None
    status_message: str | None = None
    search_history: list[str] = field(default_factory=list)
    task_loads: LoadTracker = field(default_factory=LoadTracker)
    project_loads: LoadTracker = field(default_factory=LoadTracker)
    pending_edits: dict[int, PendingEdit] = field(default_factory=dict)
    next_edit_id: int = 1

    @classmethod
    def from_config(cls, config: AppConfig) -> DomainStore:
        visibility = {s: config.status_visibility.get(s, True) for s in STATUSES}
        return cls(
            selected_project_id=config.default_project_id,
            status_filter=visibility,
            status_filter_active=not all(visibility.values()),
            sort_mode=config.default_sort_mode,
            status_rank=config.status_rank,
            show_completed=config.show_completed_tasks,
        )

    @property
    def is_loading(self) -> bool:
        return self.loading > 0

    def begin_loading(self, message: str) -> None:
        self.loading += 1
        self.loading_message = message

    def end_loading(self) -> None:
        self.loading = max(0, self.loading - 1)
        if self.loading == 0:
            self.loading_message = ""

    def set_error(self, message: str) -> None:
        self.last_error = message

    def clear_error(self) -> None:
        self.last_error = None

    def record_search(self, query: str) -> None:
        """Push ``query`` onto the most-recent-unique search history."""
        query = query.strip()
        if not query:
            return
        if query in self.search_history:
            self.search_history.remove(query)
        self.search_history.insert(0, query)
        del self.search_history[SEARCH_HISTORY_LIMIT:]

    def add_pending_edit(self, task_id: str, fields: dict, previous: dict) -> int:
        edit_id = self.next_edit_id
        self.next_edit_id += 1
        self.pending_edits[edit_id] = PendingEdit(task_id, dict(fields), dict(previous))
        return edit_id

    def with_pending_edits(self, tasks: list[Task]) -> list[Task]:
        """Overlay in-flight optimistic edits on a task snapshot."""
        if not self.pending_edits:
            return tasks
        result = []
        for task in tasks:
            for edit in self.pending_edits.values():
                if edit.task_id == task.id:
                    task = task.with_fields(edit.fields)
            result.append(task)
        return result

    def replace_task(self, task: Task) -> None:
        self.tasks = [task if t.id == task.id else t for t in self.tasks]

    def task_by_id(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def project_by_id(self, project_id: str | None) -> Project | None:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def status_visible(self, status: str) -> bool:
        if self.status_filter_active:
            return self.status_filter.get(status, False)
        return self.show_completed or status != STATUS_DONE


@dataclass
class PresentationStore:
    """Session-local view state."""

    active_panel: ActivePanel = ActivePanel.LIST
    view_mode: ViewMode = ViewMode.TASK
    search_phase: SearchPhase = SearchPhase.INACTIVE
    search_input: str = ""
    search_query: str = ""
    saved_query: str = ""
    matches: list[int] = field(default_factory=list)
    match_cursor: int = 0
    selected_index: int = 0
    project_cursor: int = 0
    details_offset: int = 0
    width: int = 80
    height: int = 24
    details_width: int | None = None
    details_height: int | None = None
    should_quit: bool = False

    @property
    def search_active(self) -> bool:
        """A query is applied (typing or committed)."""
        return self.search_phase is not SearchPhase.INACTIVE and bool(self.search_query)

    @property
    def is_typing(self) -> bool:
        return self.search_phase is SearchPhase.TYPING

    @property
    def list_height(self) -> int:
        """Rows available to the task list: screen minus header and status bar."""
        return max(1, self.height - 4)

    @property
    def half_page(self) -> int:
        return max(1, self.list_height // 2)

    @property
    def details_size(self) -> tuple[int, int]:
        """Text area of the details panel.

        Until the panel reports its size, assume it takes half the screen
        inside a border and one column of padding on each side.
        """
        width = self.details_width if self.details_width is not None else max(1, self.width // 2 - 4)
        height = self.details_height if self.details_height is not None else self.list_height
        return width, height
