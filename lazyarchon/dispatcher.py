"""
Event loop reducer.

The dispatcher owns both stores and the modal coordinator. ``dispatch``
takes one message, mutates state through the pipeline, resolver, search
engine and modal coordinator, and returns the jobs to run next. It never
blocks and never performs I/O itself.

Snapshot loads carry a generation number. A result older than the newest
applied one is dropped, and a confirmed edit or delete marks every load
issued before it as stale so a slow refresh cannot resurrect old values.
Edits still in flight are overlaid on any snapshot that lands meanwhile.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from lazyarchon import keys, search
from lazyarchon.config import AppConfig
from lazyarchon.errors import UpdateValidationError
from lazyarchon.jobs import (
    CopyText,
    Delay,
    DeleteTask,
    Job,
    ListenForPush,
    LoadProjects,
    LoadTasks,
    UpdateTask,
)
from lazyarchon.messages import (
    Copied,
    CopyFailed,
    DetailsResized,
    JobCrashed,
    KeyPressed,
    Message,
    PollTick,
    ProjectsLoaded,
    ProjectsLoadFailed,
    PushFailed,
    PushReceived,
    Resized,
    TaskDeleted,
    TaskDeleteFailed,
    TasksLoaded,
    TasksLoadFailed,
    TaskUpdated,
    TaskUpdateFailed,
)
from lazyarchon.modals import (
    ConfirmationModal,
    ConfirmPurpose,
    Confirmed,
    Dismissed,
    EditSubmitted,
    FeaturesApplied,
    FeatureSelectModal,
    HelpModal,
    ModalCoordinator,
    ModalKind,
    ModalOutcome,
    StatusEditModal,
    StatusFilterApplied,
    StatusFilterModal,
    StatusPicked,
    TaskEditModal,
)
from lazyarchon.models import STATUSES, Project, Task
from lazyarchon.pipeline import available_features, visible_tasks
from lazyarchon.providers import PushEventKind
from lazyarchon.router import Action, RouteContext, route
from lazyarchon.schemas import validate_task_update
from lazyarchon.selection import clamp_index, stable_selection, task_at
from lazyarchon.state import ActivePanel, DomainStore, PresentationStore, ViewMode
from lazyarchon.views.text import details_lines

logger = logging.getLogger(__name__)

PUSH_RETRY_SECONDS = 5.0

QUIT_MESSAGE = "Are you sure you want to quit LazyArchon?"


def _previous_values(task: Task, fields: dict) -> dict:
    """Current values of ``task`` for the update fields in ``fields``."""
    current = {
        "title": task.title,
        "status": task.status,
        "task_order": task.priority,
        "feature": task.tag or "",
    }
    return {name: current[name] for name in fields if name in current}


class Dispatcher:
    """Single-threaded reducer over the domain and presentation stores."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.domain = DomainStore.from_config(config)
        self.presentation = PresentationStore()
        self.modals = ModalCoordinator()

        self._handlers: dict[type, Callable[..., list[Job]]] = {
            KeyPressed: self._on_key,
            Resized: self._on_resized,
            DetailsResized: self._on_details_resized,
            PollTick: self._on_poll_tick,
            TasksLoaded: self._on_tasks_loaded,
            TasksLoadFailed: self._on_tasks_load_failed,
            ProjectsLoaded: self._on_projects_loaded,
            ProjectsLoadFailed: self._on_projects_load_failed,
            TaskUpdated: self._on_task_updated,
            TaskUpdateFailed: self._on_task_update_failed,
            TaskDeleted: self._on_task_deleted,
            TaskDeleteFailed: self._on_task_delete_failed,
            Copied: self._on_copied,
            CopyFailed: self._on_copy_failed,
            PushReceived: self._on_push_received,
            PushFailed: self._on_push_failed,
            JobCrashed: self._on_job_crashed,
        }

        self._actions: dict[Action, Callable[[str], list[Job]]] = {
            Action.FORCE_QUIT: self._force_quit,
            Action.TOGGLE_HELP: self._toggle_help,
            Action.SEARCH_TEXT: self._search_text,
            Action.SEARCH_BACKSPACE: self._search_backspace,
            Action.SEARCH_CLEAR_INPUT: self._search_clear_input,
            Action.SEARCH_COMMIT: self._search_commit,
            Action.SEARCH_CANCEL: self._search_cancel,
            Action.MODAL_KEY: self._modal_key,
            Action.CONFIRM_QUIT: self._confirm_quit,
            Action.EXIT_PROJECT_MODE: self._exit_project_mode,
            Action.REFRESH: self._refresh_key,
            Action.ENTER_PROJECT_MODE: self._enter_project_mode,
            Action.SHOW_ALL: self._show_all,
            Action.SELECT_PROJECT: self._select_project,
            Action.DISMISS: self._dismiss,
            Action.MOVE_UP: lambda key: self._navigate(-1),
            Action.MOVE_DOWN: lambda key: self._navigate(1),
            Action.FAST_UP: lambda key: self._navigate(-keys.FAST_STEP),
            Action.FAST_DOWN: lambda key: self._navigate(keys.FAST_STEP),
            Action.HALF_PAGE_UP: lambda key: self._navigate(-self.presentation.half_page),
            Action.HALF_PAGE_DOWN: lambda key: self._navigate(self.presentation.half_page),
            Action.JUMP_FIRST: lambda key: self._jump(first=True),
            Action.JUMP_LAST: lambda key: self._jump(first=False),
            Action.PANEL_LIST: lambda key: self._focus_panel(ActivePanel.LIST),
            Action.PANEL_DETAILS: lambda key: self._focus_panel(ActivePanel.DETAILS),
            Action.ACTIVATE_SEARCH: self._activate_search,
            Action.CLEAR_SEARCH: self._clear_search,
            Action.NEXT_MATCH: self._next_match,
            Action.PREVIOUS_MATCH: self._previous_match,
            Action.CHANGE_STATUS: self._change_status,
            Action.EDIT_TASK: self._edit_task,
            Action.DELETE_TASK: self._delete_task,
            Action.COPY_ID: lambda key: self._copy(title=False),
            Action.COPY_TITLE: lambda key: self._copy(title=True),
            Action.SELECT_FEATURES: self._select_features,
            Action.FILTER_STATUSES: self._filter_statuses,
            Action.SORT_FORWARD: lambda key: self._cycle_sort(forward=True),
            Action.SORT_BACKWARD: lambda key: self._cycle_sort(forward=False),
        }

    # Public surface

    @property
    def handled_messages(self) -> frozenset[type]:
        return frozenset(self._handlers)

    @property
    def handled_actions(self) -> frozenset[Action]:
        return frozenset(self._actions)

    @property
    def should_quit(self) -> bool:
        return self.presentation.should_quit

    def start(self) -> list[Job]:
        """Jobs for the initial load, the first poll and the push listener."""
        jobs = self._refresh("Loading tasks...")
        if self.config.polling_enabled:
            jobs.append(Delay(self.config.polling_interval, PollTick()))
        if self.config.enable_push:
            jobs.append(ListenForPush())
        return jobs

    def dispatch(self, message: Message) -> list[Job]:
        """Handle one message and return the jobs it asks for."""
        handler = self._handlers.get(type(message))
        if handler is None:
            return []
        return handler(message)

    def visible_tasks(self) -> list[Task]:
        return visible_tasks(self.domain)

    def selected_task(self) -> Task | None:
        """Task under the cursor, or None when the list is empty."""
        return task_at(self.visible_tasks(), self.presentation.selected_index)

    def project_entries(self) -> list[Project | None]:
        """Projects followed by None for the trailing "All Tasks" entry."""
        return [*self.domain.projects, None]

    def highlighted_project(self) -> Project | None:
        """Project under the project-select cursor; None means "All Tasks"."""
        return task_at(self.project_entries(), self.presentation.project_cursor)

    # Helpers

    @contextmanager
    def _list_change(self) -> Iterator[None]:
        """Wrap a change to the visible list: keep the selection, refresh matches."""
        with stable_selection(self.domain, self.presentation):
            yield
        search.recompute_matches(self.presentation, self.visible_tasks())

    def _load_tasks(self, message: str) -> LoadTasks:
        """Issue a task load stamped with a fresh generation."""
        self.domain.begin_loading(message)
        return LoadTasks(self.domain.task_loads.issue(), project_id=self.domain.selected_project_id)

    def _load_projects(self, message: str) -> LoadProjects:
        """Issue a project load stamped with a fresh generation."""
        self.domain.begin_loading(message)
        return LoadProjects(self.domain.project_loads.issue())

    def _refresh(self, message: str) -> list[Job]:
        """Reload tasks and projects together."""
        return [self._load_tasks(message), self._load_projects(message)]

    def _submit_update(self, task_id: str, fields: dict) -> list[Job]:
        """Validate an update, apply it optimistically and send it."""
        try:
            validate_task_update(fields)
        except UpdateValidationError as e:
            self.domain.set_error(str(e))
            return []
        task = self.domain.task_by_id(task_id)
        if task is None:
            return []
        edit_id = self.domain.add_pending_edit(task_id, fields, _previous_values(task, fields))
        with self._list_change():
            self.domain.replace_task(task.with_fields(fields))
        self.domain.begin_loading("Updating task...")
        logger.debug("Edit %d issued for task %s: %s", edit_id, task_id, fields)
        return [UpdateTask(edit_id, task_id, fields)]

    # Message handlers

    def _on_key(self, message: KeyPressed) -> list[Job]:
        """Route a key press to its action."""
        p = self.presentation
        context = RouteContext(view_mode=p.view_mode, search_typing=p.is_typing, modal_active=self.modals.is_active())
        action = route(message.key, context)
        if action is None:
            return []
        self.domain.status_message = None
        return self._actions[action](message.key)

    def _on_resized(self, message: Resized) -> list[Job]:
        """Record the terminal size and re-page scrollable modals."""
        p = self.presentation
        p.width = max(1, message.width)
        p.height = max(1, message.height)
        modal = self.modals.modal
        if isinstance(modal, (HelpModal, FeatureSelectModal)):
            modal.page_height = p.list_height
            if isinstance(modal, HelpModal):
                modal.scroll(0)
        return []

    def _on_details_resized(self, message: DetailsResized) -> list[Job]:
        """Track the details text area so scrolling wraps the way it renders."""
        p = self.presentation
        p.details_width = max(1, message.width)
        p.details_height = max(1, message.height)
        p.details_offset = min(p.details_offset, self._details_max_offset())
        return []

    def _on_poll_tick(self, message: PollTick) -> list[Job]:
        """Refresh whatever is not already loading, then reschedule."""
        if not self.config.polling_enabled or self.presentation.should_quit:
            return []
        jobs: list[Job] = []
        if self.domain.task_loads.outstanding:
            logger.debug("Poll skipped task load, %d in flight", len(self.domain.task_loads.in_flight))
        else:
            jobs.append(self._load_tasks(""))
        if not self.domain.project_loads.outstanding:
            jobs.append(self._load_projects(""))
        jobs.append(Delay(self.config.polling_interval, PollTick()))
        return jobs

    def _on_tasks_loaded(self, message: TasksLoaded) -> list[Job]:
        """Apply a task snapshot unless a newer one or a confirmed edit supersedes it."""
        self.domain.end_loading()
        self.domain.task_loads.settle(message.generation)
        if not self.domain.task_loads.accept(message.generation):
            logger.debug(
                "Discarded stale task snapshot %d (applied %d, floor %d)",
                message.generation,
                self.domain.task_loads.applied,
                self.domain.task_loads.floor,
            )
            return []
        with self._list_change():
            self.domain.tasks = self.domain.with_pending_edits(list(message.tasks))
        self.domain.connected = True
        self.domain.clear_error()
        logger.debug("Applied task snapshot %d with %d tasks", message.generation, len(message.tasks))
        return []

    def _on_tasks_load_failed(self, message: TasksLoadFailed) -> list[Job]:
        """Keep the snapshot and show the error if the load was still current."""
        self.domain.end_loading()
        self.domain.task_loads.settle(message.generation)
        if not self.domain.task_loads.is_current(message.generation):
            logger.debug("Ignored failure of stale task load %d", message.generation)
            return []
        self.domain.connected = False
        self.domain.set_error(f"Failed to load tasks: {message.error}")
        return []

    def _on_projects_loaded(self, message: ProjectsLoaded) -> list[Job]:
        """Replace the project list, widening the scope if the selected project vanished."""
        self.domain.end_loading()
        self.domain.project_loads.settle(message.generation)
        if not self.domain.project_loads.accept(message.generation):
            logger.debug("Discarded stale project snapshot %d", message.generation)
            return []
        self.domain.projects = list(message.projects)
        self.presentation.project_cursor = clamp_index(
            self.presentation.project_cursor, len(self.project_entries())
        )
        logger.debug("Applied project snapshot %d with %d projects", message.generation, len(message.projects))
        selected = self.domain.selected_project_id
        if selected is not None and self.domain.project_by_id(selected) is None:
            logger.debug("Selected project %s vanished, showing all projects", selected)
            with self._list_change():
                self.domain.selected_project_id = None
                self.domain.feature_filter = None
            return [self._load_tasks("Loading all tasks...")]
        return []

    def _on_projects_load_failed(self, message: ProjectsLoadFailed) -> list[Job]:
        """Show the error if the load was still current."""
        self.domain.end_loading()
        self.domain.project_loads.settle(message.generation)
        if not self.domain.project_loads.is_current(message.generation):
            return []
        self.domain.connected = False
        self.domain.set_error(f"Failed to load projects: {message.error}")
        return []

    def _on_task_updated(self, message: TaskUpdated) -> list[Job]:
        """Confirm an edit and reload, marking older loads stale."""
        self.domain.end_loading()
        self.domain.pending_edits.pop(message.edit_id, None)
        with self._list_change():
            self.domain.replace_task(message.task)
            self.domain.tasks = self.domain.with_pending_edits(self.domain.tasks)
        self.domain.task_loads.invalidate_outstanding()
        self.domain.status_message = "Task updated"
        logger.debug("Edit %d confirmed for task %s", message.edit_id, message.task.id)
        return [self._load_tasks("")]

    def _on_task_update_failed(self, message: TaskUpdateFailed) -> list[Job]:
        """Roll the optimistic edit back and reload."""
        self.domain.end_loading()
        edit = self.domain.pending_edits.pop(message.edit_id, None)
        if edit is not None:
            task = self.domain.task_by_id(edit.task_id)
            if task is not None:
                with self._list_change():
                    self.domain.replace_task(task.with_fields(edit.previous))
                    self.domain.tasks = self.domain.with_pending_edits(self.domain.tasks)
        self.domain.set_error(f"Failed to update task: {message.error}")
        return [self._load_tasks("")]

    def _on_task_deleted(self, message: TaskDeleted) -> list[Job]:
        """Drop the task locally and reload."""
        self.domain.end_loading()
        with self._list_change():
            self.domain.tasks = [t for t in self.domain.tasks if t.id != message.task_id]
        self.domain.task_loads.invalidate_outstanding()
        self.domain.status_message = "Task deleted"
        return [self._load_tasks("")]

    def _on_task_delete_failed(self, message: TaskDeleteFailed) -> list[Job]:
        """Show the error; reload if the task was already gone."""
        self.domain.end_loading()
        self.domain.set_error(f"Failed to delete task: {message.error}")
        if message.not_found:
            return [self._load_tasks("")]
        return []

    def _on_copied(self, message: Copied) -> list[Job]:
        """Report a finished copy in the status bar."""
        self.domain.status_message = f"Copied {message.label} to clipboard"
        return []

    def _on_copy_failed(self, message: CopyFailed) -> list[Job]:
        self.domain.set_error(f"Failed to copy: {message.error}")
        return []

    def _on_push_received(self, message: PushReceived) -> list[Job]:
        """Refresh what a push event touched and listen again."""
        jobs: list[Job] = []
        event = message.event
        if event is not None:
            logger.debug("Push event %s for %s", event.kind.value, event.entity_id)
            if event.kind in (PushEventKind.TASK_CREATED, PushEventKind.TASK_UPDATED, PushEventKind.TASK_DELETED):
                jobs.append(self._load_tasks(""))
            elif event.kind is PushEventKind.PROJECT_UPDATED:
                jobs.extend(self._refresh(""))
            elif event.kind is PushEventKind.CONNECTED:
                self.domain.connected = True
            elif event.kind is PushEventKind.DISCONNECTED:
                self.domain.connected = False
        if not self.presentation.should_quit:
            jobs.append(ListenForPush())
        return jobs

    def _on_push_failed(self, message: PushFailed) -> list[Job]:
        """Mark the push stream down and retry listening later."""
        self.domain.connected = False
        if self.presentation.should_quit:
            return []
        return [Delay(PUSH_RETRY_SECONDS, PushReceived(None))]

    def _on_job_crashed(self, message: JobCrashed) -> list[Job]:
        """Treat an unexpected job failure like a failed result."""
        if message.tracks_loading:
            self.domain.end_loading()
        if message.job == LoadTasks.__name__:
            self.domain.task_loads.settle(message.generation)
        elif message.job == LoadProjects.__name__:
            self.domain.project_loads.settle(message.generation)
        self.domain.set_error(f"Internal error in {message.job}: {message.error}")
        return []

    # Tier 1

    def _force_quit(self, key: str) -> list[Job]:
        """Quit immediately, from any state."""
        self.presentation.should_quit = True
        return []

    def _toggle_help(self, key: str) -> list[Job]:
        """Open the help modal, or close it when it is showing."""
        if self.modals.is_active(ModalKind.HELP):
            self.modals.hide()
            return []
        if self.presentation.is_typing:
            self._search_commit(key)
        self.modals.show(HelpModal(len(keys.help_lines()), self.presentation.list_height))
        return []

    # Tier 2

    def _search_text(self, key: str) -> list[Job]:
        search.type_text(self.presentation, self.visible_tasks(), keys.key_text(key))
        return []

    def _search_backspace(self, key: str) -> list[Job]:
        search.backspace(self.presentation, self.visible_tasks())
        return []

    def _search_clear_input(self, key: str) -> list[Job]:
        search.clear_input(self.presentation, self.visible_tasks())
        return []

    def _search_commit(self, key: str) -> list[Job]:
        """Finish typing and remember the query."""
        query = search.commit(self.presentation, self.visible_tasks())
        self.domain.record_search(query)
        return []

    def _search_cancel(self, key: str) -> list[Job]:
        """Abandon typing and restore the previous query."""
        search.cancel(self.presentation, self.visible_tasks())
        return []

    # Tier 3

    def _modal_key(self, key: str) -> list[Job]:
        """Forward a key to the active modal and act on its outcome."""
        outcome = self.modals.handle_key(key)
        if outcome is None:
            return []
        return self._apply_outcome(outcome)

    def _apply_outcome(self, outcome: ModalOutcome) -> list[Job]:
        """Turn a closed modal's outcome into state changes and jobs."""
        if isinstance(outcome, Dismissed):
            return []
        if isinstance(outcome, StatusPicked):
            task = self.domain.task_by_id(outcome.task_id)
            if task is None or task.status == outcome.status:
                return []
            return self._submit_update(outcome.task_id, {"status": outcome.status})
        if isinstance(outcome, EditSubmitted):
            return self._submit_update(outcome.task_id, outcome.fields)
        if isinstance(outcome, Confirmed):
            if not outcome.accepted:
                return []
            if outcome.purpose is ConfirmPurpose.QUIT:
                self.presentation.should_quit = True
                return []
            self.domain.begin_loading("Deleting task...")
            return [DeleteTask(outcome.subject_id)]
        if isinstance(outcome, FeaturesApplied):
            selection = outcome.selection
            with self._list_change():
                if selection and all(selection.values()):
                    self.domain.feature_filter = None
                else:
                    self.domain.feature_filter = dict(selection)
            return []
        if isinstance(outcome, StatusFilterApplied):
            with self._list_change():
                self.domain.status_filter = dict(outcome.selection)
                self.domain.status_filter_active = True
            return []
        raise TypeError(f"Unhandled modal outcome: {outcome!r}")

    # Tier 4

    def _confirm_quit(self, key: str) -> list[Job]:
        """Ask before quitting."""
        self.modals.show(
            ConfirmationModal(ConfirmPurpose.QUIT, QUIT_MESSAGE, confirm_text="Quit", cancel_text="Cancel")
        )
        return []

    def _exit_project_mode(self, key: str) -> list[Job]:
        """Leave project selection without reloading."""
        self.presentation.view_mode = ViewMode.TASK
        return []

    def _refresh_key(self, key: str) -> list[Job]:
        """Manual refresh; also clears a shown error."""
        if self.domain.last_error is not None:
            self.domain.clear_error()
            return self._refresh("Retrying...")
        return self._refresh("Refreshing data...")

    def _enter_project_mode(self, key: str) -> list[Job]:
        """Open project selection with the cursor on the current scope."""
        p = self.presentation
        if p.view_mode is ViewMode.PROJECT_SELECT:
            return []
        p.view_mode = ViewMode.PROJECT_SELECT
        selected = self.domain.selected_project_id
        ids = [project.id for project in self.domain.projects]
        p.project_cursor = ids.index(selected) if selected in ids else len(ids)
        return []

    def _change_project(self, project_id: str | None, message: str) -> list[Job]:
        """Switch the task scope and reload its tasks."""
        with self._list_change():
            if project_id != self.domain.selected_project_id:
                self.domain.feature_filter = None
            self.domain.selected_project_id = project_id
        self.presentation.view_mode = ViewMode.TASK
        return [self._load_tasks(message)]

    def _show_all(self, key: str) -> list[Job]:
        """Widen the scope to every project."""
        return self._change_project(None, "Loading all tasks...")

    def _select_project(self, key: str) -> list[Job]:
        """Apply the project under the cursor."""
        entry = self.highlighted_project()
        if entry is None:
            return self._change_project(None, "Loading all tasks...")
        return self._change_project(entry.id, "Loading project tasks...")

    def _dismiss(self, key: str) -> list[Job]:
        """Escape: back to the list and clear the error banner."""
        self.presentation.active_panel = ActivePanel.LIST
        self.domain.clear_error()
        return []

    # Tier 5

    def _navigate(self, delta: int) -> list[Job]:
        """Move the cursor, the project cursor or the details scroll by ``delta``."""
        p = self.presentation
        if p.view_mode is ViewMode.PROJECT_SELECT:
            p.project_cursor = clamp_index(p.project_cursor + delta, len(self.project_entries()))
            return []
        if p.active_panel is ActivePanel.DETAILS:
            p.details_offset = max(0, min(p.details_offset + delta, self._details_max_offset()))
            return []
        self._select(p.selected_index + delta)
        return []

    def _jump(self, first: bool) -> list[Job]:
        """Go to the first or last row of whatever has focus."""
        p = self.presentation
        if p.view_mode is ViewMode.PROJECT_SELECT:
            p.project_cursor = 0 if first else len(self.project_entries()) - 1
        elif p.active_panel is ActivePanel.DETAILS:
            p.details_offset = 0 if first else self._details_max_offset()
        else:
            self._select(0 if first else len(self.visible_tasks()) - 1)
        return []

    def _details_max_offset(self) -> int:
        """Last scroll offset that still fills the details panel."""
        width, height = self.presentation.details_size
        lines = details_lines(self.selected_task(), width)
        return max(0, len(lines) - height)

    def _select(self, index: int) -> None:
        """Move the selection, resetting the details scroll when it changes."""
        p = self.presentation
        new_index = clamp_index(index, len(self.visible_tasks()))
        if new_index != p.selected_index:
            p.details_offset = 0
        p.selected_index = new_index
        search.sync_match_cursor(p)

    def _focus_panel(self, panel: ActivePanel) -> list[Job]:
        self.presentation.active_panel = panel
        return []

    def _activate_search(self, key: str) -> list[Job]:
        search.activate(self.presentation)
        return []

    def _clear_search(self, key: str) -> list[Job]:
        search.clear(self.presentation)
        return []

    def _next_match(self, key: str) -> list[Job]:
        """Jump to the next search match."""
        before = self.presentation.selected_index
        if search.next_match(self.presentation) and self.presentation.selected_index != before:
            self.presentation.details_offset = 0
        return []

    def _previous_match(self, key: str) -> list[Job]:
        """Jump to the previous search match."""
        before = self.presentation.selected_index
        if search.previous_match(self.presentation) and self.presentation.selected_index != before:
            self.presentation.details_offset = 0
        return []

    def _change_status(self, key: str) -> list[Job]:
        """Open the status picker for the selected task."""
        task = self.selected_task()
        if task is not None:
            self.modals.show(StatusEditModal.for_task(task))
        return []

    def _edit_task(self, key: str) -> list[Job]:
        """Open the property editor for the selected task."""
        task = self.selected_task()
        if task is not None:
            features = [name for name, _ in available_features(self.domain)]
            self.modals.show(TaskEditModal.for_task(task, features))
        return []

    def _delete_task(self, key: str) -> list[Job]:
        """Ask before deleting the selected task."""
        task = self.selected_task()
        if task is not None:
            self.modals.show(
                ConfirmationModal(
                    ConfirmPurpose.DELETE,
                    f"Delete task '{task.title}'? This cannot be undone.",
                    confirm_text="Delete",
                    cancel_text="Cancel",
                    subject_id=task.id,
                )
            )
        return []

    def _copy(self, title: bool) -> list[Job]:
        """Copy the id or title of the task or project under the cursor."""
        if self.presentation.view_mode is ViewMode.PROJECT_SELECT:
            entity = self.highlighted_project()
            kind = "project"
        else:
            entity = self.selected_task()
            kind = "task"
        if entity is None:
            return []
        if title:
            return [CopyText(f"{kind} title", entity.title)]
        return [CopyText(f"{kind} ID", entity.id)]

    def _select_features(self, key: str) -> list[Job]:
        """Open the feature filter over this scope's features."""
        features = available_features(self.domain)
        if not features:
            self.domain.status_message = "No features in this project"
            return []
        self.modals.show(FeatureSelectModal.open(features, self.domain.feature_filter, self.presentation.list_height))
        return []

    def _filter_statuses(self, key: str) -> list[Job]:
        """Open the status filter with the statuses currently shown."""
        current = {status: self.domain.status_visible(status) for status in STATUSES}
        self.modals.show(StatusFilterModal.open(current))
        return []

    def _cycle_sort(self, forward: bool) -> list[Job]:
        """Step to the next or previous sort mode."""
        with self._list_change():
            mode = self.domain.sort_mode
            self.domain.sort_mode = mode.next() if forward else mode.previous()
        logger.debug("Sort mode %s -> %s", mode.label, self.domain.sort_mode.label)
        return []
