"""
Input router.

Maps one key symbol to one action through a fixed-priority chain that
stops at the first tier claiming the key:

1. emergency keys, always live
2. literal text while the search box is being typed into
3. the active modal, which swallows everything else
4. application keys, shared by both view modes
5. keys specific to the current view mode

The router only classifies. What an action does is up to the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lazyarchon import keys
from lazyarchon.state import ViewMode


class Action(Enum):
    # Tier 1
    FORCE_QUIT = "force_quit"
    TOGGLE_HELP = "toggle_help"
    # Tier 2
    SEARCH_TEXT = "search_text"
    SEARCH_BACKSPACE = "search_backspace"
    SEARCH_CLEAR_INPUT = "search_clear_input"
    SEARCH_COMMIT = "search_commit"
    SEARCH_CANCEL = "search_cancel"
    # Tier 3
    MODAL_KEY = "modal_key"
    # Tier 4
    CONFIRM_QUIT = "confirm_quit"
    EXIT_PROJECT_MODE = "exit_project_mode"
    REFRESH = "refresh"
    ENTER_PROJECT_MODE = "enter_project_mode"
    SHOW_ALL = "show_all"
    SELECT_PROJECT = "select_project"
    DISMISS = "dismiss"
    # Tier 5: navigation
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    FAST_UP = "fast_up"
    FAST_DOWN = "fast_down"
    HALF_PAGE_UP = "half_page_up"
    HALF_PAGE_DOWN = "half_page_down"
    JUMP_FIRST = "jump_first"
    JUMP_LAST = "jump_last"
    PANEL_LIST = "panel_list"
    PANEL_DETAILS = "panel_details"
    # Tier 5: search
    ACTIVATE_SEARCH = "activate_search"
    CLEAR_SEARCH = "clear_search"
    NEXT_MATCH = "next_match"
    PREVIOUS_MATCH = "previous_match"
    # Tier 5: entity operations
    CHANGE_STATUS = "change_status"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"
    COPY_ID = "copy_id"
    COPY_TITLE = "copy_title"
    SELECT_FEATURES = "select_features"
    FILTER_STATUSES = "filter_statuses"
    SORT_FORWARD = "sort_forward"
    SORT_BACKWARD = "sort_backward"


@dataclass(frozen=True)
class RouteContext:
    view_mode: ViewMode = ViewMode.TASK
    search_typing: bool = False
    modal_active: bool = False


_APPLICATION_KEYS = frozenset(
    keys.QUIT + keys.CANCEL + keys.CONFIRM + keys.REFRESH + keys.PROJECT_MODE + keys.SHOW_ALL
)

_NAVIGATION = (
    (keys.MOVE_UP, Action.MOVE_UP),
    (keys.MOVE_DOWN, Action.MOVE_DOWN),
    (keys.FAST_UP, Action.FAST_UP),
    (keys.FAST_DOWN, Action.FAST_DOWN),
    (keys.HALF_PAGE_UP, Action.HALF_PAGE_UP),
    (keys.HALF_PAGE_DOWN, Action.HALF_PAGE_DOWN),
    (keys.JUMP_FIRST, Action.JUMP_FIRST),
    (keys.JUMP_LAST, Action.JUMP_LAST),
)

_TASK_MODE = _NAVIGATION + (
    (keys.PANEL_LEFT, Action.PANEL_LIST),
    (keys.PANEL_RIGHT, Action.PANEL_DETAILS),
    (keys.ACTIVATE_SEARCH, Action.ACTIVATE_SEARCH),
    (keys.CLEAR_SEARCH, Action.CLEAR_SEARCH),
    (keys.NEXT_MATCH, Action.NEXT_MATCH),
    (keys.PREVIOUS_MATCH, Action.PREVIOUS_MATCH),
    (keys.CHANGE_STATUS, Action.CHANGE_STATUS),
    (keys.EDIT_TASK, Action.EDIT_TASK),
    (keys.DELETE_TASK, Action.DELETE_TASK),
    (keys.COPY_ID, Action.COPY_ID),
    (keys.COPY_TITLE, Action.COPY_TITLE),
    (keys.SELECT_FEATURES, Action.SELECT_FEATURES),
    (keys.FILTER_STATUSES, Action.FILTER_STATUSES),
    (keys.SORT_FORWARD, Action.SORT_FORWARD),
    (keys.SORT_BACKWARD, Action.SORT_BACKWARD),
)

_PROJECT_MODE = _NAVIGATION + (
    (keys.PANEL_LEFT, Action.EXIT_PROJECT_MODE),
    (keys.PANEL_RIGHT, Action.SELECT_PROJECT),
    (keys.COPY_ID, Action.COPY_ID),
    (keys.COPY_TITLE, Action.COPY_TITLE),
)


def _lookup(key: str, table: tuple) -> Action | None:
    for symbols, action in table:
        if key in symbols:
            return action
    return None


def _emergency(key: str) -> Action | None:
    if key in keys.FORCE_QUIT:
        return Action.FORCE_QUIT
    if key in keys.TOGGLE_HELP:
        return Action.TOGGLE_HELP
    return None


def _search_typing(key: str) -> Action | None:
    if key == keys.ESCAPE:
        return Action.SEARCH_CANCEL
    if key == keys.ENTER:
        return Action.SEARCH_COMMIT
    if key == keys.BACKSPACE:
        return Action.SEARCH_BACKSPACE
    if key == keys.CTRL_U:
        return Action.SEARCH_CLEAR_INPUT
    if keys.is_printable(key):
        return Action.SEARCH_TEXT
    return None


def _application(key: str, mode: ViewMode) -> Action | None:
    project_mode = mode is ViewMode.PROJECT_SELECT
    if key in keys.QUIT:
        return Action.EXIT_PROJECT_MODE if project_mode else Action.CONFIRM_QUIT
    if key in keys.CANCEL:
        return Action.EXIT_PROJECT_MODE if project_mode else Action.DISMISS
    if key in keys.CONFIRM:
        return Action.SELECT_PROJECT if project_mode else None
    if key in keys.REFRESH:
        return Action.REFRESH
    if key in keys.PROJECT_MODE:
        return Action.ENTER_PROJECT_MODE
    if key in keys.SHOW_ALL:
        return Action.SHOW_ALL
    return None


def route(key: str, context: RouteContext) -> Action | None:
    """Classify ``key``; None means no tier claims it."""
    action = _emergency(key)
    if action is not None:
        return action

    if context.search_typing:
        # Keys the search box does not understand are dropped, not passed on
        return _search_typing(key)

    if context.modal_active:
        return Action.MODAL_KEY

    if key in _APPLICATION_KEYS:
        return _application(key, context.view_mode)

    table = _PROJECT_MODE if context.view_mode is ViewMode.PROJECT_SELECT else _TASK_MODE
    return _lookup(key, table)
