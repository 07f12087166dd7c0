"""
Modal focus coordinator and modal sub-states.

At most one modal is active. Each modal owns its own sub-state and turns
keys into an optional outcome; the dispatcher interprets outcomes and
never reaches into a modal's internals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from lazyarchon import keys
from lazyarchon.models import STATUSES, Task

logger = logging.getLogger(__name__)

PRIORITY_MIN = 0
PRIORITY_MAX = 999
PRIORITY_DIGITS = 3
FEATURE_NAME_LIMIT = 30
FEATURE_SEARCH_LIMIT = 50


class ModalKind(Enum):
    NONE = "none"
    HELP = "help"
    STATUS_EDIT = "status_edit"
    CONFIRMATION = "confirmation"
    TASK_EDIT = "task_edit"
    FEATURE_SELECT = "feature_select"
    STATUS_FILTER = "status_filter"


class ConfirmPurpose(Enum):
    QUIT = "quit"
    DELETE = "delete"


# Outcomes


@dataclass(frozen=True)
class Dismissed:
    """Modal closed without an action."""


@dataclass(frozen=True)
class StatusPicked:
    task_id: str
    status: str


@dataclass(frozen=True)
class Confirmed:
    purpose: ConfirmPurpose
    accepted: bool
    subject_id: str | None = None


@dataclass(frozen=True)
class EditSubmitted:
    task_id: str
    fields: dict


@dataclass(frozen=True)
class FeaturesApplied:
    selection: dict[str, bool]


@dataclass(frozen=True)
class StatusFilterApplied:
    selection: dict[str, bool]


ModalOutcome = Union[Dismissed, StatusPicked, Confirmed, EditSubmitted, FeaturesApplied, StatusFilterApplied]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _direct_status(key: str) -> int | None:
    """Index for the ``1``-``4`` status shortcuts."""
    if len(key) == 1 and key.isdigit() and 1 <= int(key) <= len(STATUSES):
        return int(key) - 1
    return None


# Sub-states


@dataclass
class HelpModal:
    """Scrollable help text."""

    line_count: int
    page_height: int = 20
    offset: int = 0

    kind = ModalKind.HELP

    @property
    def max_offset(self) -> int:
        return max(0, self.line_count - self.page_height)

    def scroll(self, delta: int) -> None:
        self.offset = _clamp(self.offset + delta, 0, self.max_offset)

    def handle_key(self, key: str) -> ModalOutcome | None:
        half = max(1, self.page_height // 2)
        if key in keys.CANCEL or key in keys.QUIT:
            return Dismissed()
        if key in keys.MOVE_DOWN:
            self.scroll(1)
        elif key in keys.MOVE_UP:
            self.scroll(-1)
        elif key in keys.FAST_DOWN:
            self.scroll(keys.FAST_STEP)
        elif key in keys.FAST_UP:
            self.scroll(-keys.FAST_STEP)
        elif key in keys.HALF_PAGE_DOWN:
            self.scroll(half)
        elif key in keys.HALF_PAGE_UP:
            self.scroll(-half)
        elif key in keys.JUMP_FIRST:
            self.offset = 0
        elif key in keys.JUMP_LAST:
            self.offset = self.max_offset
        return None


@dataclass
class StatusEditModal:
    """Pick a new status for one task."""

    task_id: str
    title: str
    current: str
    cursor: int = 0

    kind = ModalKind.STATUS_EDIT

    @classmethod
    def for_task(cls, task: Task) -> StatusEditModal:
        cursor = STATUSES.index(task.status) if task.status in STATUSES else 0
        return cls(task_id=task.id, title=task.title, current=task.status, cursor=cursor)

    def handle_key(self, key: str) -> ModalOutcome | None:
        if key in keys.CANCEL or key in keys.QUIT:
            return Dismissed()
        if key in keys.MOVE_DOWN:
            self.cursor = min(self.cursor + 1, len(STATUSES) - 1)
        elif key in keys.MOVE_UP:
            self.cursor = max(self.cursor - 1, 0)
        elif key == keys.ENTER or key == "l":
            return StatusPicked(self.task_id, STATUSES[self.cursor])
        elif (index := _direct_status(key)) is not None:
            self.cursor = index
        return None


@dataclass
class ConfirmationModal:
    """Yes/No question. Cursor 0 is the confirm option."""

    purpose: ConfirmPurpose
    message: str
    confirm_text: str = "Yes"
    cancel_text: str = "No"
    subject_id: str | None = None
    cursor: int = 0

    kind = ModalKind.CONFIRMATION

    def _answer(self, accepted: bool) -> Confirmed:
        return Confirmed(self.purpose, accepted, self.subject_id)

    def handle_key(self, key: str) -> ModalOutcome | None:
        if key in keys.CANCEL or key in keys.QUIT or key in ("n", "N"):
            return self._answer(False)
        if key in ("y", "Y"):
            return self._answer(True)
        if key in ("h", keys.LEFT):
            self.cursor = 0
        elif key in ("l", keys.RIGHT):
            self.cursor = 1
        elif key in (keys.TAB, keys.SHIFT_TAB):
            self.cursor = (self.cursor + 1) % 2
        elif key in (keys.ENTER, keys.SPACE):
            return self._answer(self.cursor == 0)
        return None


class EditField(Enum):
    STATUS = 0
    PRIORITY = 1
    FEATURE = 2


@dataclass
class TaskEditModal:
    """Edit status, priority and feature of one task.

    Submitting sends only the fields that differ from the task as it was
    when the modal opened.
    """

    task_id: str
    title: str
    original_status: str
    original_priority: int
    original_feature: str
    features: list[str] = field(default_factory=list)
    status_index: int = 0
    priority: int = 0
    feature: str = ""
    active_field: EditField = EditField.STATUS
    priority_input: str | None = None
    feature_cursor: int | None = None
    new_feature: str | None = None

    kind = ModalKind.TASK_EDIT

    @classmethod
    def for_task(cls, task: Task, features: list[str]) -> TaskEditModal:
        status_index = STATUSES.index(task.status) if task.status in STATUSES else 0
        return cls(
            task_id=task.id,
            title=task.title,
            original_status=task.status,
            original_priority=task.priority,
            original_feature=task.tag or "",
            features=list(features),
            status_index=status_index,
            priority=task.priority,
            feature=task.tag or "",
        )

    @property
    def status(self) -> str:
        return STATUSES[self.status_index]

    def changed_fields(self) -> dict:
        fields: dict = {}
        if self.status != self.original_status:
            fields["status"] = self.status
        if self.priority != self.original_priority:
            fields["task_order"] = self.priority
        if self.feature != self.original_feature:
            fields["feature"] = self.feature
        return fields

    def submit(self) -> ModalOutcome:
        fields = self.changed_fields()
        if not fields:
            return Dismissed()
        return EditSubmitted(self.task_id, fields)

    def _reset_field_modes(self) -> None:
        self.priority_input = None
        self.feature_cursor = None
        self.new_feature = None

    def _move_field(self, delta: int) -> None:
        self._reset_field_modes()
        self.active_field = EditField((self.active_field.value + delta) % len(EditField))

    def handle_key(self, key: str) -> ModalOutcome | None:
        if self.priority_input is not None:
            return self._priority_text(key)
        if self.new_feature is not None:
            return self._feature_text(key)
        if self.feature_cursor is not None:
            return self._feature_list(key)

        if key in keys.CANCEL or key in keys.QUIT:
            return Dismissed()
        if key in keys.MOVE_DOWN or key == keys.TAB:
            self._move_field(1)
            return None
        if key in keys.MOVE_UP or key == keys.SHIFT_TAB:
            self._move_field(-1)
            return None
        if key == keys.SPACE:
            return self.submit()

        if self.active_field is EditField.STATUS:
            return self._status_field(key)
        if self.active_field is EditField.PRIORITY:
            return self._priority_field(key)
        return self._feature_field(key)

    def _status_field(self, key: str) -> ModalOutcome | None:
        if key in ("l", keys.RIGHT):
            self.status_index = (self.status_index + 1) % len(STATUSES)
        elif key in ("h", keys.LEFT):
            self.status_index = (self.status_index - 1) % len(STATUSES)
        elif (index := _direct_status(key)) is not None:
            self.status_index = index
        elif key == keys.ENTER:
            return self.submit()
        return None

    def _priority_field(self, key: str) -> ModalOutcome | None:
        step = {"h": -1, keys.LEFT: -1, "l": 1, keys.RIGHT: 1, "H": -10, "L": 10}.get(key)
        if step is not None:
            self.priority = _clamp(self.priority + step, PRIORITY_MIN, PRIORITY_MAX)
        elif key == keys.ENTER:
            self.priority_input = str(self.priority)
        elif len(key) == 1 and key.isdigit():
            self.priority_input = key
        return None

    def _priority_text(self, key: str) -> ModalOutcome | None:
        if key == keys.ESCAPE:
            self.priority_input = None
        elif key == keys.ENTER:
            if self.priority_input:
                self.priority = _clamp(int(self.priority_input), PRIORITY_MIN, PRIORITY_MAX)
            self.priority_input = None
        elif key == keys.BACKSPACE:
            self.priority_input = self.priority_input[:-1]
        elif key == keys.CTRL_U:
            self.priority_input = ""
        elif len(key) == 1 and key.isdigit() and len(self.priority_input) < PRIORITY_DIGITS:
            self.priority_input += key
        return None

    def _feature_field(self, key: str) -> ModalOutcome | None:
        if key in ("l", keys.RIGHT, keys.ENTER):
            self.feature_cursor = self.features.index(self.feature) if self.feature in self.features else 0
        elif key == "n":
            self.new_feature = ""
        return None

    def _feature_list(self, key: str) -> ModalOutcome | None:
        last = max(0, len(self.features) - 1)
        if key in keys.MOVE_DOWN:
            self.feature_cursor = min(self.feature_cursor + 1, last)
        elif key in keys.MOVE_UP:
            self.feature_cursor = max(self.feature_cursor - 1, 0)
        elif key == keys.ENTER:
            if self.features:
                self.feature = self.features[self.feature_cursor]
            self.feature_cursor = None
        elif key in ("h", keys.ESCAPE):
            self.feature_cursor = None
        elif key == "n":
            self.feature_cursor = None
            self.new_feature = ""
        elif key == keys.SPACE:
            return self.submit()
        return None

    def _feature_text(self, key: str) -> ModalOutcome | None:
        if key == keys.ESCAPE:
            self.new_feature = None
        elif key == keys.ENTER:
            name = self.new_feature.strip()
            if name:
                self.feature = name
                self.new_feature = None
        elif key == keys.BACKSPACE:
            self.new_feature = self.new_feature[:-1]
        elif key == keys.CTRL_U:
            self.new_feature = ""
        elif keys.is_printable(key) and len(self.new_feature) < FEATURE_NAME_LIMIT:
            char = keys.key_text(key)
            if char.isascii() and (char.isalnum() or char in "_- "):
                self.new_feature += char
        return None


@dataclass
class FeatureSelectModal:
    """Toggle which feature tags are visible.

    ``backup`` is the selection at open time; cancelling hands it back
    unchanged, applying hands back ``selection``.
    """

    features: list[tuple[str, int]]
    selection: dict[str, bool]
    backup: dict[str, bool] = field(default_factory=dict)
    cursor: int = 0
    page_height: int = 20
    search_input: str | None = None
    search_query: str = ""
    matches: list[int] = field(default_factory=list)

    kind = ModalKind.FEATURE_SELECT

    @classmethod
    def open(
        cls,
        features: list[tuple[str, int]],
        current: dict[str, bool] | None,
        page_height: int = 20,
    ) -> FeatureSelectModal:
        # No filter means every feature is shown, so every box starts ticked
        if current is None:
            selection = {name: True for name, _ in features}
        else:
            selection = {name: current.get(name, False) for name, _ in features}
        return cls(features=list(features), selection=selection, backup=dict(selection), page_height=page_height)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.features]

    def _move(self, delta: int) -> None:
        if self.features:
            self.cursor = _clamp(self.cursor + delta, 0, len(self.features) - 1)

    def _all_selected(self) -> bool:
        return bool(self.features) and all(self.selection.get(n, False) for n in self.names)

    def _set_all(self, value: bool) -> None:
        for name in self.names:
            self.selection[name] = value

    def _update_matches(self, query: str) -> None:
        self.search_query = query.strip()
        needle = self.search_query.lower()
        self.matches = [i for i, n in enumerate(self.names) if needle and needle in n.lower()]
        if self.matches:
            self.cursor = self.matches[0]

    def _jump(self, forward: bool) -> None:
        if not self.matches:
            return
        if forward:
            following = [i for i in self.matches if i > self.cursor]
            self.cursor = following[0] if following else self.matches[0]
        else:
            preceding = [i for i in self.matches if i < self.cursor]
            self.cursor = preceding[-1] if preceding else self.matches[-1]

    def handle_key(self, key: str) -> ModalOutcome | None:
        if self.search_input is not None:
            self._search_key(key)
            return None

        if key in keys.CANCEL or key in keys.QUIT:
            self.selection = dict(self.backup)
            return Dismissed()
        if key == keys.ENTER:
            return FeaturesApplied(dict(self.selection))
        if key == keys.SPACE:
            if self.features:
                name = self.names[self.cursor]
                self.selection[name] = not self.selection.get(name, False)
        elif key == "a":
            self._set_all(not self._all_selected())
        elif key == "A":
            self._set_all(False)
        elif key == "/":
            self.search_input = ""
        elif key in keys.NEXT_MATCH:
            self._jump(True)
        elif key in keys.PREVIOUS_MATCH:
            self._jump(False)
        elif key in keys.CLEAR_SEARCH:
            self._update_matches("")
        elif key in keys.MOVE_DOWN:
            self._move(1)
        elif key in keys.MOVE_UP:
            self._move(-1)
        elif key in keys.FAST_DOWN:
            self._move(keys.FAST_STEP)
        elif key in keys.FAST_UP:
            self._move(-keys.FAST_STEP)
        elif key in keys.HALF_PAGE_DOWN:
            self._move(max(1, self.page_height // 2))
        elif key in keys.HALF_PAGE_UP:
            self._move(-max(1, self.page_height // 2))
        elif key in keys.JUMP_FIRST:
            self.cursor = 0
        elif key in keys.JUMP_LAST:
            self.cursor = max(0, len(self.features) - 1)
        return None

    def _search_key(self, key: str) -> None:
        if key == keys.ESCAPE:
            self.search_input = None
            self._update_matches("")
        elif key == keys.ENTER:
            self._update_matches(self.search_input)
            self.search_input = None
        elif key == keys.BACKSPACE:
            self.search_input = self.search_input[:-1]
            self._update_matches(self.search_input)
        elif keys.is_printable(key) and len(self.search_input) < FEATURE_SEARCH_LIMIT:
            self.search_input += keys.key_text(key)
            self._update_matches(self.search_input)


@dataclass
class StatusFilterModal:
    """Choose which statuses are visible."""

    selection: dict[str, bool]
    backup: dict[str, bool] = field(default_factory=dict)
    cursor: int = 0

    kind = ModalKind.STATUS_FILTER

    @classmethod
    def open(cls, current: dict[str, bool]) -> StatusFilterModal:
        selection = {s: current.get(s, True) for s in STATUSES}
        return cls(selection=selection, backup=dict(selection))

    def handle_key(self, key: str) -> ModalOutcome | None:
        if key in keys.CANCEL or key in keys.QUIT:
            self.selection = dict(self.backup)
            return Dismissed()
        if key == keys.ENTER:
            return StatusFilterApplied(dict(self.selection))
        if key in keys.MOVE_DOWN:
            self.cursor = min(self.cursor + 1, len(STATUSES) - 1)
        elif key in keys.MOVE_UP:
            self.cursor = max(self.cursor - 1, 0)
        elif key == keys.SPACE:
            status = STATUSES[self.cursor]
            self.selection[status] = not self.selection[status]
        elif key == "a":
            self.selection = {s: True for s in STATUSES}
        elif key == "n":
            self.selection = {s: False for s in STATUSES}
        return None


Modal = Union[HelpModal, StatusEditModal, ConfirmationModal, TaskEditModal, FeatureSelectModal, StatusFilterModal]


class ModalCoordinator:
    """Enforces a single active modal.

    ``show`` while a modal is already active is rejected: it returns False
    and leaves the active modal in place.
    """

    def __init__(self) -> None:
        self._modal: Modal | None = None

    @property
    def active(self) -> ModalKind:
        return self._modal.kind if self._modal is not None else ModalKind.NONE

    @property
    def modal(self) -> Modal | None:
        return self._modal

    def is_active(self, kind: ModalKind | None = None) -> bool:
        if kind is None:
            return self._modal is not None
        return self.active is kind

    def show(self, modal: Modal) -> bool:
        if self._modal is not None:
            logger.debug("Rejected %s modal while %s is active", modal.kind.value, self.active.value)
            return False
        self._modal = modal
        return True

    def hide(self) -> None:
        self._modal = None

    def handle_key(self, key: str) -> ModalOutcome | None:
        """Route a key to the active modal, closing it when it produces an outcome."""
        if self._modal is None:
            return None
        outcome = self._modal.handle_key(key)
        if outcome is not None:
            self.hide()
        return outcome
