"""Tests for modals.py - modal focus coordinator and sub-states."""

import pytest

from lazyarchon.modals import (
    ConfirmationModal,
    ConfirmPurpose,
    Confirmed,
    Dismissed,
    EditField,
    EditSubmitted,
    FeaturesApplied,
    FeatureSelectModal,
    HelpModal,
    ModalCoordinator,
    ModalKind,
    StatusEditModal,
    StatusFilterApplied,
    StatusFilterModal,
    StatusPicked,
    TaskEditModal,
)

from conftest import make_task


def _press(modal, *keys_):
    outcome = None
    for key in keys_:
        outcome = modal.handle_key(key)
    return outcome


class TestModalCoordinator:
    """At most one modal is active; a second show is rejected."""

    def test_show_and_hide(self) -> None:
        coordinator = ModalCoordinator()
        assert coordinator.active is ModalKind.NONE
        assert coordinator.show(HelpModal(10))
        assert coordinator.is_active()
        assert coordinator.is_active(ModalKind.HELP)
        coordinator.hide()
        assert not coordinator.is_active()

    def test_second_show_rejected(self) -> None:
        coordinator = ModalCoordinator()
        help_modal = HelpModal(10)
        coordinator.show(help_modal)
        assert not coordinator.show(StatusFilterModal.open({}))
        assert coordinator.modal is help_modal

    def test_outcome_closes_modal(self) -> None:
        coordinator = ModalCoordinator()
        coordinator.show(HelpModal(10))
        assert coordinator.handle_key("j") is None
        assert coordinator.is_active()
        assert coordinator.handle_key("escape") == Dismissed()
        assert not coordinator.is_active()

    def test_no_modal(self) -> None:
        assert ModalCoordinator().handle_key("j") is None


class TestHelpModal:
    """Tests for help scrolling."""

    def test_scroll_clamped(self) -> None:
        modal = HelpModal(line_count=30, page_height=10)
        _press(modal, "k")
        assert modal.offset == 0
        _press(modal, "J", "j")
        assert modal.offset == 5
        _press(modal, "G")
        assert modal.offset == 20
        _press(modal, "j")
        assert modal.offset == 20
        _press(modal, "g")
        assert modal.offset == 0

    @pytest.mark.parametrize("key", ["escape", "q"])
    def test_close(self, key: str) -> None:
        assert HelpModal(5).handle_key(key) == Dismissed()


class TestStatusEditModal:
    """Tests for the status picker."""

    def test_starts_on_current_status(self) -> None:
        modal = StatusEditModal.for_task(make_task("t1", status="review"))
        assert modal.cursor == 2

    def test_move_and_apply(self) -> None:
        modal = StatusEditModal.for_task(make_task("t1", status="todo"))
        assert _press(modal, "j", "j", "enter") == StatusPicked("t1", "review")

    def test_direct_pick_then_apply(self) -> None:
        modal = StatusEditModal.for_task(make_task("t1"))
        assert _press(modal, "4", "l") == StatusPicked("t1", "done")

    def test_cancel(self) -> None:
        assert StatusEditModal.for_task(make_task("t1")).handle_key("escape") == Dismissed()


class TestConfirmationModal:
    """Tests for the yes/no dialog."""

    def _modal(self) -> ConfirmationModal:
        return ConfirmationModal(ConfirmPurpose.DELETE, "Delete?", subject_id="t1")

    def test_enter_on_default_confirms(self) -> None:
        assert _press(self._modal(), "enter") == Confirmed(ConfirmPurpose.DELETE, True, "t1")

    def test_move_to_cancel(self) -> None:
        assert _press(self._modal(), "l", "space") == Confirmed(ConfirmPurpose.DELETE, False, "t1")

    def test_tab_toggles(self) -> None:
        modal = self._modal()
        _press(modal, "tab")
        assert modal.cursor == 1
        _press(modal, "tab")
        assert modal.cursor == 0

    @pytest.mark.parametrize("key,accepted", [("y", True), ("n", False), ("escape", False), ("q", False)])
    def test_direct_answers(self, key: str, accepted: bool) -> None:
        outcome = self._modal().handle_key(key)
        assert isinstance(outcome, Confirmed)
        assert outcome.accepted is accepted


class TestTaskEditModal:
    """Tests for the three-field task editor."""

    @pytest.fixture
    def modal(self) -> TaskEditModal:
        task = make_task("t1", status="todo", priority=5, feature="ui")
        return TaskEditModal.for_task(task, ["api", "ui"])

    def test_no_changes_dismisses(self, modal: TaskEditModal) -> None:
        assert modal.handle_key("space") == Dismissed()

    def test_status_only_change(self, modal: TaskEditModal) -> None:
        assert _press(modal, "l", "enter") == EditSubmitted("t1", {"status": "doing"})

    def test_field_navigation(self, modal: TaskEditModal) -> None:
        _press(modal, "tab")
        assert modal.active_field is EditField.PRIORITY
        _press(modal, "j")
        assert modal.active_field is EditField.FEATURE
        _press(modal, "tab")
        assert modal.active_field is EditField.STATUS
        _press(modal, "shift+tab")
        assert modal.active_field is EditField.FEATURE

    def test_priority_adjust_clamped(self, modal: TaskEditModal) -> None:
        _press(modal, "j", "L", "l")
        assert modal.priority == 16
        _press(modal, "H", "H", "H")
        assert modal.priority == 0

    def test_priority_typing(self, modal: TaskEditModal) -> None:
        outcome = _press(modal, "j", "1", "2", "3", "4", "enter", "space")
        assert outcome == EditSubmitted("t1", {"task_order": 123})

    def test_priority_typing_cancel(self, modal: TaskEditModal) -> None:
        _press(modal, "j", "9", "escape")
        assert modal.priority_input is None
        assert modal.priority == 5

    def test_pick_existing_feature(self, modal: TaskEditModal) -> None:
        _press(modal, "j", "j", "enter")
        assert modal.feature_cursor == 1
        outcome = _press(modal, "k", "enter", "space")
        assert outcome == EditSubmitted("t1", {"feature": "api"})

    def test_new_feature_name(self, modal: TaskEditModal) -> None:
        outcome = _press(modal, "j", "j", "n", "a", "/", "u", "t", "h", "-", "2", "enter", "space")
        assert outcome == EditSubmitted("t1", {"feature": "auth-2"})

    def test_escape_from_text_returns_to_fields(self, modal: TaskEditModal) -> None:
        _press(modal, "j", "j", "n", "x", "escape")
        assert modal.new_feature is None
        assert modal.handle_key("escape") == Dismissed()

    def test_only_changed_fields_sent(self, modal: TaskEditModal) -> None:
        outcome = _press(modal, "3", "j", "l", "space")
        assert outcome == EditSubmitted("t1", {"status": "review", "task_order": 6})


class TestFeatureSelectModal:
    """Tests for the feature filter picker."""

    FEATURES = [("api", 2), ("docs", 1), ("ui", 3)]

    def test_open_without_filter_ticks_all(self) -> None:
        modal = FeatureSelectModal.open(self.FEATURES, None)
        assert modal.selection == {"api": True, "docs": True, "ui": True}

    def test_toggle_and_apply(self) -> None:
        modal = FeatureSelectModal.open(self.FEATURES, None)
        outcome = _press(modal, "j", "space", "enter")
        assert outcome == FeaturesApplied({"api": True, "docs": False, "ui": True})

    def test_smart_toggle_all(self) -> None:
        modal = FeatureSelectModal.open(self.FEATURES, {"ui": True})
        _press(modal, "a")
        assert all(modal.selection.values())
        _press(modal, "a")
        assert not any(modal.selection.values())

    def test_deselect_all(self) -> None:
        modal = FeatureSelectModal.open(self.FEATURES, None)
        assert _press(modal, "A", "enter") == FeaturesApplied({"api": False, "docs": False, "ui": False})

    def test_cancel_restores_backup(self) -> None:
        modal = FeatureSelectModal.open(self.FEATURES, {"ui": True})
        outcome = _press(modal, "a", "escape")
        assert outcome == Dismissed()
        assert modal.selection == {"api": False, "docs": False, "ui": True}

    def test_local_search(self) -> None:
        modal = FeatureSelectModal.open([("api", 1), ("ui", 1), ("ui-kit", 1)], None)
        _press(modal, "/", "u", "i", "enter")
        assert modal.search_input is None
        assert modal.matches == [1, 2]
        assert modal.cursor == 1
        _press(modal, "n")
        assert modal.cursor == 2
        _press(modal, "n")
        assert modal.cursor == 1
        _press(modal, "N")
        assert modal.cursor == 2


class TestStatusFilterModal:
    """Tests for the status filter picker."""

    def test_toggle_and_apply(self) -> None:
        modal = StatusFilterModal.open({"todo": True, "doing": True, "review": True, "done": True})
        outcome = _press(modal, "G", "j", "j", "j", "space", "enter")
        assert outcome == StatusFilterApplied({"todo": True, "doing": True, "review": True, "done": False})

    def test_none_then_all(self) -> None:
        modal = StatusFilterModal.open({})
        _press(modal, "n")
        assert not any(modal.selection.values())
        _press(modal, "a")
        assert all(modal.selection.values())

    def test_cancel(self) -> None:
        modal = StatusFilterModal.open({"done": False})
        assert _press(modal, "space", "q") == Dismissed()
        assert modal.selection["done"] is False
        assert modal.selection["todo"] is True
