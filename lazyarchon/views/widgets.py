"""Textual widgets wrapping the plain-text views."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from lazyarchon.dispatcher import Dispatcher
from lazyarchon.state import ActivePanel, ViewMode
from lazyarchon.views.text import (
    details_view,
    header_text,
    modal_view,
    project_details_lines,
    project_list_lines,
    status_bar,
    task_list_lines,
)


class StateView(Static):
    """Base for regions that re-render from the dispatcher's stores."""

    def __init__(self, dispatcher: Dispatcher, **kwargs) -> None:
        super().__init__(**kwargs)
        self._dispatcher = dispatcher

    def lines(self, width: int, height: int) -> list[str]:
        raise NotImplementedError

    def sync(self) -> None:
        """Pick up state changes; subclasses adjust classes and titles first."""
        self.refresh()

    def render(self) -> Text:
        size = self.content_size
        return Text("\n".join(self.lines(size.width, size.height)), no_wrap=True)


class HeaderBar(StateView):
    """Title line with the current project scope."""

    DEFAULT_CSS = """
    HeaderBar {
        height: 1;
        background: $primary;
        color: $text;
        text-style: bold;
        padding: 0 1;
    }
    """

    def lines(self, width: int, height: int) -> list[str]:
        return [header_text(self._dispatcher.domain)]


class TaskListPanel(StateView):
    """Task list, or the project list in project-select mode."""

    DEFAULT_CSS = """
    TaskListPanel {
        width: 1fr;
        height: 1fr;
        border: solid $primary-darken-2;
        padding: 0 1;
    }

    TaskListPanel.-active {
        border: solid $accent;
    }
    """

    def sync(self) -> None:
        d = self._dispatcher
        p = d.presentation
        project_mode = p.view_mode is ViewMode.PROJECT_SELECT
        self.set_class(project_mode or p.active_panel is ActivePanel.LIST, "-active")
        self.border_title = "Projects" if project_mode else f"Tasks ({len(d.visible_tasks())})"
        super().sync()

    def lines(self, width: int, height: int) -> list[str]:
        d = self._dispatcher
        p = d.presentation
        if p.view_mode is ViewMode.PROJECT_SELECT:
            return project_list_lines(
                d.domain.projects, p.project_cursor, d.domain.selected_project_id, width, height
            )
        return task_list_lines(d.visible_tasks(), p, width, height)


class DetailsPanel(StateView):
    """Details of the selected task, or of the highlighted project."""

    class SizeChanged(Message):
        """The panel's text area changed size."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    DEFAULT_CSS = """
    DetailsPanel {
        width: 1fr;
        height: 1fr;
        border: solid $primary-darken-2;
        padding: 0 1;
    }

    DetailsPanel.-active {
        border: solid $accent;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Details"

    def on_resize(self, event: events.Resize) -> None:
        size = self.content_size
        self.post_message(self.SizeChanged(size.width, size.height))

    def sync(self) -> None:
        p = self._dispatcher.presentation
        project_mode = p.view_mode is ViewMode.PROJECT_SELECT
        self.set_class(p.active_panel is ActivePanel.DETAILS and not project_mode, "-active")
        self.border_title = "Project" if project_mode else "Details"
        super().sync()

    def lines(self, width: int, height: int) -> list[str]:
        d = self._dispatcher
        p = d.presentation
        if p.view_mode is ViewMode.PROJECT_SELECT:
            return project_details_lines(d.highlighted_project(), width)[:height]
        return details_view(d.selected_task(), p.details_offset, width, height)


class StatusBar(StateView):
    """Bottom line: messages, sort mode, counts, search and connectivity."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        padding: 0 1;
    }
    """

    def lines(self, width: int, height: int) -> list[str]:
        d = self._dispatcher
        return [status_bar(d.domain, d.presentation, d.visible_tasks())]


class ModalOverlay(StateView):
    """The active modal, hidden while none is shown."""

    DEFAULT_CSS = """
    ModalOverlay {
        layer: overlay;
        display: none;
        width: 70;
        height: auto;
        max-height: 80%;
        offset: 10 3;
        border: round $accent;
        background: $surface;
        padding: 1 2;
    }

    ModalOverlay.-visible {
        display: block;
    }
    """

    def sync(self) -> None:
        self.set_class(self._dispatcher.modals.is_active(), "-visible")
        self.refresh(layout=True)

    def lines(self, width: int, height: int) -> list[str]:
        modal = self._dispatcher.modals.modal
        if modal is None:
            return []
        return modal_view(modal)
