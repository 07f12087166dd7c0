"""
LazyArchon TUI Application.

Textual shell around the dispatcher: forwards keys and resizes as
messages, runs the returned jobs on the coordinator and re-renders.
Jobs run in Textual thread workers and delays on Textual timers.
"""

from __future__ import annotations

import dataclasses
import logging
from functools import partial
from typing import Callable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal

from lazyarchon import keys
from lazyarchon.config import AppConfig
from lazyarchon.coordinator import JobCoordinator
from lazyarchon.dispatcher import Dispatcher
from lazyarchon.jobs import Services
from lazyarchon.messages import DetailsResized, KeyPressed, Message, Resized
from lazyarchon.providers import PushSource, RepositoryClient
from lazyarchon.views.widgets import DetailsPanel, HeaderBar, ModalOverlay, StatusBar, StateView, TaskListPanel

logger = logging.getLogger(__name__)


class LazyArchonApp(App):
    """Main LazyArchon TUI application."""

    TITLE = "LazyArchon"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $surface;
        layers: base overlay;
    }

    #panels {
        height: 1fr;
    }
    """

    # Keys Textual would otherwise consume for focus or copy go straight to the dispatcher.
    BINDINGS = [
        Binding("ctrl+c", f"send_key('{keys.CTRL_C}')", "Quit", show=False, priority=True),
        Binding("tab", f"send_key('{keys.TAB}')", show=False, priority=True),
        Binding("shift+tab", f"send_key('{keys.SHIFT_TAB}')", show=False, priority=True),
    ]

    def __init__(
        self,
        config: AppConfig,
        client: RepositoryClient,
        push_source: PushSource | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        # Push listening follows the presence of a source.
        config = dataclasses.replace(config, enable_push=push_source is not None)
        self._dispatcher = Dispatcher(config)
        services = Services(client=client, clipboard=self._copy, push_source=push_source)
        self._coordinator = JobCoordinator(
            services,
            self._post,
            scheduler=self._schedule,
            runner=self._run_in_worker,
        )

    def compose(self) -> ComposeResult:
        yield HeaderBar(self._dispatcher, id="header")
        with Horizontal(id="panels"):
            yield TaskListPanel(self._dispatcher, id="tasks")
            yield DetailsPanel(self._dispatcher, id="details")
        yield StatusBar(self._dispatcher, id="status")
        yield ModalOverlay(self._dispatcher, id="modal")

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._dispatcher.dispatch(Resized(self.size.width, self.size.height))
        self._coordinator.submit_all(self._dispatcher.start())
        self._sync_views()

    def on_unmount(self) -> None:
        self._coordinator.shutdown()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self._handle(KeyPressed(keys.normalize_key(event.key, event.character)))

    def on_resize(self, event: events.Resize) -> None:
        self._handle(Resized(event.size.width, event.size.height))

    def on_details_panel_size_changed(self, event: DetailsPanel.SizeChanged) -> None:
        self._handle(DetailsResized(event.width, event.height))

    def action_send_key(self, key: str) -> None:
        self._handle(KeyPressed(key))

    def _handle(self, message: Message) -> None:
        """Dispatch one message on the UI thread and act on the result."""
        jobs = self._dispatcher.dispatch(message)
        self._coordinator.submit_all(jobs)
        self._sync_views()
        if self._dispatcher.should_quit:
            self.exit()

    def _sync_views(self) -> None:
        for view in self.query(StateView):
            view.sync()

    def _run_in_worker(self, work: Callable[[], None], group: str) -> None:
        self.run_worker(work, name=group, group=group, thread=True, exit_on_error=False)

    def _schedule(self, seconds: float, message: Message) -> None:
        self.set_timer(seconds, partial(self._fire, message))

    def _fire(self, message: Message) -> None:
        """Timer callback: already on the UI thread."""
        if not self._coordinator.closed:
            self._handle(message)

    def _post(self, message: Message) -> None:
        """Coordinator sink: runs on worker threads."""
        try:
            self.call_from_thread(self._handle, message)
        except RuntimeError:
            logger.debug("Dropped %s, app is not running", type(message).__name__)

    def _copy(self, text: str) -> None:
        self.call_from_thread(self.copy_to_clipboard, text)


def run(config: AppConfig, client: RepositoryClient, push_source: PushSource | None = None) -> None:
    """Run the TUI application."""
    app = LazyArchonApp(config, client, push_source=push_source)
    app.run()
