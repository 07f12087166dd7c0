"""Tests for views/text.py - plain-text rendering."""

from lazyarchon.keys import help_lines
from lazyarchon.modals import (
    ConfirmationModal,
    ConfirmPurpose,
    FeatureSelectModal,
    HelpModal,
    StatusEditModal,
    StatusFilterModal,
    TaskEditModal,
)
from lazyarchon.models import Project, SortMode
from lazyarchon.state import DomainStore, PresentationStore, SearchPhase, ViewMode
from lazyarchon.views.text import (
    details_lines,
    details_view,
    header_text,
    modal_view,
    project_details_lines,
    project_list_lines,
    status_bar,
    task_line,
    task_list_lines,
    window,
)

from conftest import make_task


class TestWindow:
    """Tests for window function."""

    def test_short_list(self) -> None:
        assert window(3, 2, 10) == (0, 3)

    def test_keeps_cursor_visible(self) -> None:
        start, end = window(100, 50, 10)
        assert start <= 50 < end
        assert end - start == 10

    def test_end_of_list(self) -> None:
        assert window(100, 99, 10) == (90, 100)


class TestTaskList:
    """Tests for the task list lines."""

    def test_line_contents(self) -> None:
        line = task_line(make_task("t1", "Fix auth", status="doing", priority=7, feature="ui"), selected=True)
        assert line.startswith("▶")
        assert "◐" in line
        assert "[  7]" in line
        assert line.endswith("Fix auth #ui")

    def test_truncated(self) -> None:
        line = task_line(make_task("t1", "x" * 100), width=20)
        assert len(line) == 20
        assert line.endswith("…")

    def test_match_marker(self) -> None:
        p = PresentationStore(matches=[1])
        lines = task_list_lines([make_task("a"), make_task("b")], p, 80, 10)
        assert lines[0][1] == " "
        assert lines[1][1] == "*"

    def test_empty(self) -> None:
        assert task_list_lines([], PresentationStore(), 80, 10) == ["No tasks to show"]


class TestDetails:
    """Tests for the details text."""

    def test_fields(self) -> None:
        lines = details_lines(make_task("t1", "Title", feature="ui", description="Line one\nLine two"), 60)
        assert lines[0] == "Title"
        assert "Feature:  ui" in lines
        assert "ID:       t1" in lines
        assert lines[-2:] == ["Line one", "Line two"]

    def test_no_task(self) -> None:
        assert details_lines(None, 60) == ["No task selected"]

    def test_scroll_offset_clamped(self) -> None:
        task = make_task("t1", description="\n".join(str(i) for i in range(50)))
        full = details_lines(task, 60)
        view = details_view(task, 1000, 60, 10)
        assert view == full[-10:]


class TestProjectList:
    """Tests for the project list lines."""

    def test_all_tasks_entry(self) -> None:
        lines = project_list_lines([Project("p1", "Archon")], cursor=1, selected_id=None, width=40, height=10)
        assert lines[0] == "  Archon"
        assert lines[1] == "▶✓ All Tasks"

    def test_project_details(self) -> None:
        lines = project_details_lines(Project("p1", "Archon", "Task server\nand UI"), 40)
        assert lines[0] == "Archon"
        assert "ID:       p1" in lines
        assert lines[-2:] == ["Task server", "and UI"]

    def test_all_tasks_details(self) -> None:
        assert project_details_lines(None, 40)[0] == "All Tasks"


class TestHeaderAndStatusBar:
    """Tests for the header and status bar."""

    def test_header(self) -> None:
        domain = DomainStore(projects=[Project("p1", "Archon")])
        assert header_text(domain) == "LazyArchon - All Tasks"
        domain.selected_project_id = "p1"
        assert header_text(domain) == "LazyArchon - Archon"

    def test_status_bar_parts(self) -> None:
        domain = DomainStore(sort_mode=SortMode.PRIORITY, connected=True, status_message="Task updated")
        tasks = [make_task("a", "auth"), make_task("b", "docs", status="done")]
        p = PresentationStore(search_phase=SearchPhase.COMMITTED, search_query="auth", matches=[0])
        bar = status_bar(domain, p, tasks)
        assert bar.startswith("Task updated | Tasks | Sort: priority")
        assert "○1 ◐0 ◉0 ●1" in bar
        assert "'auth' [1/1]" in bar
        assert bar.endswith("●")

    def test_error_wins(self) -> None:
        domain = DomainStore(last_error="Failed to load tasks: boom", status_message="ignored")
        bar = status_bar(domain, PresentationStore(), [])
        assert bar.startswith("Error: Failed to load tasks: boom")
        assert "ignored" not in bar
        assert bar.endswith("○ offline")

    def test_loading(self) -> None:
        domain = DomainStore()
        domain.begin_loading("Refreshing data...")
        assert status_bar(domain, PresentationStore(), []).startswith("Refreshing data...")

    def test_project_mode(self) -> None:
        bar = status_bar(DomainStore(), PresentationStore(view_mode=ViewMode.PROJECT_SELECT), [])
        assert "Select project" in bar
        assert "Sort:" not in bar


class TestModalViews:
    """Each modal kind has a renderer."""

    def test_help(self) -> None:
        lines = modal_view(HelpModal(len(help_lines()), page_height=5))
        assert lines[0] == "LazyArchon Help"
        assert len(lines) == 5

    def test_help_last_page(self) -> None:
        modal = HelpModal(len(help_lines()), page_height=5)
        modal.offset = modal.max_offset
        assert modal_view(modal)[-1] == "Press ? or esc to close this help"

    def test_status_edit(self) -> None:
        lines = modal_view(StatusEditModal.for_task(make_task("t1", status="doing")))
        assert any("Doing (current)" in line for line in lines)

    def test_confirmation(self) -> None:
        modal = ConfirmationModal(ConfirmPurpose.QUIT, "Quit?", confirm_text="Quit", cancel_text="Cancel")
        assert "[Quit]" in modal_view(modal)[2]

    def test_task_edit(self) -> None:
        lines = modal_view(TaskEditModal.for_task(make_task("t1", priority=3), []))
        assert lines[0] == "Edit Task Properties"
        assert any("Priority: 3" in line for line in lines)

    def test_feature_select(self) -> None:
        lines = modal_view(FeatureSelectModal.open([("ui", 2)], None))
        assert any("[x] #ui (2)" in line for line in lines)

    def test_status_filter(self) -> None:
        lines = modal_view(StatusFilterModal.open({"done": False}))
        assert any("[ ] ● Done" in line for line in lines)
