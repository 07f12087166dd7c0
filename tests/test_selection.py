"""Tests for selection.py - selection stability."""

from lazyarchon.models import SortMode, Task
from lazyarchon.selection import clamp_index, resolve_index, stable_selection, task_at
from lazyarchon.state import DomainStore, PresentationStore

from conftest import make_task


class TestClamp:
    """Tests for clamp_index and task_at."""

    def test_clamp(self) -> None:
        assert clamp_index(-3, 5) == 0
        assert clamp_index(9, 5) == 4
        assert clamp_index(2, 5) == 2
        assert clamp_index(3, 0) == 0

    def test_task_at_out_of_range(self, sample_tasks: list[Task]) -> None:
        assert task_at(sample_tasks, 5) is None
        assert task_at(sample_tasks, -1) is None
        assert task_at([], 0) is None


class TestResolveIndex:
    """Tests for resolve_index function."""

    def test_finds_task(self, sample_tasks: list[Task]) -> None:
        assert resolve_index(sample_tasks, "t4", 0) == 3

    def test_missing_task_clamps_fallback(self, sample_tasks: list[Task]) -> None:
        assert resolve_index(sample_tasks, "gone", 10) == 4
        assert resolve_index([], "gone", 3) == 0


class TestStableSelection:
    """The selected task survives re-sorting and filtering."""

    def test_survives_resort(self, sample_tasks: list[Task]) -> None:
        domain = DomainStore(tasks=list(sample_tasks), sort_mode=SortMode.PRIORITY)
        p = PresentationStore(selected_index=2)  # t2, priority 50
        with stable_selection(domain, p) as anchor:
            domain.sort_mode = SortMode.ALPHABETICAL
        assert anchor == "t2"
        assert p.selected_index == 4  # "Write docs" sorts last

    def test_removed_task_keeps_index_clamped(self) -> None:
        domain = DomainStore(tasks=[make_task("a"), make_task("b"), make_task("c")], sort_mode=SortMode.PRIORITY)
        p = PresentationStore(selected_index=2)
        with stable_selection(domain, p):
            domain.tasks = [make_task("a"), make_task("b")]
        assert p.selected_index == 1

    def test_empty_list(self) -> None:
        domain = DomainStore()
        p = PresentationStore(selected_index=0)
        with stable_selection(domain, p) as anchor:
            domain.tasks = []
        assert anchor is None
        assert p.selected_index == 0
