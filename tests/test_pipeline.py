"""Tests for pipeline.py - sort/filter pipeline."""

from datetime import datetime

from lazyarchon.models import SortMode, Task
from lazyarchon.pipeline import (
    available_features,
    feature_filter_summary,
    filter_tasks,
    sort_tasks,
    status_counts,
    visible_tasks,
)
from lazyarchon.state import DomainStore

from conftest import make_task


def _store(tasks: list[Task], **kwargs) -> DomainStore:
    store = DomainStore(**kwargs)
    store.tasks = list(tasks)
    return store


class TestSortTasks:
    """Tests for sort_tasks function."""

    def test_status_then_priority(self, sample_tasks: list[Task]) -> None:
        result = sort_tasks(sample_tasks, SortMode.STATUS_PRIORITY, ("review", "doing", "todo", "done"))
        assert [(t.status, t.priority) for t in result] == [
            ("review", 30),
            ("doing", 50),
            ("todo", 90),
            ("todo", 10),
            ("done", 70),
        ]

    def test_priority_descending(self, sample_tasks: list[Task]) -> None:
        result = sort_tasks(sample_tasks, SortMode.PRIORITY)
        assert [t.priority for t in result] == [90, 70, 50, 30, 10]

    def test_ties_break_on_id(self) -> None:
        tasks = [make_task("b", priority=5), make_task("a", priority=5)]
        assert [t.id for t in sort_tasks(tasks, SortMode.PRIORITY)] == ["a", "b"]

    def test_created_newest_first_undated_last(self) -> None:
        tasks = [
            make_task("old", created_at=datetime(2024, 1, 1)),
            make_task("none"),
            make_task("new", created_at=datetime(2024, 6, 1)),
        ]
        assert [t.id for t in sort_tasks(tasks, SortMode.CREATED)] == ["new", "old", "none"]

    def test_alphabetical_ignores_case(self) -> None:
        tasks = [make_task("1", "beta"), make_task("2", "Alpha"), make_task("3", "gamma")]
        assert [t.title for t in sort_tasks(tasks, SortMode.ALPHABETICAL)] == ["Alpha", "beta", "gamma"]

    def test_does_not_mutate_input(self, sample_tasks: list[Task]) -> None:
        before = list(sample_tasks)
        sort_tasks(sample_tasks, SortMode.ALPHABETICAL)
        assert sample_tasks == before


class TestFilterTasks:
    """Tests for filter_tasks function."""

    def test_feature_filter_only_tagged_true(self, sample_tasks: list[Task]) -> None:
        result = filter_tasks(sample_tasks, feature_filter={"ui": True, "docs": False})
        assert {t.id for t in result} == {"t1", "t3"}

    def test_feature_filter_none_passes_all(self, sample_tasks: list[Task]) -> None:
        assert len(filter_tasks(sample_tasks, feature_filter=None)) == 5

    def test_empty_feature_map_shows_nothing(self, sample_tasks: list[Task]) -> None:
        assert filter_tasks(sample_tasks, feature_filter={}) == []

    def test_status_visibility(self, sample_tasks: list[Task]) -> None:
        visibility = {"todo": True, "doing": False, "review": False, "done": False}
        result = filter_tasks(sample_tasks, status_visibility=visibility)
        assert {t.id for t in result} == {"t1", "t5"}

    def test_project(self) -> None:
        tasks = [make_task("a", project_id="p1"), make_task("b", project_id="p2")]
        assert [t.id for t in filter_tasks(tasks, project_id="p2")] == ["b"]


class TestVisibleTasks:
    """Tests for the full pipeline over the domain store."""

    def test_feature_scenario_indices(self, sample_tasks: list[Task]) -> None:
        store = _store(sample_tasks, sort_mode=SortMode.PRIORITY, feature_filter={"ui": True})
        result = visible_tasks(store)
        assert [t.id for t in result] == ["t3", "t1"]

    def test_hide_completed(self, sample_tasks: list[Task]) -> None:
        store = _store(sample_tasks, show_completed=False)
        assert "t4" not in {t.id for t in visible_tasks(store)}

    def test_custom_status_filter_overrides_show_completed(self, sample_tasks: list[Task]) -> None:
        store = _store(
            sample_tasks,
            show_completed=False,
            status_filter={"todo": False, "doing": False, "review": False, "done": True},
            status_filter_active=True,
        )
        assert [t.id for t in visible_tasks(store)] == ["t4"]


class TestFeatures:
    """Tests for available features and the filter summary."""

    def test_available_features_sorted_with_counts(self, sample_tasks: list[Task]) -> None:
        store = _store(sample_tasks)
        assert available_features(store) == [("backend", 1), ("docs", 1), ("ui", 2)]

    def test_available_features_scoped_to_project(self) -> None:
        store = _store(
            [make_task("a", project_id="p1", feature="ui"), make_task("b", project_id="p2", feature="api")],
            selected_project_id="p2",
        )
        assert available_features(store) == [("api", 1)]

    def test_summary(self, sample_tasks: list[Task]) -> None:
        store = _store(sample_tasks)
        assert feature_filter_summary(store) == "All features"
        store.feature_filter = {"ui": True}
        assert feature_filter_summary(store) == "#ui only"
        store.feature_filter = {"ui": True, "docs": True}
        assert feature_filter_summary(store) == "2/3 features"
        store.feature_filter = {"ui": True, "docs": True, "backend": True}
        assert feature_filter_summary(store) == "All features"

    def test_summary_without_features(self) -> None:
        assert feature_filter_summary(_store([make_task("a")])) == "No features"


class TestStatusCounts:
    """Tests for status_counts function."""

    def test_every_status_present(self, sample_tasks: list[Task]) -> None:
        assert status_counts(sample_tasks) == {"todo": 2, "doing": 1, "review": 1, "done": 1}
        assert status_counts([]) == {"todo": 0, "doing": 0, "review": 0, "done": 0}
