"""
Sort/filter pipeline.

Pure functions from a task snapshot and the view preferences to the
ordered visible list. Nothing here mutates its inputs, so the dispatcher
can re-run it as often as it needs to.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from lazyarchon.models import STATUSES, SortMode, Task
from lazyarchon.state import DomainStore


def filter_tasks(
    tasks: Iterable[Task],
    project_id: str | None = None,
    status_visibility: Mapping[str, bool] | None = None,
    feature_filter: Mapping[str, bool] | None = None,
) -> list[Task]:
    """Apply the project, status and feature filters in that order.

    ``status_visibility`` None passes every status. ``feature_filter`` None
    passes every task; a mapping passes only tagged tasks whose tag maps
    to True.
    """
    result = []
    for task in tasks:
        if project_id is not None and task.project_id != project_id:
            continue
        if status_visibility is not None and not status_visibility.get(task.status, False):
            continue
        if feature_filter is not None:
            tag = task.tag
            if tag is None or not feature_filter.get(tag, False):
                continue
        result.append(task)
    return result


def _status_weights(rank: Iterable[str]) -> dict[str, int]:
    return {status: i for i, status in enumerate(rank)}


def sort_tasks(
    tasks: Iterable[Task],
    mode: SortMode,
    status_rank: Iterable[str] = STATUSES,
) -> list[Task]:
    """Return a new list sorted for ``mode``. Ties fall back to task id."""
    items = list(tasks)
    if mode is SortMode.STATUS_PRIORITY:
        weights = _status_weights(status_rank)
        unknown = len(weights)
        return sorted(items, key=lambda t: (weights.get(t.status, unknown), -t.priority, t.id))
    if mode is SortMode.PRIORITY:
        return sorted(items, key=lambda t: (-t.priority, t.id))
    if mode is SortMode.CREATED:
        # Newest first; tasks without a timestamp go last
        dated = [t for t in items if t.created_at is not None]
        undated = [t for t in items if t.created_at is None]
        dated.sort(key=lambda t: (-t.created_at.timestamp(), t.id))
        undated.sort(key=lambda t: t.id)
        return dated + undated
    return sorted(items, key=lambda t: (t.title.lower(), t.id))


def effective_status_visibility(store: DomainStore) -> dict[str, bool] | None:
    """Status map the pipeline applies, or None when every status passes."""
    if store.status_filter_active:
        return dict(store.status_filter)
    if not store.show_completed:
        return {status: store.status_visible(status) for status in STATUSES}
    return None


def visible_tasks(store: DomainStore) -> list[Task]:
    """The visible list for the store's current snapshot and preferences."""
    filtered = filter_tasks(
        store.tasks,
        project_id=store.selected_project_id,
        status_visibility=effective_status_visibility(store),
        feature_filter=store.feature_filter,
    )
    return sort_tasks(filtered, store.sort_mode, store.status_rank)


def project_tasks(store: DomainStore) -> list[Task]:
    """Tasks of the selected project (all tasks when none is selected)."""
    return filter_tasks(store.tasks, project_id=store.selected_project_id)


def available_features(store: DomainStore) -> list[tuple[str, int]]:
    """Sorted unique feature tags in the project-filtered snapshot, with counts."""
    counts = Counter(t.tag for t in project_tasks(store) if t.tag is not None)
    return sorted(counts.items())


def feature_filter_summary(store: DomainStore) -> str:
    features = [name for name, _ in available_features(store)]
    if not features:
        return "No features"
    if store.feature_filter is None:
        return "All features"
    enabled = [name for name in features if store.feature_filter.get(name, False)]
    if len(enabled) == len(features):
        return "All features"
    if len(enabled) == 1:
        return f"#{enabled[0]} only"
    return f"{len(enabled)}/{len(features)} features"


def status_counts(tasks: Iterable[Task]) -> dict[str, int]:
    """Task count per status, with every known status present."""
    counts = dict.fromkeys(STATUSES, 0)
    for task in tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    return counts
