"""
Selection stability.

The presentation store keeps a bare index into the visible list. Any
operation that can reorder or resize that list runs inside
``stable_selection`` so the same task stays selected afterwards.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

from lazyarchon.models import Task
from lazyarchon.pipeline import visible_tasks
from lazyarchon.state import DomainStore, PresentationStore


def clamp_index(index: int, length: int) -> int:
    """Clamp into ``[0, length - 1]``; 0 for an empty list."""
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def task_at(tasks: Sequence[Task], index: int) -> Task | None:
    if 0 <= index < len(tasks):
        return tasks[index]
    return None


def resolve_index(tasks: Sequence[Task], task_id: str | None, fallback: int) -> int:
    """Position of ``task_id`` in ``tasks``, else ``fallback`` clamped."""
    if task_id is not None:
        for i, task in enumerate(tasks):
            if task.id == task_id:
                return i
    return clamp_index(fallback, len(tasks))


@contextmanager
def stable_selection(domain: DomainStore, presentation: PresentationStore) -> Iterator[str | None]:
    """Keep the selected task selected across a change to the visible list.

    Yields the id of the task selected on entry (None if nothing was).
    """
    anchor = task_at(visible_tasks(domain), presentation.selected_index)
    anchor_id = anchor.id if anchor is not None else None
    yield anchor_id
    presentation.selected_index = resolve_index(
        visible_tasks(domain), anchor_id, presentation.selected_index
    )
