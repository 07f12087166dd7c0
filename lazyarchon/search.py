"""
Search engine.

Search highlights rather than filters: the match set is the ordered list
of visible-list indices whose title contains the query, compared
case-insensitively. While typing, every keystroke re-applies the buffer
as the live query. Committing freezes it; the match set is then only
recomputed when the visible list changes.
"""

from __future__ import annotations

import logging
from typing import Sequence

from lazyarchon.models import Task
from lazyarchon.state import PresentationStore, SearchPhase

logger = logging.getLogger(__name__)


def find_matches(tasks: Sequence[Task], query: str) -> list[int]:
    needle = query.strip().lower()
    if not needle:
        return []
    return [i for i, task in enumerate(tasks) if needle in task.title.lower()]


def recompute_matches(p: PresentationStore, tasks: Sequence[Task]) -> None:
    """Rebuild the match set for the current query and sync the match cursor."""
    p.matches = find_matches(tasks, p.search_query) if p.search_phase is not SearchPhase.INACTIVE else []
    sync_match_cursor(p)


def sync_match_cursor(p: PresentationStore) -> None:
    """Point the match cursor at the selected row, or the first match."""
    if p.selected_index in p.matches:
        p.match_cursor = p.matches.index(p.selected_index)
    else:
        p.match_cursor = 0


def activate(p: PresentationStore) -> None:
    """Enter typing mode with the current query preloaded."""
    if p.search_phase is SearchPhase.TYPING:
        return
    p.saved_query = p.search_query
    p.search_input = p.search_query
    p.search_phase = SearchPhase.TYPING


def _apply_live(p: PresentationStore, tasks: Sequence[Task]) -> None:
    p.search_query = p.search_input.strip()
    recompute_matches(p, tasks)


def type_text(p: PresentationStore, tasks: Sequence[Task], text: str) -> None:
    p.search_input += text
    _apply_live(p, tasks)


def backspace(p: PresentationStore, tasks: Sequence[Task]) -> None:
    if p.search_input:
        p.search_input = p.search_input[:-1]
        _apply_live(p, tasks)


def clear_input(p: PresentationStore, tasks: Sequence[Task]) -> None:
    p.search_input = ""
    _apply_live(p, tasks)


def commit(p: PresentationStore, tasks: Sequence[Task]) -> str:
    """Freeze the typed query. Returns it (empty when search was cleared)."""
    query = p.search_input.strip()
    p.search_input = ""
    p.saved_query = ""
    p.search_query = query
    p.search_phase = SearchPhase.COMMITTED if query else SearchPhase.INACTIVE
    recompute_matches(p, tasks)
    logger.debug("Search committed: %r, %d matches", query, len(p.matches))
    return query


def cancel(p: PresentationStore, tasks: Sequence[Task]) -> None:
    """Leave typing mode and restore the query that was active before it."""
    p.search_input = ""
    p.search_query = p.saved_query
    p.saved_query = ""
    p.search_phase = SearchPhase.COMMITTED if p.search_query else SearchPhase.INACTIVE
    recompute_matches(p, tasks)


def clear(p: PresentationStore) -> None:
    p.search_phase = SearchPhase.INACTIVE
    p.search_input = ""
    p.search_query = ""
    p.saved_query = ""
    p.matches = []
    p.match_cursor = 0


def next_match(p: PresentationStore) -> bool:
    """Select the first match after the selection, wrapping to the first."""
    if not p.matches:
        return False
    following = [i for i in p.matches if i > p.selected_index]
    p.selected_index = following[0] if following else p.matches[0]
    sync_match_cursor(p)
    return True


def previous_match(p: PresentationStore) -> bool:
    """Select the last match before the selection, wrapping to the last."""
    if not p.matches:
        return False
    preceding = [i for i in p.matches if i < p.selected_index]
    p.selected_index = preceding[-1] if preceding else p.matches[-1]
    sync_match_cursor(p)
    return True


def match_position(p: PresentationStore) -> tuple[int, int]:
    """(1-based current match, total) for the status bar; (0, 0) without matches."""
    if not p.matches:
        return 0, 0
    return p.match_cursor + 1, len(p.matches)
