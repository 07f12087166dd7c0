"""
Plain-text views.

Each function turns current state into lines of text for one screen
region. They are pure, take explicit dimensions and never look at the
terminal, so the widgets in ``views.widgets`` stay thin.
"""

from __future__ import annotations

import textwrap
from typing import Sequence

from lazyarchon import keys, search
from lazyarchon.modals import (
    ConfirmationModal,
    EditField,
    FeatureSelectModal,
    HelpModal,
    Modal,
    StatusEditModal,
    StatusFilterModal,
    TaskEditModal,
)
from lazyarchon.models import STATUS_SYMBOLS, STATUSES, Project, Task
from lazyarchon.pipeline import feature_filter_summary, status_counts
from lazyarchon.state import ActivePanel, DomainStore, PresentationStore, ViewMode

MATCH_MARKER = "*"
CURSOR = "▶"


def _fit(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return text[:1]
    return text[: width - 1] + "…"


def window(length: int, cursor: int, height: int) -> tuple[int, int]:
    """Start and end of a ``height``-row window that keeps ``cursor`` visible."""
    if length <= height:
        return 0, length
    start = max(0, min(cursor - height // 2, length - height))
    return start, start + height


def task_line(task: Task, selected: bool = False, matched: bool = False, width: int = 80) -> str:
    cursor = CURSOR if selected else " "
    marker = MATCH_MARKER if matched else " "
    tag = f" #{task.tag}" if task.tag else ""
    return _fit(f"{cursor}{marker}{task.symbol} [{task.priority:>3}] {task.title}{tag}", width)


def task_list_lines(tasks: Sequence[Task], p: PresentationStore, width: int, height: int) -> list[str]:
    if not tasks:
        return ["No tasks to show"]
    matches = set(p.matches)
    start, end = window(len(tasks), p.selected_index, height)
    return [
        task_line(tasks[i], selected=i == p.selected_index, matched=i in matches, width=width)
        for i in range(start, end)
    ]


def details_lines(task: Task | None, width: int) -> list[str]:
    """Full details text for ``task`` wrapped to ``width``, before scrolling."""
    if task is None:
        return ["No task selected"]
    wrap = max(10, width - 2)
    lines = textwrap.wrap(task.title, wrap) or [""]
    lines.append("")
    lines.append(f"Status:   {task.symbol} {task.status}")
    lines.append(f"Priority: {task.priority}")
    lines.append(f"Feature:  {task.tag or '-'}")
    if task.assignee:
        lines.append(f"Assignee: {task.assignee}")
    if task.created_at is not None:
        lines.append(f"Created:  {task.created_at:%Y-%m-%d %H:%M}")
    if task.updated_at is not None:
        lines.append(f"Updated:  {task.updated_at:%Y-%m-%d %H:%M}")
    lines.append(f"ID:       {task.id}")
    if task.description:
        lines.append("")
        for paragraph in task.description.splitlines():
            lines.extend(textwrap.wrap(paragraph, wrap) or [""])
    return lines


def details_view(task: Task | None, offset: int, width: int, height: int) -> list[str]:
    lines = details_lines(task, width)
    offset = max(0, min(offset, len(lines) - height))
    return [_fit(line, width) for line in lines[offset : offset + height]]


def project_details_lines(project: Project | None, width: int) -> list[str]:
    """Details of the project under the cursor; None is the "All Tasks" entry."""
    if project is None:
        return ["All Tasks", "", _fit("Tasks from every project", width)]
    wrap = max(10, width - 2)
    lines = textwrap.wrap(project.title, wrap) or [""]
    lines.append("")
    lines.append(_fit(f"ID:       {project.id}", width))
    if project.description:
        lines.append("")
        for paragraph in project.description.splitlines():
            lines.extend(textwrap.wrap(paragraph, wrap) or [""])
    return lines


def project_list_lines(
    projects: Sequence[Project], cursor: int, selected_id: str | None, width: int, height: int
) -> list[str]:
    entries: list[tuple[str, bool]] = [(p.title, p.id == selected_id) for p in projects]
    entries.append(("All Tasks", selected_id is None))
    start, end = window(len(entries), cursor, height)
    lines = []
    for i in range(start, end):
        title, current = entries[i]
        pointer = CURSOR if i == cursor else " "
        check = "✓" if current else " "
        lines.append(_fit(f"{pointer}{check} {title}", width))
    return lines


def header_text(domain: DomainStore) -> str:
    project = domain.project_by_id(domain.selected_project_id)
    scope = project.title if project is not None else "All Tasks"
    return f"LazyArchon - {scope}"


def status_bar(domain: DomainStore, p: PresentationStore, tasks: Sequence[Task]) -> str:
    parts = []
    if domain.last_error:
        parts.append(f"Error: {domain.last_error}")
    elif domain.is_loading and domain.loading_message:
        parts.append(domain.loading_message)
    elif domain.status_message:
        parts.append(domain.status_message)

    if p.view_mode is ViewMode.PROJECT_SELECT:
        parts.append("Select project")
    else:
        parts.append("Details" if p.active_panel is ActivePanel.DETAILS else "Tasks")
        parts.append(f"Sort: {domain.sort_mode.label}")
        counts = status_counts(tasks)
        parts.append(" ".join(f"{STATUS_SYMBOLS[s]}{counts[s]}" for s in STATUSES))
        summary = feature_filter_summary(domain)
        if summary not in ("No features", "All features"):
            parts.append(summary)
    if p.is_typing:
        parts.append(f"/{p.search_input}")
    if p.search_active:
        current, total = search.match_position(p)
        parts.append(f"'{p.search_query}' [{current}/{total}]")
    parts.append("●" if domain.connected else "○ offline")
    return " | ".join(parts)


# Modals


def help_view(modal: HelpModal) -> list[str]:
    lines = keys.help_lines()
    return lines[modal.offset : modal.offset + modal.page_height]


def status_edit_view(modal: StatusEditModal) -> list[str]:
    lines = ["Change Status", _fit(modal.title, 50), ""]
    for i, status in enumerate(STATUSES):
        pointer = CURSOR if i == modal.cursor else " "
        current = " (current)" if status == modal.current else ""
        lines.append(f"{pointer} {i + 1}. {STATUS_SYMBOLS[status]} {status.capitalize()}{current}")
    lines += ["", "j/k: Move • 1-4: Pick • Enter: Apply • Esc: Cancel"]
    return lines


def confirmation_view(modal: ConfirmationModal) -> list[str]:
    yes = f"[{modal.confirm_text}]" if modal.cursor == 0 else f" {modal.confirm_text} "
    no = f"[{modal.cancel_text}]" if modal.cursor == 1 else f" {modal.cancel_text} "
    return [modal.message, "", f"{yes}   {no}", "", "h/l: Choose • Enter: Confirm • y/n: Answer"]


def task_edit_view(modal: TaskEditModal) -> list[str]:
    def label(name: str, field: EditField) -> str:
        return f"{CURSOR if modal.active_field is field else ' '} {name}"

    statuses = "  ".join(
        f"[{STATUS_SYMBOLS[s]} {s.capitalize()}]" if i == modal.status_index else f" {STATUS_SYMBOLS[s]} {s.capitalize()} "
        for i, s in enumerate(STATUSES)
    )
    if modal.priority_input is not None:
        priority = f"{modal.priority_input}_"
    else:
        priority = str(modal.priority)
    if modal.new_feature is not None:
        feature = f"new: {modal.new_feature}_"
    else:
        feature = modal.feature or "-"

    lines = [
        "Edit Task Properties",
        _fit(modal.title, 50),
        "",
        f"{label('Status:', EditField.STATUS)}   {statuses}",
        f"{label('Priority:', EditField.PRIORITY)} {priority}",
        f"{label('Feature:', EditField.FEATURE)}  {feature}",
    ]
    if modal.feature_cursor is not None:
        for i, name in enumerate(modal.features):
            pointer = CURSOR if i == modal.feature_cursor else " "
            lines.append(f"      {pointer} {name}")
        if not modal.features:
            lines.append("      (no features yet, press n)")
    lines.append("")
    if modal.feature_cursor is not None:
        lines.append("j/k: Navigate • Enter: Choose • h/Esc: Back • Space: Save")
    elif modal.new_feature is not None:
        lines.append("Type name • Enter: Confirm • Esc: Cancel")
    else:
        lines.append("j/k: Field • h/l: Adjust • Space: Save • Esc: Cancel")
    return lines


def feature_select_view(modal: FeatureSelectModal) -> list[str]:
    lines = ["Filter Features", ""]
    matches = set(modal.matches)
    start, end = window(len(modal.features), modal.cursor, max(1, modal.page_height - 6))
    for i in range(start, end):
        name, count = modal.features[i]
        pointer = CURSOR if i == modal.cursor else " "
        box = "[x]" if modal.selection.get(name, False) else "[ ]"
        marker = MATCH_MARKER if i in matches else " "
        lines.append(f"{pointer}{marker}{box} #{name} ({count})")
    lines.append("")
    if modal.search_input is not None:
        lines.append(f"/{modal.search_input}_")
    elif modal.search_query:
        lines.append(f"Search: {modal.search_query} ({len(modal.matches)} matches, n/N)")
    lines.append("Space: Toggle • a: All • A: None • /: Search • Enter: Apply • Esc: Cancel")
    return lines


def status_filter_view(modal: StatusFilterModal) -> list[str]:
    lines = ["Filter Statuses", ""]
    for i, status in enumerate(STATUSES):
        pointer = CURSOR if i == modal.cursor else " "
        box = "[x]" if modal.selection.get(status, False) else "[ ]"
        lines.append(f"{pointer}{box} {STATUS_SYMBOLS[status]} {status.capitalize()}")
    lines += ["", "Space: Toggle • a: All • n: None • Enter: Apply • Esc: Cancel"]
    return lines


def modal_view(modal: Modal) -> list[str]:
    if isinstance(modal, HelpModal):
        return help_view(modal)
    if isinstance(modal, StatusEditModal):
        return status_edit_view(modal)
    if isinstance(modal, ConfirmationModal):
        return confirmation_view(modal)
    if isinstance(modal, TaskEditModal):
        return task_edit_view(modal)
    if isinstance(modal, FeatureSelectModal):
        return feature_select_view(modal)
    if isinstance(modal, StatusFilterModal):
        return status_filter_view(modal)
    raise TypeError(f"No view for modal {modal!r}")
