"""
Key symbols and the static key groups consumed by the input router.

The terminal layer hands the core one normalized symbol per keypress:
the literal character for printable keys (``"j"``, ``"J"``, ``"?"``,
``"/"``) and a lowercase name for everything else (``"escape"``,
``"enter"``, ``"ctrl+c"``, ``"pageup"``).
"""

from __future__ import annotations

ESCAPE = "escape"
ENTER = "enter"
TAB = "tab"
SHIFT_TAB = "shift+tab"
BACKSPACE = "backspace"
SPACE = "space"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
PAGE_UP = "pageup"
PAGE_DOWN = "pagedown"
F5 = "f5"
CTRL_C = "ctrl+c"
CTRL_D = "ctrl+d"
CTRL_F = "ctrl+f"
CTRL_L = "ctrl+l"
CTRL_U = "ctrl+u"
CTRL_X = "ctrl+x"

# Tier 1
FORCE_QUIT = (CTRL_C,)
TOGGLE_HELP = ("?",)

# Tier 4
QUIT = ("q",)
REFRESH = ("r", F5)
PROJECT_MODE = ("p",)
SHOW_ALL = ("a",)
CONFIRM = (ENTER,)
CANCEL = (ESCAPE,)

# Tier 5: navigation
MOVE_UP = ("k", UP)
MOVE_DOWN = ("j", DOWN)
FAST_UP = ("K",)
FAST_DOWN = ("J",)
HALF_PAGE_UP = (CTRL_U, PAGE_UP)
HALF_PAGE_DOWN = (CTRL_D, PAGE_DOWN)
JUMP_FIRST = ("g", HOME)
JUMP_LAST = ("G", END)
PANEL_LEFT = ("h", LEFT)
PANEL_RIGHT = ("l", RIGHT)

# Tier 5: search
ACTIVATE_SEARCH = ("/", CTRL_F)
CLEAR_SEARCH = (CTRL_X, CTRL_L)
NEXT_MATCH = ("n",)
PREVIOUS_MATCH = ("N",)

# Tier 5: task operations
CHANGE_STATUS = ("t",)
EDIT_TASK = ("e",)
DELETE_TASK = ("d",)
COPY_ID = ("y",)
COPY_TITLE = ("Y",)
SELECT_FEATURES = ("f",)
FILTER_STATUSES = ("F",)
SORT_FORWARD = ("s",)
SORT_BACKWARD = ("S",)

FAST_STEP = 4

# Names the terminal layer reports for keys whose character is not useful
_NAMED = {
    " ": SPACE,
    "\t": TAB,
    "\r": ENTER,
    "\n": ENTER,
    "\x1b": ESCAPE,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


def normalize_key(key: str, character: str | None = None) -> str:
    """Map a terminal key event to the symbol the router understands."""
    if character is not None and len(character) == 1:
        if character in _NAMED:
            return _NAMED[character]
        if character.isprintable():
            return character
    return key.lower() if len(key) > 1 else key


def is_printable(key: str) -> bool:
    """True for symbols that are literal text (search input, feature names)."""
    return key == SPACE or (len(key) == 1 and key.isprintable())


def key_text(key: str) -> str:
    """The text a printable symbol inserts."""
    return " " if key == SPACE else key


HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    ("Navigation", (
        ("j / k, ↑ / ↓", "Move selection"),
        ("J / K", "Move by 4"),
        ("ctrl+d / ctrl+u", "Half page down / up"),
        ("g / G", "Jump to first / last"),
        ("h / l", "Focus task list / details"),
    )),
    ("Search", (
        ("/ , ctrl+f", "Search task titles"),
        ("n / N", "Next / previous match"),
        ("ctrl+x, ctrl+l", "Clear search"),
    )),
    ("Tasks", (
        ("t", "Change status"),
        ("e", "Edit status, priority and feature"),
        ("d", "Delete task"),
        ("y / Y", "Copy task ID / title"),
        ("f", "Filter by feature"),
        ("F", "Filter by status"),
        ("s / S", "Next / previous sort mode"),
    )),
    ("Application", (
        ("p", "Select project"),
        ("a", "Show all tasks"),
        ("r, F5", "Refresh (retry after an error)"),
        ("esc", "Dismiss error, back to task list"),
        ("?", "Toggle help"),
        ("q", "Quit"),
        ("ctrl+c", "Quit immediately"),
    )),
)


def help_lines() -> list[str]:
    lines = ["LazyArchon Help", ""]
    for title, bindings in HELP_SECTIONS:
        lines.append(f"{title}:")
        for key, description in bindings:
            lines.append(f"  {key:<18} {description}")
        lines.append("")
    lines.append("Press ? or esc to close this help")
    return lines
