"""
LazyArchon command line.

Usage:
    lazyarchon                      Launch the TUI
    lazyarchon --project ID         Start scoped to one project
    lazyarchon --once               Print the task list once and exit (no TUI)

Settings fall back to LAZYARCHON_* environment variables, then defaults.
"""

from __future__ import annotations

import argparse
import logging
import sys

from lazyarchon import __version__
from lazyarchon.client import ArchonClient
from lazyarchon.config import AppConfig, load_config
from lazyarchon.errors import ConfigError, RepositoryError
from lazyarchon.log import configure_logging
from lazyarchon.models import SORT_MODE_LABELS
from lazyarchon.pipeline import visible_tasks
from lazyarchon.state import DomainStore
from lazyarchon.views.text import task_line

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyarchon",
        description="Terminal client for Archon tasks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:")[1] if __doc__ else None,
    )
    parser.add_argument("--server", help="Server base URL (default: http://localhost:8181)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (default: 30)")
    parser.add_argument(
        "--poll",
        type=int,
        metavar="SECONDS",
        help="Auto-refresh interval, 0 disables (default: 10)",
    )
    parser.add_argument("--sort", choices=SORT_MODE_LABELS, help="Initial sort mode")
    parser.add_argument("--project", metavar="ID", help="Start with this project selected")
    parser.add_argument(
        "--statuses",
        metavar="LIST",
        help="Comma-separated statuses to show, e.g. todo,doing",
    )
    parser.add_argument("--hide-completed", action="store_true", help="Hide done tasks")
    parser.add_argument("--log-file", help="Log file path (default: ~/.cache/lazyarchon/lazyarchon.log)")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--once", action="store_true", help="Print the task list once and exit (no TUI)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_once(config: AppConfig, client: ArchonClient) -> int:
    """Fetch one snapshot and print it the way the task list shows it."""
    try:
        store = DomainStore.from_config(config)
        store.tasks = client.list_tasks(project_id=store.selected_project_id)
    except RepositoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    tasks = visible_tasks(store)
    if not tasks:
        print("No tasks to show")
        return 0
    for task in tasks:
        print(task_line(task, width=120))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"lazyarchon: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_file, logging.DEBUG if config.debug else logging.ERROR)
    logger.debug("Starting with server %s", config.server_url)

    client = ArchonClient(config.server_url, timeout=config.timeout, api_key=config.api_key)
    try:
        if args.once:
            return print_once(config, client)

        from lazyarchon.app import run

        run(config, client)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
