"""
Read-only startup configuration.

Values come from CLI flags, then ``LAZYARCHON_*`` environment variables,
then the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from lazyarchon.errors import ConfigError
from lazyarchon.models import SORT_MODE_LABELS, STATUSES, SortMode

DEFAULT_SERVER_URL = "http://localhost:8181"
DEFAULT_TIMEOUT = 30.0
DEFAULT_POLLING_INTERVAL = 10
MAX_POLLING_INTERVAL = 300
DEFAULT_LOG_FILE = Path.home() / ".cache" / "lazyarchon" / "lazyarchon.log"

ENV_PREFIX = "LAZYARCHON_"


def _default_visibility() -> dict[str, bool]:
    return {status: True for status in STATUSES}


@dataclass(frozen=True)
class AppConfig:
    """Startup configuration consumed once by the dispatcher and the app shell."""

    server_url: str = DEFAULT_SERVER_URL
    timeout: float = DEFAULT_TIMEOUT
    api_key: str | None = None
    polling_interval: int = DEFAULT_POLLING_INTERVAL
    enable_push: bool = False
    default_sort_mode: SortMode = SortMode.STATUS_PRIORITY
    default_project_id: str | None = None
    status_visibility: dict[str, bool] = field(default_factory=_default_visibility)
    status_rank: tuple[str, ...] = STATUSES
    show_completed_tasks: bool = True
    log_file: Path = DEFAULT_LOG_FILE
    debug: bool = False

    @property
    def polling_enabled(self) -> bool:
        return self.polling_interval > 0


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name}: expected a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name}: expected an integer, got {value!r}") from None


def parse_status_list(value: str) -> tuple[str, ...]:
    """Parse a comma-separated status list, rejecting unknown statuses."""
    statuses = tuple(s.strip() for s in value.split(",") if s.strip())
    unknown = [s for s in statuses if s not in STATUSES]
    if unknown:
        raise ConfigError(f"Unknown status(es): {', '.join(unknown)}")
    return statuses


def parse_status_visibility(value: str) -> dict[str, bool]:
    """Turn ``"todo,doing"`` into a visibility map over all statuses."""
    visible = set(parse_status_list(value))
    return {status: status in visible for status in STATUSES}


def parse_status_rank(value: str) -> tuple[str, ...]:
    """Parse a rank order; statuses left out keep their default order at the end."""
    ranked = parse_status_list(value)
    if len(set(ranked)) != len(ranked):
        raise ConfigError(f"Duplicate status in rank order: {value!r}")
    return ranked + tuple(s for s in STATUSES if s not in ranked)


def _from_environ(environ: Mapping[str, str]) -> dict:
    values: dict = {}

    def env(key: str) -> str | None:
        return environ.get(ENV_PREFIX + key)

    if (v := env("SERVER_URL")) is not None:
        values["server_url"] = v
    if (v := env("API_KEY")) is not None:
        values["api_key"] = v or None
    if (v := env("POLLING_INTERVAL")) is not None:
        values["polling_interval"] = _parse_int("LAZYARCHON_POLLING_INTERVAL", v)
    if (v := env("SORT_MODE")) is not None:
        values["default_sort_mode"] = v
    if (v := env("PROJECT_ID")) is not None:
        values["default_project_id"] = v or None
    if (v := env("STATUSES")) is not None:
        values["status_visibility"] = parse_status_visibility(v)
    if (v := env("STATUS_RANK")) is not None:
        values["status_rank"] = parse_status_rank(v)
    if (v := env("SHOW_COMPLETED")) is not None:
        values["show_completed_tasks"] = _parse_bool("LAZYARCHON_SHOW_COMPLETED", v)
    if (v := env("LOG_FILE")) is not None:
        values["log_file"] = Path(v).expanduser()
    return values


def load_config(args: object | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build the configuration from parsed CLI args and the environment.

    ``args`` is an argparse namespace; attributes that are missing or None
    fall through to the environment and then to the defaults.
    """
    if environ is None:
        environ = os.environ
    values = _from_environ(environ)

    def arg(name: str):
        return getattr(args, name, None) if args is not None else None

    if arg("server") is not None:
        values["server_url"] = arg("server")
    if arg("timeout") is not None:
        values["timeout"] = float(arg("timeout"))
    if arg("poll") is not None:
        values["polling_interval"] = arg("poll")
    if arg("sort") is not None:
        values["default_sort_mode"] = arg("sort")
    if arg("project") is not None:
        values["default_project_id"] = arg("project")
    if arg("statuses") is not None:
        values["status_visibility"] = parse_status_visibility(arg("statuses"))
    if arg("hide_completed"):
        values["show_completed_tasks"] = False
    if arg("log_file") is not None:
        values["log_file"] = Path(arg("log_file")).expanduser()
    if arg("debug"):
        values["debug"] = True

    sort_mode = values.get("default_sort_mode", SortMode.STATUS_PRIORITY)
    if isinstance(sort_mode, str):
        try:
            values["default_sort_mode"] = SortMode.from_label(sort_mode)
        except ValueError:
            raise ConfigError(
                f"Sort mode must be one of {', '.join(SORT_MODE_LABELS)}, got {sort_mode!r}"
            ) from None

    interval = values.get("polling_interval", DEFAULT_POLLING_INTERVAL)
    if not 0 <= interval <= MAX_POLLING_INTERVAL:
        raise ConfigError(
            f"Polling interval must be between 0 and {MAX_POLLING_INTERVAL} seconds, got {interval}"
        )

    url = values.get("server_url", DEFAULT_SERVER_URL)
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Server URL must start with http:// or https://, got {url!r}")
    values["server_url"] = url.rstrip("/")

    if values.get("timeout", DEFAULT_TIMEOUT) <= 0:
        raise ConfigError("Timeout must be positive")

    return AppConfig(**values)
