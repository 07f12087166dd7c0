"""
JSON schemas for server payloads and local task updates.

Server responses are validated before they become snapshots, and every
partial update is validated before a job is issued for it.
"""

from __future__ import annotations

from jsonschema import SchemaError, ValidationError, validate

from lazyarchon.errors import PayloadError, UpdateValidationError
from lazyarchon.models import STATUSES

TASK_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["id", "title", "status"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "project_id": {"type": ["string", "null"]},
        "title": {"type": "string"},
        "status": {"type": "string"},
        "task_order": {"type": ["integer", "null"]},
        "feature": {"type": ["string", "null"]},
        "description": {"type": ["string", "null"]},
        "assignee": {"type": ["string", "null"]},
        "created_at": {"type": ["string", "null"]},
        "updated_at": {"type": ["string", "null"]},
    },
}

PROJECT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["id", "title"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "title": {"type": "string"},
        "description": {"type": ["string", "null"]},
    },
}

TASKS_RESPONSE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["tasks"],
    "properties": {"tasks": {"type": "array", "items": TASK_SCHEMA}},
}

PROJECTS_RESPONSE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["projects"],
    "properties": {"projects": {"type": "array", "items": PROJECT_SCHEMA}},
}

TASK_UPDATE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "minProperties": 1,
    "additionalProperties": False,
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "status": {"enum": list(STATUSES)},
        "task_order": {"type": "integer", "minimum": 0, "maximum": 999},
        "feature": {"type": "string", "maxLength": 100},
    },
}


def validate_payload(data: object, schema: dict) -> None:
    """Raise PayloadError if a server payload does not match ``schema``."""
    try:
        validate(instance=data, schema=schema)
    except SchemaError as e:
        raise PayloadError(f"Schema error: {e.message}") from e
    except ValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise PayloadError(f"Unexpected response at {path}: {e.message}") from e


def validate_task_update(fields: dict) -> None:
    """Raise UpdateValidationError if ``fields`` is not a valid partial update."""
    try:
        validate(instance=fields, schema=TASK_UPDATE_SCHEMA)
    except ValidationError as e:
        field = "/".join(str(p) for p in e.absolute_path) or "update"
        raise UpdateValidationError(f"Invalid {field}: {e.message}") from e
