"""Normalisation and validation rules for task payloads.

Clients send ``status`` and ``priority`` as free-form text. Known synonyms are
mapped to their canonical value; anything unrecognised is handed back
untouched so that :func:`validate_task_payload` rejects it instead of
silently coercing it to a default.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import ValidationError
from ..models import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    TaskPriority,
    TaskStatus,
)

EDITABLE_FIELDS: tuple[str, ...] = ("title", "description", "status", "priority")

_STATUS_SYNONYMS: dict[str, TaskStatus] = {
    "pending": TaskStatus.PENDING,
    "incomplete": TaskStatus.PENDING,
    "todo": TaskStatus.PENDING,
    "in progress": TaskStatus.IN_PROGRESS,
    "inprogress": TaskStatus.IN_PROGRESS,
    "progress": TaskStatus.IN_PROGRESS,
    "completed": TaskStatus.COMPLETED,
    "complete": TaskStatus.COMPLETED,
    "done": TaskStatus.COMPLETED,
}

_PRIORITY_SYNONYMS: dict[str, TaskPriority] = {
    "low": TaskPriority.LOW,
    "medium": TaskPriority.MEDIUM,
    "med": TaskPriority.MEDIUM,
    "high": TaskPriority.HIGH,
    "urgent": TaskPriority.HIGH,
    "critical": TaskPriority.HIGH,
}

_CANONICAL_STATUSES = frozenset(status.value for status in TaskStatus)
_CANONICAL_PRIORITIES = frozenset(priority.value for priority in TaskPriority)


def normalize_status(raw: Any) -> Any:
    """Map a status synonym to its canonical :class:`TaskStatus`.

    Non-string input and unrecognised strings are returned unchanged.
    """

    if not isinstance(raw, str):
        return raw
    return _STATUS_SYNONYMS.get(raw.strip().lower(), raw)


def normalize_priority(raw: Any) -> Any:
    """Map a priority synonym to its canonical :class:`TaskPriority`."""

    if not isinstance(raw, str):
        return raw
    return _PRIORITY_SYNONYMS.get(raw.strip().lower(), raw)


def _is_canonical(value: Any, allowed: frozenset[str]) -> bool:
    return isinstance(value, str) and str(getattr(value, "value", value)) in allowed


def validate_task_payload(payload: Mapping[str, Any], *, is_update: bool = False) -> list[str]:
    """Return every rule ``payload`` breaks, most important first.

    On create the title is mandatory; on update it is only checked when the
    key is present. ``status`` and ``priority`` must already be normalised.
    """

    errors: list[str] = []

    if not is_update or "title" in payload:
        raw_title = payload.get("title")
        title = raw_title.strip() if isinstance(raw_title, str) else ""
        if not title:
            errors.append("Title is required")
        elif len(title) < TITLE_MIN_LENGTH:
            errors.append(f"Title must be at least {TITLE_MIN_LENGTH} characters")
        elif len(title) > TITLE_MAX_LENGTH:
            errors.append(f"Title must be at most {TITLE_MAX_LENGTH} characters")

    description = payload.get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append("Description must be text")
        elif len(description.strip()) > DESCRIPTION_MAX_LENGTH:
            errors.append(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")

    if "status" in payload and not _is_canonical(payload["status"], _CANONICAL_STATUSES):
        errors.append("Invalid status value")

    if "priority" in payload and not _is_canonical(payload["priority"], _CANONICAL_PRIORITIES):
        errors.append("Invalid priority value")

    return errors


def prepare_task_fields(payload: Mapping[str, Any], *, is_update: bool = False) -> dict[str, Any]:
    """Whitelist, normalise, trim and validate a create or update payload.

    Only keys in :data:`EDITABLE_FIELDS` that the client actually supplied are
    kept. Raises :class:`ValidationError` carrying the first failed rule.
    """

    fields = {key: payload[key] for key in EDITABLE_FIELDS if key in payload}
    if is_update and not fields:
        raise ValidationError("No fields to update")

    if "status" in fields:
        fields["status"] = normalize_status(fields["status"])
    if "priority" in fields:
        fields["priority"] = normalize_priority(fields["priority"])
    if isinstance(fields.get("title"), str):
        fields["title"] = fields["title"].strip()
    if "description" in fields:
        description = fields["description"]
        fields["description"] = description.strip() if isinstance(description, str) else ""

    errors = validate_task_payload(fields, is_update=is_update)
    if errors:
        raise ValidationError(errors[0], details={"errors": errors})

    if "status" in fields:
        fields["status"] = TaskStatus(fields["status"])
    if "priority" in fields:
        fields["priority"] = TaskPriority(fields["priority"])
    return fields


__all__ = [
    "EDITABLE_FIELDS",
    "normalize_priority",
    "normalize_status",
    "prepare_task_fields",
    "validate_task_payload",
]
