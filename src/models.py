"""Data models for the task tracker.

Exposes the Task dataclass and the closed TaskStatus enumeration. Status
values are stored on disk as their plain strings ("todo", "in-progress",
"done") so snapshots stay readable and hand-editable.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict
import re


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


# RFC 3339 writers emit 1-9 fractional digits; fromisoformat wants exactly 6
# on older interpreters.
_FRACTION_RE = re.compile(r"(:\d{2})\.(\d+)")


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp as written by format_timestamp.

    Also accepts a trailing 'Z' and any number of fractional-second
    digits (padded or truncated to microseconds).
    """
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)
    return datetime.fromisoformat(text)


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


@dataclass
class Task:
    """A single tracked task.

    Fields:
        id: Positive integer, unique within a store and never reused.
        description: Free text as given on the command line.
        status: One of TaskStatus.
        created_at: Set once when the task is added.
        updated_at: Refreshed on every description or status change.
    """
    id: int
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        self.status = TaskStatus(self.status)

    def touch(self) -> None:
        self.updated_at = now()

    # -------------------- serialization --------------------
    def to_dict(self) -> Dict[str, Any]:
        # key order is the on-disk field order
        return {
            'id': self.id,
            'description': self.description,
            'status': self.status.value,
            'created_at': format_timestamp(self.created_at),
            'updated_at': format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """Build a Task from one decoded snapshot entry.

        Raises ValueError when the entry does not have the expected shape.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task entry must be an object, got {type(raw).__name__}")
        missing = [k for k in ('id', 'description', 'status', 'created_at', 'updated_at') if k not in raw]
        if missing:
            raise ValueError(f"task entry is missing field(s): {', '.join(missing)}")
        tid = raw['id']
        # bool is an int subclass; reject it explicitly
        if not isinstance(tid, int) or isinstance(tid, bool) or tid < 1:
            raise ValueError(f"task id must be a positive integer, got {tid!r}")
        description = raw['description']
        if not isinstance(description, str):
            raise ValueError(f"task {tid}: description must be a string")
        try:
            status = TaskStatus(raw['status'])
        except ValueError:
            raise ValueError(f"task {tid}: unknown status {raw['status']!r}") from None
        try:
            created_at = parse_timestamp(raw['created_at'])
            updated_at = parse_timestamp(raw['updated_at'])
        except ValueError as exc:
            raise ValueError(f"task {tid}: bad timestamp: {exc}") from exc
        return cls(
            id=tid,
            description=description,
            status=status,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description!r}, status={self.status.value})"
