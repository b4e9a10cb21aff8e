"""Task and step data models for the Todo Recur application."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .recurrence import RecurrenceRule, has_repeat, rule_from_dict, rule_to_dict
from .utils.datetime import ensure_aware, now_utc, parse_iso_date, parse_iso_datetime, to_iso_string


def new_id() -> str:
    """Generate a fresh task or step identifier."""
    return str(uuid.uuid4())


@dataclass
class Step:
    """A checklist item inside a task."""

    title: str
    id: str = field(default_factory=new_id)
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        if not isinstance(data, dict):
            raise TypeError(f"Step must be a mapping, got {type(data).__name__}")
        return cls(
            id=data.get("id") or new_id(),
            title=data.get("title", ""),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class Task:
    """A task with optional due date, memo, steps and repeat rule."""

    # Core identification
    title: str
    id: str = field(default_factory=new_id)

    # Status
    completed: bool = False
    is_today: bool = False

    # Scheduling
    due_date: Optional[date] = None
    repeat: Optional[RecurrenceRule] = None
    repeat_spawned: bool = False  # True once a successor exists for this completion

    # Content
    memo: Optional[str] = None
    steps: List[Step] = field(default_factory=list)

    # Metadata
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        self.created_at = ensure_aware(self.created_at)

    @property
    def repeats(self) -> bool:
        """Whether the task carries a weekly or monthly rule."""
        return has_repeat(self.repeat)

    def find_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Task to a dictionary with ISO date strings."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "is_today": self.is_today,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "memo": self.memo,
            "steps": [step.to_dict() for step in self.steps],
            "created_at": to_iso_string(self.created_at),
            "repeat": rule_to_dict(self.repeat),
            "repeat_spawned": self.repeat_spawned,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a Task from a dictionary.

        Raises:
            InvalidRecurrenceError: If the stored repeat rule is malformed.
            TypeError: If a date or step has the wrong type.
        """
        return cls(
            id=data.get("id") or new_id(),
            title=data.get("title", ""),
            completed=bool(data.get("completed", False)),
            is_today=bool(data.get("is_today", False)),
            due_date=parse_iso_date(data.get("due_date")),
            memo=data.get("memo"),
            steps=[Step.from_dict(step) for step in data.get("steps") or []],
            created_at=parse_iso_datetime(data.get("created_at")) or now_utc(),
            repeat=rule_from_dict(data.get("repeat")),
            repeat_spawned=bool(data.get("repeat_spawned", False)),
        )
