"""Domain models and recurrence logic for Todo Recur."""

from ..todo import Task, Step
from ..recurrence import (
    RecurrenceRule,
    RepeatNone,
    RepeatWeekly,
    RepeatMonthly,
    Weekday,
    REPEAT_NONE,
    REPEAT_DAILY,
    REPEAT_WEEKDAYS,
    RecurrenceParser,
    InvalidRecurrenceError,
    format_rule,
)
from ..recurring import RecurrenceEngine, compute_next_due_date

__all__ = [
    "Task",
    "Step",
    "RecurrenceRule",
    "RepeatNone",
    "RepeatWeekly",
    "RepeatMonthly",
    "Weekday",
    "REPEAT_NONE",
    "REPEAT_DAILY",
    "REPEAT_WEEKDAYS",
    "RecurrenceParser",
    "InvalidRecurrenceError",
    "format_rule",
    "RecurrenceEngine",
    "compute_next_due_date",
]
