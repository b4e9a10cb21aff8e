"""Todo Recur - a command-line task manager with steps, memos and repeating tasks."""

__version__ = "0.1.0"

from .domain import (
    Task,
    Step,
    RecurrenceEngine,
    RepeatNone,
    RepeatWeekly,
    RepeatMonthly,
    Weekday,
)
from .store import TaskStore

__all__ = [
    "Task",
    "Step",
    "RecurrenceEngine",
    "RepeatNone",
    "RepeatWeekly",
    "RepeatMonthly",
    "Weekday",
    "TaskStore",
    "__version__",
]
