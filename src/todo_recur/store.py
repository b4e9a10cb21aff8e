"""In-memory task store for Todo Recur.

The store owns every task, newest first, and is the only caller of the
recurrence engine: a successor is spawned exactly when a task moves from
incomplete to complete. All mutations run under one re-entrant lock so the
spawn flag and the inserted successor always become visible together.
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

from .recurrence import REPEAT_NONE, RecurrenceRule, has_repeat
from .recurring import RecurrenceEngine
from .todo import Step, Task
from .utils.datetime import now_utc

logger = logging.getLogger(__name__)

TASK_FILTERS = ("all", "today", "planned", "not_today")


class TaskStore:
    """Single-process task store with serialized mutations."""

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        engine: Optional[RecurrenceEngine] = None,
        clock: Callable[[], datetime] = now_utc,
        clear_spawn_flag_on_reopen: bool = True,
    ):
        self._tasks: List[Task] = list(tasks or [])
        self._lock = threading.RLock()
        self.engine = engine or RecurrenceEngine()
        self.clock = clock
        self.clear_spawn_flag_on_reopen = clear_spawn_flag_on_reopen

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def _find(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _insert(self, task: Task) -> Task:
        # Newest tasks lead the default ordering
        self._tasks.insert(0, task)
        return task

    # Queries

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return self._find(task_id)

    def get_tasks(self, filter: str = "all") -> List[Task]:
        """Tasks matching a list filter, newest first.

        Args:
            filter: One of ``all``, ``today``, ``planned`` (has a due date)
                or ``not_today`` (not marked for today and not completed).

        Raises:
            ValueError: If the filter name is unknown.
        """
        with self._lock:
            if filter == "today":
                return [t for t in self._tasks if t.is_today]
            if filter == "planned":
                return [t for t in self._tasks if t.due_date]
            if filter == "not_today":
                return [t for t in self._tasks if not t.is_today and not t.completed]
            if filter == "all":
                return list(self._tasks)
        raise ValueError(f"Unknown task filter: {filter!r} (expected one of {', '.join(TASK_FILTERS)})")

    def resolve_id(self, prefix: str) -> Optional[str]:
        """Full id of the single task whose id starts with ``prefix``.

        Raises:
            ValueError: If the prefix matches more than one task.
        """
        with self._lock:
            matches = [t.id for t in self._tasks if t.id.startswith(prefix)]
        if len(matches) > 1:
            raise ValueError(f"Task id prefix {prefix!r} is ambiguous ({len(matches)} matches)")
        return matches[0] if matches else None

    # Task mutations

    def add_task(
        self,
        title: str,
        is_today: bool = False,
        due_date: Optional[date] = None,
        memo: Optional[str] = None,
        repeat: Optional[RecurrenceRule] = None,
    ) -> Task:
        task = Task(
            title=title,
            is_today=is_today,
            due_date=due_date,
            memo=memo,
            repeat=repeat,
            created_at=self.clock(),
        )
        with self._lock:
            self._insert(task)
        logger.debug("Added task %s", task.id)
        return task

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return False
            self._tasks.remove(task)
        logger.debug("Deleted task %s", task_id)
        return True

    def toggle_completed(self, task_id: str) -> Optional[Task]:
        """Flip a task's completion, spawning its successor on completion."""
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None

            if not task.completed:
                successor = self.engine.maybe_spawn_next(task, self.clock())
                if successor is not None:
                    self._insert(successor)
                    logger.info("Task %r repeats on %s", task.title, successor.due_date)
            elif self.clear_spawn_flag_on_reopen:
                task.repeat_spawned = False

            task.completed = not task.completed
            return task

    def toggle_is_today(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.is_today = not task.is_today
            return task

    def update_due_date(self, task_id: str, due_date: Optional[date]) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.due_date = due_date
            return task

    def update_repeat(self, task_id: str, repeat: Optional[RecurrenceRule]) -> Optional[Task]:
        """Replace the rule; a non-repeating rule also clears the spawn flag."""
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.repeat = repeat if repeat is not None else REPEAT_NONE
            if not has_repeat(task.repeat):
                task.repeat_spawned = False
            return task

    def update_memo(self, task_id: str, memo: Optional[str]) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.memo = memo
            return task

    def update_title(self, task_id: str, title: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.title = title
            return task

    # Step mutations

    def add_step(self, task_id: str, title: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            task.steps.append(Step(title=title))
            return task

    def toggle_step_completed(self, task_id: str, step_id: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            step = task.find_step(step_id)
            if step is not None:
                step.completed = not step.completed
            return task

    def update_step_title(self, task_id: str, step_id: str, title: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            step = task.find_step(step_id)
            if step is not None:
                step.title = title
            return task

    def delete_step(self, task_id: str, step_id: str) -> Optional[Task]:
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None
            step = task.find_step(step_id)
            if step is not None:
                task.steps.remove(step)
            return task
