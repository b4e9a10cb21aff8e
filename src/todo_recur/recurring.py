"""
Recurring Task Engine for Todo Recur

Computes the next due date of a repeating task and materializes its
successor when the task is completed. The engine is pure date arithmetic
plus a single flag write on the completed task; inserting the successor
and serializing access belong to the owning store.
"""

import copy
import logging
from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Optional, Union

from .recurrence import RecurrenceRule, RepeatMonthly, RepeatWeekly, is_monthly, is_none, is_weekly
from .todo import Task, new_id
from .utils.datetime import ensure_aware, now_utc, sunday_ordinal, to_date

logger = logging.getLogger(__name__)


def next_weekly_occurrence(rule: RepeatWeekly, base_date: date) -> Optional[date]:
    """Next date strictly after ``base_date`` that falls on one of the rule's weekdays."""
    ordinals = rule.ordinals
    if not ordinals:
        return None

    current = sunday_ordinal(base_date)
    later_this_week = [ordinal for ordinal in ordinals if ordinal > current]
    if later_this_week:
        target = later_this_week[0]
    else:
        # Base is on or after every configured day: wrap to next week
        target = ordinals[0]

    days_ahead = (target - current) % 7 or 7
    return base_date + timedelta(days=days_ahead)


def next_monthly_occurrence(rule: RepeatMonthly, base_date: date) -> date:
    """The rule's day in the month after ``base_date``, clamped to that month's length."""
    target_year = base_date.year
    target_month = base_date.month + 1
    if target_month > 12:
        target_month = 1
        target_year += 1

    max_day = monthrange(target_year, target_month)[1]
    target_day = rule.day_of_month
    if not 1 <= target_day <= max_day:
        target_day = max_day

    return date(target_year, target_month, target_day)


def compute_next_due_date(
    rule: Optional[RecurrenceRule],
    base_date: Union[date, datetime],
) -> Optional[date]:
    """Calculate the next occurrence of a rule after ``base_date``.

    Returns None for a missing or ``none`` rule and for a weekly rule with
    no days.
    """
    base = to_date(base_date)
    if is_weekly(rule):
        return next_weekly_occurrence(rule, base)
    if is_monthly(rule):
        return next_monthly_occurrence(rule, base)
    return None


class RecurrenceEngine:
    """Spawns the successor of a completed repeating task, at most once per completion."""

    def compute_next_due_date(
        self,
        rule: Optional[RecurrenceRule],
        base_date: Union[date, datetime],
    ) -> Optional[date]:
        return compute_next_due_date(rule, base_date)

    def maybe_spawn_next(self, task: Task, now: datetime) -> Optional[Task]:
        """Build the successor of ``task`` and mark ``task`` as having spawned.

        Returns None, leaving ``task`` untouched, when the task does not
        repeat, when a successor was already spawned, or when the rule
        yields no next date. The caller inserts the returned task.
        """
        if is_none(task.repeat):
            return None
        if task.repeat_spawned:
            logger.debug("Task %s already spawned its successor", task.id)
            return None

        next_due = self.compute_next_due_date(task.repeat, task.due_date or now)
        if next_due is None:
            logger.debug("Rule of task %s yields no next date", task.id)
            return None

        successor = self._generate_successor(task, next_due, now)
        task.repeat_spawned = True
        logger.debug("Task %s spawned %s due %s", task.id, successor.id, next_due.isoformat())
        return successor

    def _generate_successor(self, task: Task, due_date: date, now: datetime) -> Task:
        """Copy a task into a fresh, incomplete occurrence."""
        steps = copy.deepcopy(task.steps)
        for step in steps:
            step.id = new_id()
            step.completed = False

        return Task(
            id=new_id(),
            title=task.title,
            memo=task.memo,
            repeat=copy.deepcopy(task.repeat),
            steps=steps,
            due_date=due_date,
            completed=False,
            repeat_spawned=False,
            created_at=ensure_aware(now) if isinstance(now, datetime) else now_utc(),
        )
