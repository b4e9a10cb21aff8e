"""Shared helpers for Todo Recur commands: store access, id lookup and formatting."""

import logging
from datetime import date
from typing import Optional

import click
from rich.markup import escape

from ..config import ConfigModel
from ..parser import SmartDateParser
from ..recurrence import InvalidRecurrenceError, RecurrenceParser, format_rule, has_repeat
from ..storage import StorageError, load_store, save_store
from ..store import TaskStore
from ..theme import get_status_emoji
from ..todo import Task

logger = logging.getLogger(__name__)

SHORT_ID = 8


def get_config(ctx: click.Context) -> ConfigModel:
    return ctx.obj["config"]


def get_console(ctx: click.Context):
    return ctx.obj["console"]


def get_store(ctx: click.Context) -> TaskStore:
    """Load the task store once per invocation."""
    if "store" not in ctx.obj:
        config = get_config(ctx)
        try:
            ctx.obj["store"] = load_store(
                config.get_tasks_path(),
                clear_spawn_flag_on_reopen=config.clear_spawn_flag_on_reopen,
            )
        except StorageError as e:
            raise click.ClickException(str(e)) from e
    return ctx.obj["store"]


def commit(ctx: click.Context) -> None:
    """Persist the store after a mutation."""
    try:
        save_store(get_store(ctx), get_config(ctx).get_tasks_path())
    except StorageError as e:
        raise click.ClickException(str(e)) from e
    logger.debug("Committed task store")


def resolve_task(ctx: click.Context, task_ref: str) -> Task:
    """Find a task by full id or unique id prefix."""
    store = get_store(ctx)
    try:
        task_id = store.resolve_id(task_ref)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TASK_ID") from e
    if task_id is None:
        raise click.ClickException(f"No task matches {task_ref!r}")
    return store.get_task(task_id)


def format_due_date(task: Task, config: ConfigModel) -> str:
    if not task.due_date:
        return ""
    text = task.due_date.strftime(config.date_format)
    if not task.completed and task.due_date < date.today():
        return f"[due_date_overdue]!{text}[/due_date_overdue]"
    return f"[due_date]{text}[/due_date]"


def format_task_for_display(task: Task, config: ConfigModel, show_id: bool = True) -> str:
    """Format a task as one line of themed markup."""
    parts = []
    if show_id:
        parts.append(f"[muted]{task.id[:SHORT_ID]}[/muted]")

    style = "todo_completed" if task.completed else ("todo_today" if task.is_today else "accent")
    parts.append(f"{get_status_emoji(task.completed, task.is_today)} [{style}]{escape(task.title)}[/{style}]")

    if task.due_date:
        parts.append(format_due_date(task, config))
    if has_repeat(task.repeat):
        parts.append(f"[repeat]↻ {escape(format_rule(task.repeat, config.locale))}[/repeat]")
    return " ".join(parts)


def parse_due(value: str) -> Optional[date]:
    if value.lower() in ("none", "clear", "-"):
        return None
    parsed = SmartDateParser().parse(value)
    if parsed is None:
        raise click.BadParameter(f"Could not understand date {value!r}", param_hint="DATE")
    return parsed


def parse_repeat(value: str):
    try:
        return RecurrenceParser.parse(value)
    except InvalidRecurrenceError as e:
        hint = f" (try: {', '.join(e.suggestions)})" if e.suggestions else ""
        raise click.BadParameter(f"{e}{hint}", param_hint="PATTERN") from e
