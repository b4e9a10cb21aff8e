"""Task commands for the Todo Recur command-line interface."""

import logging
from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import ConfigError, load_config
from ..recurrence import format_rule, has_repeat
from ..store import TASK_FILTERS
from ..theme import get_status_emoji, get_themed_console
from .common import (
    SHORT_ID,
    commit,
    format_due_date,
    format_task_for_display,
    get_config,
    get_console,
    get_store,
    parse_due,
    parse_repeat,
    resolve_task,
)
from .steps import step


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, verbose):
    """Todo Recur - tasks with steps, memos and repeat rules."""
    ctx.ensure_object(dict)

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        raise click.ClickException(f"Configuration error: {e}") from e

    level = logging.DEBUG if verbose else getattr(logging, str(config.log_level).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    ctx.obj["config"] = config
    ctx.obj["console"] = get_themed_console(config.no_color)


@main.command()
@click.argument("title")
@click.option("--today", "is_today", is_flag=True, help="Add the task to today's list")
@click.option("--due", help="Due date, e.g. 2024-05-01, tomorrow, next friday")
@click.option("--repeat", "repeat_pattern", help="Repeat rule, e.g. daily, weekdays, weekly:mon,wed, monthly:10")
@click.option("--memo", help="Free-text memo")
@click.pass_context
def add(ctx, title, is_today, due, repeat_pattern, memo):
    """Add a new task.

    Examples:
      todo-recur add "Water the plants" --repeat "weekly:mon,thu"
      todo-recur add "Pay rent" --due 2024-05-01 --repeat monthly:1
    """
    due_date = parse_due(due) if due else None
    repeat = parse_repeat(repeat_pattern) if repeat_pattern else None

    task = get_store(ctx).add_task(title, is_today=is_today, due_date=due_date, memo=memo, repeat=repeat)
    commit(ctx)
    get_console(ctx).print(f"[success]Added[/success] {format_task_for_display(task, get_config(ctx))}")


@main.command("list")
@click.option("--filter", "filter_name", type=click.Choice(TASK_FILTERS), help="Which list to show")
@click.pass_context
def list_tasks(ctx, filter_name):
    """List tasks, newest first."""
    config = get_config(ctx)
    filter_name = filter_name or config.default_filter
    try:
        tasks = get_store(ctx).get_tasks(filter_name)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    console = get_console(ctx)
    if not tasks:
        console.print("[muted]No tasks.[/muted]")
        return

    table = Table(title=f"Tasks ({filter_name})", header_style="header")
    table.add_column("ID", style="muted", no_wrap=True)
    table.add_column("")
    table.add_column("Title")
    table.add_column("Due")
    table.add_column("Repeat", style="repeat")
    table.add_column("Steps", justify="right")

    for task in tasks:
        done_steps = sum(1 for item in task.steps if item.completed)
        table.add_row(
            task.id[:SHORT_ID],
            get_status_emoji(task.completed, task.is_today),
            escape(task.title),
            format_due_date(task, config),
            escape(format_rule(task.repeat, config.locale)) if has_repeat(task.repeat) else "",
            f"{done_steps}/{len(task.steps)}" if task.steps else "",
        )
    console.print(table)


@main.command()
@click.argument("task_id")
@click.pass_context
def show(ctx, task_id):
    """Show a task with its memo and steps."""
    config = get_config(ctx)
    task = resolve_task(ctx, task_id)

    lines = [
        f"[muted]id:[/muted] {task.id}",
        f"[muted]due:[/muted] {format_due_date(task, config) or '-'}",
        f"[muted]repeat:[/muted] {escape(format_rule(task.repeat, config.locale))}",
        f"[muted]today:[/muted] {'yes' if task.is_today else 'no'}",
    ]
    if task.memo:
        lines.extend(["", escape(task.memo)])
    if task.steps:
        lines.append("")
        for index, item in enumerate(task.steps, 1):
            mark = "x" if item.completed else " "
            lines.append(f"{index}. \\[{mark}] {escape(item.title)} [muted]{item.id[:SHORT_ID]}[/muted]")

    title = f"{get_status_emoji(task.completed, task.is_today)} {escape(task.title)}"
    get_console(ctx).print(Panel("\n".join(lines), title=title, title_align="left"))


@main.command()
@click.argument("task_id")
@click.pass_context
def done(ctx, task_id):
    """Toggle completion; completing a repeating task schedules its next occurrence."""
    store = get_store(ctx)
    task = resolve_task(ctx, task_id)
    count_before = len(store)

    store.toggle_completed(task.id)
    commit(ctx)

    console = get_console(ctx)
    config = get_config(ctx)
    state = "Completed" if task.completed else "Reopened"
    console.print(f"[success]{state}[/success] {format_task_for_display(task, config)}")

    if len(store) > count_before:
        successor = store.get_tasks("all")[0]
        console.print(f"[primary]Next occurrence[/primary] {format_task_for_display(successor, config)}")


@main.command()
@click.argument("task_id")
@click.pass_context
def today(ctx, task_id):
    """Toggle whether a task is on today's list."""
    task = resolve_task(ctx, task_id)
    get_store(ctx).toggle_is_today(task.id)
    commit(ctx)
    get_console(ctx).print(format_task_for_display(task, get_config(ctx)))


@main.command()
@click.argument("task_id")
@click.argument("when")
@click.pass_context
def due(ctx, task_id, when):
    """Set or clear (with "none") a task's due date."""
    task = resolve_task(ctx, task_id)
    get_store(ctx).update_due_date(task.id, parse_due(when))
    commit(ctx)
    get_console(ctx).print(format_task_for_display(task, get_config(ctx)))


@main.command()
@click.argument("task_id")
@click.argument("pattern")
@click.pass_context
def repeat(ctx, task_id, pattern):
    """Set a task's repeat rule.

    Patterns: none, daily, weekdays, weekly:mon,wed, every monday and friday,
    monthly:10, monthly on the 10th.
    """
    task = resolve_task(ctx, task_id)
    get_store(ctx).update_repeat(task.id, parse_repeat(pattern))
    commit(ctx)
    config = get_config(ctx)
    get_console(ctx).print(
        f"{format_task_for_display(task, config)} [muted]repeat:[/muted] "
        f"{escape(format_rule(task.repeat, config.locale))}"
    )


@main.command()
@click.argument("task_id")
@click.argument("text", required=False)
@click.option("--clear", is_flag=True, help="Remove the memo")
@click.pass_context
def memo(ctx, task_id, text, clear):
    """Set or clear a task's memo."""
    if not clear and text is None:
        raise click.UsageError("Provide memo TEXT or --clear")
    task = resolve_task(ctx, task_id)
    get_store(ctx).update_memo(task.id, None if clear else text)
    commit(ctx)
    get_console(ctx).print(format_task_for_display(task, get_config(ctx)))


@main.command()
@click.argument("task_id")
@click.argument("title")
@click.pass_context
def rename(ctx, task_id, title):
    """Change a task's title."""
    task = resolve_task(ctx, task_id)
    get_store(ctx).update_title(task.id, title)
    commit(ctx)
    get_console(ctx).print(format_task_for_display(task, get_config(ctx)))


@main.command("rm")
@click.argument("task_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove(ctx, task_id, yes):
    """Delete a task."""
    task = resolve_task(ctx, task_id)
    if not yes:
        click.confirm(f"Delete task {task.title!r}?", abort=True)
    get_store(ctx).delete_task(task.id)
    commit(ctx)
    get_console(ctx).print(f"[success]Deleted[/success] {escape(task.title)}")


main.add_command(step)
