"""Step commands: the checklist inside a task."""

import click
from rich.markup import escape

from ..todo import Step, Task
from .common import commit, get_console, get_store, resolve_task


def resolve_step(task: Task, step_ref: str) -> Step:
    """Find a step by 1-based position or by id prefix."""
    if step_ref.isdigit() and 1 <= int(step_ref) <= len(task.steps):
        return task.steps[int(step_ref) - 1]

    matches = [s for s in task.steps if s.id.startswith(step_ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise click.BadParameter(f"Step id prefix {step_ref!r} is ambiguous", param_hint="STEP")
    raise click.ClickException(f"Task {task.title!r} has no step {step_ref!r}")


def print_steps(ctx: click.Context, task: Task) -> None:
    console = get_console(ctx)
    console.print(f"[header]{escape(task.title)}[/header]")
    for index, item in enumerate(task.steps, 1):
        style = "todo_completed" if item.completed else "accent"
        mark = "x" if item.completed else " "
        console.print(f"  {index}. \\[{mark}] [{style}]{escape(item.title)}[/{style}]")


@click.group()
def step():
    """Manage the steps of a task."""


@step.command("add")
@click.argument("task_id")
@click.argument("title")
@click.pass_context
def add_step(ctx, task_id, title):
    """Append a step to a task."""
    task = resolve_task(ctx, task_id)
    get_store(ctx).add_step(task.id, title)
    commit(ctx)
    print_steps(ctx, task)


@step.command("done")
@click.argument("task_id")
@click.argument("step_ref")
@click.pass_context
def toggle_step(ctx, task_id, step_ref):
    """Toggle a step's completion."""
    task = resolve_task(ctx, task_id)
    item = resolve_step(task, step_ref)
    get_store(ctx).toggle_step_completed(task.id, item.id)
    commit(ctx)
    print_steps(ctx, task)


@step.command("rename")
@click.argument("task_id")
@click.argument("step_ref")
@click.argument("title")
@click.pass_context
def rename_step(ctx, task_id, step_ref, title):
    """Change a step's title."""
    task = resolve_task(ctx, task_id)
    item = resolve_step(task, step_ref)
    get_store(ctx).update_step_title(task.id, item.id, title)
    commit(ctx)
    print_steps(ctx, task)


@step.command("rm")
@click.argument("task_id")
@click.argument("step_ref")
@click.pass_context
def remove_step(ctx, task_id, step_ref):
    """Delete a step."""
    task = resolve_task(ctx, task_id)
    item = resolve_step(task, step_ref)
    get_store(ctx).delete_step(task.id, item.id)
    commit(ctx)
    print_steps(ctx, task)
