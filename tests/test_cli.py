"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from todo_recur.cli.tasks import main
from todo_recur.config import load_config
from todo_recur.storage import load_store


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, config_file):
    def _invoke(*args, input=None):
        return runner.invoke(main, ["--config", str(config_file), *args], input=input)
    return _invoke


@pytest.fixture
def saved_store(config_file):
    def _load():
        return load_store(load_config(config_file).get_tasks_path())
    return _load


class TestTaskCommands:

    def test_add_and_list(self, invoke, saved_store):
        result = invoke("add", "Water plants", "--repeat", "weekly:mon,thu", "--due", "2024-01-10")
        assert result.exit_code == 0, result.output
        assert "Water plants" in result.output

        task = saved_store().get_tasks()[0]
        assert task.title == "Water plants"
        assert task.due_date.isoformat() == "2024-01-10"

        result = invoke("list")
        assert result.exit_code == 0
        assert "Water plants" in result.output
        assert "Weekly: Mon, Thu" in result.output

    def test_list_empty(self, invoke):
        result = invoke("list", "--filter", "today")
        assert result.exit_code == 0
        assert "No tasks" in result.output

    def test_done_spawns_next_occurrence(self, invoke, saved_store):
        invoke("add", "Pay rent", "--due", "2024-01-31", "--repeat", "monthly:31")
        task_id = saved_store().get_tasks()[0].id

        result = invoke("done", task_id[:8])
        assert result.exit_code == 0, result.output
        assert "Next occurrence" in result.output

        tasks = saved_store().get_tasks()
        assert len(tasks) == 2
        assert tasks[0].due_date.isoformat() == "2024-02-29"
        assert tasks[1].completed is True
        assert tasks[1].repeat_spawned is True

    def test_done_twice_reopens_without_spawning(self, invoke, saved_store):
        invoke("add", "Stretch", "--repeat", "daily")
        task_id = saved_store().get_tasks()[0].id

        invoke("done", task_id)
        result = invoke("done", task_id)
        assert "Reopened" in result.output
        assert len(saved_store()) == 2

    def test_field_commands(self, invoke, saved_store):
        invoke("add", "Draft")
        task_id = saved_store().get_tasks()[0].id[:8]

        assert invoke("rename", task_id, "Final").exit_code == 0
        assert invoke("memo", task_id, "Check spelling").exit_code == 0
        assert invoke("today", task_id).exit_code == 0
        assert invoke("due", task_id, "2024-06-01").exit_code == 0
        assert invoke("repeat", task_id, "weekdays").exit_code == 0

        task = saved_store().get_tasks()[0]
        assert task.title == "Final"
        assert task.memo == "Check spelling"
        assert task.is_today is True
        assert task.due_date.isoformat() == "2024-06-01"

        result = invoke("show", task_id)
        assert "Weekdays" in result.output
        assert "Check spelling" in result.output

        invoke("due", task_id, "none")
        invoke("memo", task_id, "--clear")
        task = saved_store().get_tasks()[0]
        assert task.due_date is None
        assert task.memo is None

    def test_invalid_repeat_pattern(self, invoke, saved_store):
        result = invoke("add", "Bad", "--repeat", "monthly:40")
        assert result.exit_code != 0
        assert "between 1 and 31" in result.output
        assert len(saved_store()) == 0

    def test_invalid_due_date(self, invoke):
        result = invoke("add", "Bad", "--due", "2024-13-45")
        assert result.exit_code != 0

    def test_unknown_task(self, invoke):
        result = invoke("done", "deadbeef")
        assert result.exit_code != 0
        assert "No task matches" in result.output

    def test_rm_requires_confirmation(self, invoke, saved_store):
        invoke("add", "Keep me")
        task_id = saved_store().get_tasks()[0].id

        result = invoke("rm", task_id, input="n\n")
        assert result.exit_code != 0
        assert len(saved_store()) == 1

        result = invoke("rm", task_id, "--yes")
        assert result.exit_code == 0
        assert len(saved_store()) == 0

    def test_corrupt_task_file(self, invoke, config_file):
        path = load_config(config_file).get_tasks_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("tasks: [", encoding="utf-8")

        result = invoke("list")
        assert result.exit_code != 0
        assert "Failed to load tasks" in result.output


class TestStepCommands:

    def test_step_lifecycle(self, invoke, saved_store):
        invoke("add", "Pack")
        task_id = saved_store().get_tasks()[0].id[:8]

        invoke("step", "add", task_id, "Socks")
        invoke("step", "add", task_id, "Charger")
        assert invoke("step", "done", task_id, "1").exit_code == 0
        assert invoke("step", "rename", task_id, "2", "Phone charger").exit_code == 0

        steps = saved_store().get_tasks()[0].steps
        assert [(s.title, s.completed) for s in steps] == [("Socks", True), ("Phone charger", False)]

        assert invoke("step", "rm", task_id, steps[0].id[:8]).exit_code == 0
        assert [s.title for s in saved_store().get_tasks()[0].steps] == ["Phone charger"]

    def test_unknown_step(self, invoke, saved_store):
        invoke("add", "Pack")
        task_id = saved_store().get_tasks()[0].id[:8]
        result = invoke("step", "done", task_id, "nope")
        assert result.exit_code != 0
