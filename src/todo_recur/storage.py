"""YAML snapshot storage for the Todo Recur task store."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from .recurrence import InvalidRecurrenceError
from .store import TaskStore
from .todo import Task

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class StorageError(Exception):
    """Raised when the task snapshot cannot be read or written."""


def dump_snapshot(store: TaskStore) -> Dict[str, Any]:
    """Snapshot of every task, newest first."""
    return {
        "version": SNAPSHOT_VERSION,
        "tasks": [task.to_dict() for task in store.get_tasks("all")],
    }


def save_store(store: TaskStore, path: Path) -> None:
    """Write the store to ``path`` atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = yaml.safe_dump(dump_snapshot(store), allow_unicode=True, sort_keys=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(f"Failed to save tasks to {path}: {e}") from e

    logger.debug("Saved %d tasks to %s", len(store), path)


def load_store(
    path: Path,
    store_factory: Callable[..., TaskStore] = TaskStore,
    **store_kwargs,
) -> TaskStore:
    """Load a store from ``path``; a missing file yields an empty store.

    Raises:
        StorageError: If the file is unreadable or holds malformed tasks.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("No task file at %s, starting empty", path)
        return store_factory(**store_kwargs)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise StorageError(f"Failed to load tasks from {path}: {e}") from e

    tasks = _tasks_from_snapshot(data, path)
    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return store_factory(tasks=tasks, **store_kwargs)


def _tasks_from_snapshot(data: Optional[Dict[str, Any]], path: Path):
    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("tasks", []), list):
        raise StorageError(f"Task file {path} is not a valid snapshot")

    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise StorageError(f"Unsupported task file version {version!r} in {path}")

    tasks = []
    seen_ids = set()
    for index, item in enumerate(data.get("tasks") or []):
        if not isinstance(item, dict):
            raise StorageError(f"Task #{index} in {path} is not a mapping")
        try:
            task = Task.from_dict(item)
        except InvalidRecurrenceError as e:
            raise StorageError(f"Task #{index} in {path} has an invalid repeat rule: {e}") from e
        except (TypeError, ValueError) as e:
            raise StorageError(f"Task #{index} in {path} is malformed: {e}") from e

        if task.id in seen_ids:
            raise StorageError(f"Duplicate task id {task.id!r} in {path}")
        seen_ids.add(task.id)
        tasks.append(task)
    return tasks
