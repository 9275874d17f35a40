"""Storage layer for task-manager.

This module provides an abstract storage interface and a JSON file
implementation that persists the whole task list as one snapshot. Writes go
to a temporary sibling file under an fcntl lock and are moved into place with
os.replace, so an interrupted save never leaves a half-written data file.
"""

import fcntl
import json
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from task_manager.config import default_data_path
from task_manager.models import Priority, Task


@dataclass
class Snapshot:
    """Full persisted state of a TaskManager.

    Attributes:
        tasks: Tasks in storage order
        next_id: Next stable task ID to hand out
    """

    tasks: List[Task] = field(default_factory=list)
    next_id: int = 1


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "priority": task.priority.value if task.priority else None,
        "status": task.status,
    }


def _expect(value: Any, types: Any, name: str) -> Any:
    if not isinstance(value, types):
        raise TypeError(f"Unexpected {type(value).__name__} for {name}")
    return value


def task_from_dict(data: Dict[str, Any]) -> Task:
    _expect(data, dict, "task entry")
    task_id = data.get("id")
    due_date = _expect(data.get("due_date"), (str, type(None)), "due_date")
    priority = _expect(data.get("priority"), (str, type(None)), "priority")
    # bool is a subclass of int
    if isinstance(task_id, bool) or not isinstance(task_id, (int, type(None))):
        raise TypeError(f"Unexpected {type(task_id).__name__} for id")
    return Task(
        id=task_id,
        title=_expect(data["title"], str, "title"),
        description=_expect(data.get("description", ""), str, "description"),
        due_date=datetime.fromisoformat(due_date) if due_date else None,
        priority=Priority(priority) if priority else None,
        status=_expect(data.get("status", False), bool, "status"),
    )


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    """Convert a snapshot to a JSON-serializable mapping."""
    return {
        "next_id": snapshot.next_id,
        "tasks": [task_to_dict(task) for task in snapshot.tasks],
    }


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    """Rebuild a snapshot from the mapping produced by snapshot_to_dict.

    Raises:
        KeyError: If a task entry lacks its title
        ValueError: If a date or priority value cannot be decoded
        TypeError: If the document does not have the expected shape
    """
    tasks = [task_from_dict(item) for item in _expect(data.get("tasks", []), list, "tasks")]
    known_ids = [task.id for task in tasks if task.id is not None]
    next_id = int(data.get("next_id", max(known_ids, default=0) + 1))
    return Snapshot(tasks=tasks, next_id=next_id)


class Storage(ABC):
    """Abstract base class for task storage implementations."""

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        """Save the full task list.

        Args:
            snapshot: State to persist
        """
        pass

    @abstractmethod
    def load(self) -> Snapshot:
        """Load the full task list.

        Returns:
            The persisted snapshot
        """
        pass


class JsonStorage(Storage):
    """JSON file-based storage implementation with file locking.

    Attributes:
        file_path: Path to the data file
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """Initialize JsonStorage with a file path.

        Args:
            file_path: Path to the data file. If None, uses TASK_DATA_PATH
                      environment variable or defaults to data.txt
        """
        if file_path is None:
            file_path = default_data_path()
        self.file_path = Path(file_path)

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot atomically.

        Args:
            snapshot: State to persist

        Raises:
            OSError: If the file cannot be written
        """
        # Ensure parent directory exists
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        content = json.dumps(snapshot_to_dict(snapshot), indent=2)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.file_path.name}.", suffix=".tmp", dir=self.file_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            os.replace(tmp_name, self.file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def load(self) -> Snapshot:
        """Load the snapshot from the data file with file locking.

        Returns:
            The stored snapshot. Returns an empty snapshot if the file
            doesn't exist or is empty.

        Raises:
            json.JSONDecodeError: If the file is not valid JSON
            ValueError, KeyError, TypeError: If the JSON has the wrong shape
        """
        if not self.file_path.exists():
            return Snapshot()

        # Read with file locking
        with open(self.file_path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                content = f.read().strip()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if not content:
            return Snapshot()

        data = json.loads(content)
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object in {self.file_path}")
        return snapshot_from_dict(data)
