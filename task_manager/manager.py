"""Task manager holding the ordered task list.

This module provides the TaskManager class, the sole owner of the task list
for a process run. Tasks are addressed by their 1-based position in the list;
every operation validates its arguments before mutating anything. State is
read from and written to a Storage backend only through explicit load() and
save() calls.
"""

import json
import logging
from dataclasses import replace
from typing import List, Optional, Tuple, Union

from task_manager.errors import TaskNotFoundError
from task_manager.models import (
    Priority,
    SortCriterion,
    Task,
    UpdateField,
    parse_due_date,
)
from task_manager.storage import JsonStorage, Snapshot, Storage

logger = logging.getLogger(__name__)


def _priority_key(task: Task) -> int:
    # Tasks without a priority rank below Low
    return task.priority.rank if task.priority is not None else 0


def _due_date_key(task: Task) -> Tuple[bool, float]:
    # Absent due dates sort before every present one
    if task.due_date is None:
        return (False, 0.0)
    return (True, task.due_date.timestamp())


class TaskManager:
    """CRUD and sort operations over an ordered list of tasks.

    Attributes:
        storage: Storage backend used by load() and save()
        tasks: Owned tasks in insertion order
        next_id: Next stable ID to assign
    """

    def __init__(self, storage: Optional[Storage] = None):
        """Initialize an empty TaskManager.

        Args:
            storage: Storage implementation to use. If None, uses JsonStorage
                    with default file path.
        """
        self.storage = storage or JsonStorage()
        self.tasks: List[Task] = []
        self.next_id = 1

    @classmethod
    def open(cls, storage: Optional[Storage] = None) -> "TaskManager":
        """Create a TaskManager and load its state from storage."""
        manager = cls(storage)
        manager.load()
        return manager

    def load(self) -> None:
        """Replace in-memory state with the persisted snapshot.

        A missing or unreadable data file yields an empty task list.
        """
        try:
            snapshot = self.storage.load()
        except (OSError, json.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not load tasks, starting with an empty list: %s", e)
            snapshot = Snapshot()

        self.tasks = snapshot.tasks
        self.next_id = snapshot.next_id
        logger.debug("Loaded %d task(s)", len(self.tasks))

    def save(self) -> None:
        """Persist the full task list.

        Raises:
            OSError: If the storage backend cannot write
        """
        self.storage.save(Snapshot(tasks=list(self.tasks), next_id=self.next_id))
        logger.debug("Saved %d task(s)", len(self.tasks))

    def snapshot(self) -> Snapshot:
        """Return a copy of the current state."""
        return Snapshot(tasks=[replace(t) for t in self.tasks], next_id=self.next_id)

    def _check_index(self, index: int) -> int:
        if index < 1 or index > len(self.tasks):
            raise TaskNotFoundError(index, len(self.tasks))
        return index - 1

    def get_task(self, index: int) -> Task:
        """Get a copy of the task at a 1-based position.

        Raises:
            TaskNotFoundError: If index is outside 1..count
        """
        return replace(self.tasks[self._check_index(index)])

    def add_task(
        self,
        title: str,
        description: str,
        due_date_text: str,
        priority_text: str = "none",
    ) -> Task:
        """Create a new task at the end of the list.

        Args:
            title: Task title
            description: Task description
            due_date_text: 'none' or DD-MM-YYYY HH:MM:SS
            priority_text: 'High', 'Medium', 'Low' or 'none'

        Returns:
            The created Task

        Raises:
            MalformedDateError: If due_date_text cannot be parsed
            InvalidChoiceError: If priority_text is not a known label
        """
        due_date = parse_due_date(due_date_text)
        priority = Priority.parse(priority_text)

        task = Task(
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            id=self.next_id,
        )
        self.next_id += 1
        self.tasks.append(task)

        logger.debug("Added task #%d at position %d", task.id, len(self.tasks))
        return replace(task)

    def list_items(self) -> List[Tuple[int, Task]]:
        """Return (1-based position, task) pairs in storage order."""
        return [(position, replace(task)) for position, task in enumerate(self.tasks, 1)]

    def complete_task(self, index: int) -> Task:
        """Mark the task at a 1-based position as completed.

        Completing an already completed task is not an error.

        Raises:
            TaskNotFoundError: If index is outside 1..count
        """
        task = self.tasks[self._check_index(index)]
        task.status = True
        logger.debug("Completed task #%s at position %d", task.id, index)
        return replace(task)

    def delete_task(self, index: int) -> Task:
        """Remove the task at a 1-based position.

        Later tasks shift down by one position.

        Returns:
            The removed Task

        Raises:
            TaskNotFoundError: If index is outside 1..count
        """
        task = self.tasks.pop(self._check_index(index))
        logger.debug("Deleted task #%s from position %d", task.id, index)
        return task

    def update(self, index: int, field: Union[str, UpdateField], new_value: str) -> Task:
        """Change one field of the task at a 1-based position.

        Args:
            index: 1-based task position
            field: 'title', 'description' or 'due date'
            new_value: New value; for 'due date' the same format as add_task

        Returns:
            The updated Task

        Raises:
            TaskNotFoundError: If index is outside 1..count
            InvalidChoiceError: If field is not a known field name
            MalformedDateError: If a due date cannot be parsed
        """
        task = self.tasks[self._check_index(index)]
        if not isinstance(field, UpdateField):
            field = UpdateField.parse(field)

        if field is UpdateField.TITLE:
            task.title = new_value
        elif field is UpdateField.DESCRIPTION:
            task.description = new_value
        elif field is UpdateField.DUE_DATE:
            task.due_date = parse_due_date(new_value)

        logger.debug("Updated %s of task #%s", field.value, task.id)
        return replace(task)

    def sort(self, criterion: Union[str, SortCriterion]) -> List[Task]:
        """Return the tasks in a new order without changing stored order.

        Priority sorts ascending (Low, Medium, High) with tasks lacking a
        priority first. Due date sorts ascending with tasks lacking a due date
        first. Both sorts are stable.

        Raises:
            InvalidChoiceError: If criterion is not a known sort key
        """
        if not isinstance(criterion, SortCriterion):
            criterion = SortCriterion.parse(criterion)

        if criterion is SortCriterion.PRIORITY:
            ordered = sorted(self.tasks, key=_priority_key)
        elif criterion is SortCriterion.DUE_DATE:
            ordered = sorted(self.tasks, key=_due_date_key)

        return [replace(task) for task in ordered]

    def __len__(self) -> int:
        return len(self.tasks)
