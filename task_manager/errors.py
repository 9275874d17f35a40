"""Exceptions raised by task-manager operations.

All errors are recoverable: the CLI catches TaskManagerError, prints a short
message and leaves the task list untouched.
"""

from typing import Iterable


class TaskManagerError(Exception):
    """Base class for all task-manager errors."""


class TaskNotFoundError(TaskManagerError, LookupError):
    """Raised when a 1-based task index is outside the valid range."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"No task with index {index} (valid range: 1..{count})")


class MalformedDateError(TaskManagerError, ValueError):
    """Raised when a due date does not match DD-MM-YYYY HH:MM:SS."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Invalid date '{text}'. Use DD-MM-YYYY HH:MM:SS or 'none'."
        )


class InvalidChoiceError(TaskManagerError, ValueError):
    """Raised when a value is not one of the recognized literals."""

    def __init__(self, kind: str, value: str, choices: Iterable[str]):
        self.kind = kind
        self.value = value
        self.choices = list(choices)
        options = ", ".join(f"'{c}'" for c in self.choices)
        super().__init__(f"Invalid {kind} '{value}'. Choose one of: {options}")
