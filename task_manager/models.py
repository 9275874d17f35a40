"""Core models for task-manager.

This module defines the core data structures for task management:
- Task: A dataclass representing a task with its properties
- Priority: Enum for task priority levels
- UpdateField: Enum of the task fields that can be updated
- SortCriterion: Enum of the keys tasks can be sorted by

It also holds the due-date text format shared by input and display.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Optional

from task_manager.errors import InvalidChoiceError, MalformedDateError

DATE_FORMAT = "%d-%m-%Y %H:%M:%S"
NO_VALUE = "none"

_DATE_PATTERN = re.compile(r"\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2}")


class Priority(Enum):
    """Task priority levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Numeric sort rank: Low=1, Medium=2, High=3."""
        return _PRIORITY_RANKS[self]

    @classmethod
    def parse(cls, text: str) -> Optional["Priority"]:
        """Parse a priority label; 'none' means no priority.

        Raises:
            InvalidChoiceError: If text is not High, Medium, Low or none
        """
        if text == NO_VALUE:
            return None
        try:
            return cls(text)
        except ValueError:
            raise InvalidChoiceError(
                "priority", text, [p.value for p in cls] + [NO_VALUE]
            ) from None


_PRIORITY_RANKS = {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}


class UpdateField(Enum):
    """Task fields that can be changed with TaskManager.update."""

    TITLE = "title"
    DESCRIPTION = "description"
    DUE_DATE = "due date"

    @classmethod
    def parse(cls, text: str) -> "UpdateField":
        try:
            return cls(text)
        except ValueError:
            raise InvalidChoiceError("field", text, [f.value for f in cls]) from None


class SortCriterion(Enum):
    """Keys accepted by TaskManager.sort."""

    PRIORITY = "priority"
    DUE_DATE = "due date"

    @classmethod
    def parse(cls, text: str) -> "SortCriterion":
        try:
            return cls(text)
        except ValueError:
            raise InvalidChoiceError(
                "sort criterion", text, [c.value for c in cls]
            ) from None


def parse_due_date(text: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse due date text into a UTC datetime.

    Args:
        text: 'none' or a date in DD-MM-YYYY HH:MM:SS format
        tz: Zone the wall-clock text is expressed in. If None, local time.

    Returns:
        Timezone-aware datetime in UTC, or None for 'none'

    Raises:
        MalformedDateError: If text does not match the format or is not a
            real calendar date
    """
    if text == NO_VALUE:
        return None
    if not _DATE_PATTERN.fullmatch(text):
        raise MalformedDateError(text)
    try:
        naive = datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        raise MalformedDateError(text) from None

    if tz is None:
        # astimezone() on a naive datetime assumes local time
        return naive.astimezone(timezone.utc)
    return naive.replace(tzinfo=tz).astimezone(timezone.utc)


def format_due_date(due_date: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Render a due date for display, or 'Not specified' when absent."""
    if due_date is None:
        return "Not specified"
    return due_date.astimezone(tz).strftime(DATE_FORMAT)


@dataclass
class Task:
    """Task model representing a single to-do item.

    Attributes:
        title: Short task title
        description: Free-text description
        due_date: UTC due date, or None when not specified
        priority: Priority level, or None when not specified
        status: True once the task has been completed
        id: Stable identifier assigned by TaskManager (None until added)
    """

    title: str
    description: str
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    status: bool = False
    id: Optional[int] = None

    @property
    def status_label(self) -> str:
        return "Completed" if self.status else "Not completed"

    def format(self, tz: Optional[tzinfo] = None) -> str:
        """Render the task as a fixed-width bordered block.

        Args:
            tz: Zone used to display the due date. If None, local time.

        Returns:
            Multi-line string; every line has the same width
        """
        lines = [
            f"Title: {self.title}",
            f"Description: {self.description}",
            f"Due date: {format_due_date(self.due_date, tz)}",
        ]
        if self.priority is not None:
            lines.append(f"Priority: {self.priority.value}")
        lines.append(f"Status: {self.status_label}")

        width = max(len(line) for line in lines)
        border = "-" * (width + 4)
        body = [f"| {line.ljust(width)} |" for line in lines]
        return "\n".join([border, *body, border])

    def __str__(self) -> str:
        return self.format()
