"""Tests for core models."""

from datetime import datetime, timedelta, timezone

import pytest

from task_manager.errors import InvalidChoiceError, MalformedDateError
from task_manager.models import (
    Priority,
    SortCriterion,
    Task,
    UpdateField,
    format_due_date,
    parse_due_date,
)


class TestPriority:
    """Tests for Priority enum."""

    def test_priority_values(self):
        """Test that Priority enum has correct labels."""
        assert Priority.LOW.value == "Low"
        assert Priority.MEDIUM.value == "Medium"
        assert Priority.HIGH.value == "High"

    def test_priority_ranks(self):
        """Test that ranks order High > Medium > Low."""
        assert Priority.LOW.rank == 1
        assert Priority.MEDIUM.rank == 2
        assert Priority.HIGH.rank == 3

    def test_parse_labels(self):
        """Test parsing every accepted label."""
        assert Priority.parse("High") is Priority.HIGH
        assert Priority.parse("Medium") is Priority.MEDIUM
        assert Priority.parse("Low") is Priority.LOW
        assert Priority.parse("none") is None

    @pytest.mark.parametrize("text", ["high", "HIGH", "urgent", "", "None"])
    def test_parse_is_case_sensitive(self, text):
        """Test that anything but the exact labels is rejected."""
        with pytest.raises(InvalidChoiceError) as exc_info:
            Priority.parse(text)
        assert exc_info.value.value == text
        assert "High" in exc_info.value.choices


class TestChoiceEnums:
    """Tests for UpdateField and SortCriterion."""

    def test_update_fields(self):
        """Test that exactly three fields can be updated."""
        assert [f.value for f in UpdateField] == ["title", "description", "due date"]
        assert UpdateField.parse("due date") is UpdateField.DUE_DATE

    def test_update_field_invalid(self):
        """Test that unknown field names raise InvalidChoiceError."""
        with pytest.raises(InvalidChoiceError, match="Invalid field 'priority'"):
            UpdateField.parse("priority")

    def test_sort_criteria(self):
        """Test that exactly two sort criteria exist."""
        assert [c.value for c in SortCriterion] == ["priority", "due date"]
        assert SortCriterion.parse("priority") is SortCriterion.PRIORITY

    def test_sort_criterion_invalid(self):
        """Test that unknown criteria raise InvalidChoiceError."""
        with pytest.raises(InvalidChoiceError, match="sort criterion"):
            SortCriterion.parse("title")


class TestDueDate:
    """Tests for due date parsing and formatting."""

    def test_parse_none(self):
        """Test that 'none' means no due date."""
        assert parse_due_date("none") is None

    def test_parse_valid_date_utc(self):
        """Test parsing a date expressed in UTC."""
        due = parse_due_date("01-01-2024 00:00:00", tz=timezone.utc)
        assert due == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert due.tzinfo == timezone.utc

    def test_parse_converts_to_utc(self):
        """Test that wall-clock text in another zone is stored as UTC."""
        plus_two = timezone(timedelta(hours=2))
        due = parse_due_date("15-06-2024 14:30:00", tz=plus_two)
        assert due == datetime(2024, 6, 15, 12, 30, tzinfo=timezone.utc)
        assert due.utcoffset() == timedelta(0)

    def test_parse_local_time_is_aware(self):
        """Test that text without a zone is read as local time."""
        due = parse_due_date("15-06-2024 14:30:00")
        assert due.tzinfo is not None
        assert format_due_date(due) == "15-06-2024 14:30:00"

    @pytest.mark.parametrize(
        "text",
        [
            "31-02-2024 10:00:00",  # no such calendar day
            "2024-01-01 00:00:00",
            "1-1-2024 00:00:00",
            "01-01-2024 0:00:00",
            "01-01-2024",
            "01-01-2024 24:00:00",
            "01-13-2024 10:00:00",
            " 01-01-2024 00:00:00",
            "",
            "None",
        ],
    )
    def test_parse_malformed(self, text):
        """Test that anything but zero-padded DD-MM-YYYY HH:MM:SS is rejected."""
        with pytest.raises(MalformedDateError) as exc_info:
            parse_due_date(text)
        assert exc_info.value.text == text

    def test_format_not_specified(self):
        """Test formatting an absent due date."""
        assert format_due_date(None) == "Not specified"

    def test_format_in_zone(self):
        """Test formatting a UTC date in a given zone."""
        due = datetime(2024, 1, 1, 23, 5, 9, tzinfo=timezone.utc)
        assert format_due_date(due, timezone.utc) == "01-01-2024 23:05:09"
        assert format_due_date(due, timezone(timedelta(hours=1))) == "02-01-2024 00:05:09"


class TestTask:
    """Tests for Task dataclass."""

    def test_task_creation_defaults(self):
        """Test creating a task with only title and description."""
        task = Task(title="Test task", description="Details")

        assert task.title == "Test task"
        assert task.description == "Details"
        assert task.due_date is None
        assert task.priority is None
        assert task.status is False
        assert task.id is None

    def test_task_empty_strings(self):
        """Test that empty title and description are allowed."""
        task = Task(title="", description="")
        assert task.title == ""
        assert task.description == ""

    def test_status_label(self):
        """Test status labels."""
        task = Task(title="A", description="B")
        assert task.status_label == "Not completed"
        task.status = True
        assert task.status_label == "Completed"

    def test_task_equality(self):
        """Test that tasks with same values are equal."""
        due = datetime(2024, 1, 1, tzinfo=timezone.utc)
        task1 = Task("Same", "Desc", due, Priority.HIGH, id=1)
        task2 = Task("Same", "Desc", due, Priority.HIGH, id=1)

        assert task1 == task2

    def test_task_inequality(self):
        """Test that tasks with different values are not equal."""
        assert Task("A", "x") != Task("A", "x", status=True)


class TestTaskFormat:
    """Tests for the bordered text block."""

    def test_every_line_same_width(self):
        """Test that all lines of the block have identical width."""
        task = Task(title="A", description="A much longer description string")

        lines = task.format(timezone.utc).split("\n")

        widths = {len(line) for line in lines}
        assert len(widths) == 1
        # Longest field plus "| " and " |"
        assert widths.pop() == len("Description: A much longer description string") + 4

    def test_exact_layout(self):
        """Test the exact block for a task without due date or priority."""
        task = Task(title="A", description="B")

        # Widest line is "Due date: Not specified" (23 chars)
        expected = "\n".join([
            "---------------------------",
            "| Title: A                |",
            "| Description: B          |",
            "| Due date: Not specified |",
            "| Status: Not completed   |",
            "---------------------------",
        ])
        assert task.format(timezone.utc) == expected

    def test_priority_line_only_when_set(self):
        """Test that the Priority line appears only for prioritized tasks."""
        plain = Task(title="A", description="B")
        urgent = Task(title="A", description="B", priority=Priority.HIGH)

        assert "Priority:" not in plain.format(timezone.utc)
        assert "| Priority: High" in urgent.format(timezone.utc)

    def test_long_title_sets_width(self):
        """Test that the widest field sets the border width."""
        task = Task(title="T" * 50, description="short")

        lines = task.format(timezone.utc).split("\n")

        assert lines[0] == "-" * (len("Title: ") + 50 + 4)
        assert all(len(line) == len(lines[0]) for line in lines)

    def test_due_date_and_status(self):
        """Test that due date and completion are rendered."""
        task = Task(
            title="Pay rent",
            description="",
            due_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            status=True,
        )

        block = task.format(timezone.utc)

        assert "| Due date: 01-01-2024 00:00:00" in block
        assert "| Status: Completed" in block

    def test_str_uses_format(self):
        """Test that str(task) renders the block."""
        task = Task(title="A", description="B")
        assert str(task) == task.format()
