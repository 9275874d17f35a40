"""Command-line interface for task-manager.

This module provides the CLI interface for managing tasks using argparse.
Exactly one of the following command flags is accepted per invocation:
- --add: Create a new task
- --list: List all tasks with their 1-based index
- --complete: Mark a task as completed
- --update: Change the title, description or due date of a task
- --remove: Delete a task
- --sort: Show tasks ordered by priority or due date
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from task_manager import __version__
from task_manager.config import default_data_path, default_log_level
from task_manager.errors import TaskManagerError
from task_manager.logging_setup import setup_logging
from task_manager.manager import TaskManager
from task_manager.models import NO_VALUE, SortCriterion, UpdateField
from task_manager.storage import JsonStorage

logger = logging.getLogger(__name__)

COMMANDS = ("add", "list", "complete", "update", "remove", "sort")

# Options that only apply to one command
COMMAND_OPTIONS = {
    "add": ("description", "due", "priority"),
    "update": ("field", "value"),
}


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="task",
        description="Personal task-list manager"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-f", "--file",
        help="Data file (default: TASK_DATA_PATH environment variable or data.txt)"
    )
    parser.add_argument("--log-file", help="Also write debug logs to this file")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging on stderr"
    )

    commands = parser.add_mutually_exclusive_group()
    commands.add_argument("-a", "--add", metavar="TITLE", help="Add a new task")
    commands.add_argument("-l", "--list", action="store_true", help="List tasks")
    commands.add_argument(
        "-c", "--complete", metavar="INDEX", type=int, help="Mark a task as completed"
    )
    commands.add_argument(
        "-u", "--update", metavar="INDEX", type=int, help="Update a task field"
    )
    commands.add_argument("-r", "--remove", metavar="INDEX", type=int, help="Delete a task")
    commands.add_argument(
        "-s", "--sort",
        metavar="CRITERION",
        help=f"Show tasks sorted by {' or '.join(repr(c.value) for c in SortCriterion)}"
    )

    # Add options
    parser.add_argument("-d", "--description", help="Task description (with --add)")
    parser.add_argument(
        "--due",
        help="Due date as 'DD-MM-YYYY HH:MM:SS' or 'none' (with --add, default: none)"
    )
    parser.add_argument(
        "-p", "--priority",
        help="High, Medium, Low or none (with --add, default: none)"
    )

    # Update options
    parser.add_argument(
        "--field",
        help=f"Field to change (with --update): {', '.join(f.value for f in UpdateField)}"
    )
    parser.add_argument("--value", help="New field value (with --update)")

    return parser


def selected_command(args: argparse.Namespace) -> Optional[str]:
    """Return the name of the command flag given on the command line."""
    for name in COMMANDS:
        value = getattr(args, name)
        if value is not None and value is not False:
            return name
    return None


def misplaced_options(args: argparse.Namespace, command: str) -> List[str]:
    """Return the options given that do not belong to the selected command."""
    misplaced = []
    for owner, names in COMMAND_OPTIONS.items():
        if owner == command:
            continue
        misplaced.extend(
            f"--{name}" for name in names if getattr(args, name) is not None
        )
    return misplaced


def cmd_add(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --add.

    Args:
        args: Parsed command-line arguments
        manager: TaskManager instance

    Returns:
        Exit code (0 for success)
    """
    task = manager.add_task(
        args.add,
        args.description if args.description is not None else "",
        args.due if args.due is not None else NO_VALUE,
        args.priority if args.priority is not None else NO_VALUE,
    )
    print("Added task:")
    print(task)
    return 0


def cmd_list(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --list."""
    items = manager.list_items()

    if not items:
        print("No tasks found.")
        return 0

    for index, task in items:
        print(f"Task id {index}")
        print(task)

    return 0


def cmd_complete(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --complete."""
    task = manager.complete_task(args.complete)
    print(f"Task #{args.complete} marked as completed: {task.title}")
    return 0


def cmd_update(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --update.

    Both --field and --value are required.
    """
    if args.field is None or args.value is None:
        print("Error: --update requires --field and --value.", file=sys.stderr)
        return 1

    task = manager.update(args.update, args.field, args.value)
    print(f"Task #{args.update} updated:")
    print(task)
    return 0


def cmd_remove(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --remove."""
    task = manager.delete_task(args.remove)
    print(f"Task #{args.remove} deleted: {task.title}")
    return 0


def cmd_sort(args: argparse.Namespace, manager: TaskManager) -> int:
    """Handle --sort. The stored order is left unchanged."""
    tasks = manager.sort(args.sort)

    if not tasks:
        print("No tasks found.")
        return 0

    for task in tasks:
        print(task)

    return 0


# Commands that change state and must be saved afterwards
MUTATING_COMMANDS = {"add", "complete", "update", "remove"}

HANDLERS = {
    "add": cmd_add,
    "list": cmd_list,
    "complete": cmd_complete,
    "update": cmd_update,
    "remove": cmd_remove,
    "sort": cmd_sort,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else default_log_level(),
        log_file=args.log_file,
    )

    command = selected_command(args)
    if command is None:
        print("Unknown command", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    misplaced = misplaced_options(args, command)
    if misplaced:
        parser.error(f"{', '.join(misplaced)} not allowed with --{command}")

    data_path = Path(args.file).expanduser() if args.file else default_data_path()
    manager = TaskManager.open(JsonStorage(data_path))

    handler = HANDLERS[command]
    try:
        result = handler(args, manager)
    except TaskManagerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result == 0 and command in MUTATING_COMMANDS:
        try:
            manager.save()
        except OSError as e:
            logger.error("Could not save tasks to %s: %s", data_path, e)
            print(f"Error: could not save tasks to {data_path}.", file=sys.stderr)
            return 1

    return result


if __name__ == "__main__":
    sys.exit(main())
