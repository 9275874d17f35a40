"""task-manager: a personal task-list manager for the command line."""

__version__ = "0.1.0"
