"""Entry point for task-manager when run as a module.

This allows the package to be run with: python -m task_manager
"""

import sys

from task_manager.cli import main

if __name__ == "__main__":
    sys.exit(main())
