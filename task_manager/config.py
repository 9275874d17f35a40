"""Settings read from the environment.

TASK_DATA_PATH overrides the data file location (default: data.txt in the
working directory). TASK_LOG_LEVEL sets the console log level.
The --file and --verbose CLI options take precedence over both.
"""

import logging
import os
from pathlib import Path

DEFAULT_DATA_FILE = "data.txt"
DEFAULT_LOG_LEVEL = "WARNING"


def default_data_path() -> Path:
    """Return the data file path from TASK_DATA_PATH, or data.txt."""
    env = os.environ.get("TASK_DATA_PATH")
    if env:
        return Path(env).expanduser()
    return Path(DEFAULT_DATA_FILE)


def default_log_level() -> int:
    """Return the log level named by TASK_LOG_LEVEL.

    Unknown names fall back to WARNING.
    """
    name = os.environ.get("TASK_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.WARNING
