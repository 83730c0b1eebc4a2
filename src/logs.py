"""
Console and file logging setup.
"""

import logging
import os
import sys

import colorama
from colorama import Fore, Style

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEFAULT_LOGS_PATH = "logs"
DEFAULT_LOG_FILE = "logs.log"

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.MAGENTA,
}


class LoggingSetupError(RuntimeError):
    pass


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        saved = record.levelname
        record.levelname = f"{color}{saved}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = saved


def setup_logging(level: str = "INFO", logs_path: str = DEFAULT_LOGS_PATH,
                  filename: str = DEFAULT_LOG_FILE, color: bool = True) -> logging.Logger:
    """Install console and file handlers on the root logger."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise LoggingSetupError(f"unknown log level: {level}")

    try:
        os.makedirs(logs_path, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(logs_path, filename), encoding="utf-8")
    except OSError as e:
        raise LoggingSetupError(f"cannot open log file in {logs_path}: {e}") from e
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    if color:
        colorama.just_fix_windows_console()
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColorFormatter(LOG_FORMAT) if color else logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(numeric)
    root.addHandler(console)
    root.addHandler(file_handler)
    return root
