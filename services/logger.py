import logging
import sys
import os
from datetime import datetime

import services.util as u

# ANSI colors per level tag
COLORS = {
    'DBG': '\033[36m',
    'INF': '\033[32m',
    'WRN': '\033[33m',
    'ERR': '\033[31m',
    'CRT': '\033[91m\033[1m',
    'RST': '\033[0m'
}

IS_TTY = sys.stdout.isatty()

# Secret strings (driver tokens, passwords…) that must never reach a handler.
# Filled by register_sensitive() whenever a driver config is resolved.
_sensitive: set[str] = set()

# Shorter values would mask common substrings
_MIN_SECRET_LEN = 8


def register_sensitive(values) -> None:
    """Add secret strings that must never appear in log output."""
    _sensitive.update(v for v in values if isinstance(v, str) and len(v) >= _MIN_SECRET_LEN)


def clear_sensitive() -> None:
    _sensitive.clear()


class MaskingFilter(logging.Filter):
    """Redacts sensitive values from every log record before emission."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _sensitive:
            msg = record.getMessage()
            for secret in _sensitive:
                if secret in msg:
                    msg = msg.replace(secret, "***")
            record.msg = msg
            record.args = ()
        return True


class CustomFormatter(logging.Formatter):
    replaces = {
        'DEBUG': '[DBG]',
        'INFO': '[INF]',
        'WARNING': '[WRN]',
        'ERROR': '[ERR]',
        'CRITICAL': '[CRT]'
    }

    def format(self, record):
        timestamp = datetime.now().strftime('[%Y-%m-%d %H:%M:%S]')
        levelname = record.levelname

        level = self.replaces.get(levelname, f'[{levelname}]')

        if level.startswith('[') and len(level) >= 4:
            color_key = level[1:4]
        else:
            color_key = levelname.upper()[:3]

        if IS_TTY and color_key in COLORS:
            colored_level = COLORS[color_key] + level + COLORS['RST']
        else:
            colored_level = level

        try:
            file = os.path.relpath(record.pathname)
        except ValueError:
            file = record.pathname

        line = record.lineno
        message = record.getMessage()

        return f"{timestamp} {colored_level} | {file}:{line} | {message}"


def _file_handler(log_dir: str) -> logging.FileHandler:
    os.makedirs(log_dir, exist_ok=True)
    # e.g. 20250915-150316061.log (millisecond precision)
    filename = datetime.now().strftime("%Y%m%d-%H%M%S%f")[:-3] + ".log"
    handler = logging.FileHandler(os.path.join(log_dir, filename), encoding='utf-8')
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)s] | %(filename)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    handler.setLevel(logging.DEBUG)
    return handler


logger = logging.getLogger('app')
logger.setLevel(logging.DEBUG)
logger.addFilter(MaskingFilter())

# Drop handlers left over from a previous import (e.g. module reload)
if logger.handlers:
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
logger.propagate = False

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(CustomFormatter())
console_handler.setLevel(logging.INFO)
logger.addHandler(console_handler)

# File logging is opt-in: everything from DEBUG up goes to DRIVERS_LOG_DIR
if u.get_log_dir():
    logger.addHandler(_file_handler(u.get_log_dir()))


def set_level(level: str) -> None:
    """Set the console threshold, e.g. ``"DEBUG"`` or ``"WARNING"``."""
    console_handler.setLevel(level.upper())


def get_logger(name=None):
    """Return the configured logger (all modules share one instance)."""
    return logger
