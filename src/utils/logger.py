"""
Console logger

One line per event, optional detail lines below it:

    [14:23:45] GPIO      ✓ Pin initialized
               ├─ pin: P8_03
               └─ direction: out
    [14:23:46] POLL      · Pin value changed  «GpioPollScheduler»
               ├─ pin: P8_04
               └─ change: LOW → HIGH

Lines written from a background thread (poll scheduler, change watcher)
carry the thread name. Writes are serialized so detail lines of concurrent
events never interleave.
"""

import sys
import threading
from datetime import datetime
from typing import Optional, TextIO

from models.enums import LogCategory, LogLevel

RESET = '\033[0m'
DIM = '\033[2m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'
WHITE = '\033[37m'
BRIGHT_BLUE = '\033[94m'
BRIGHT_CYAN = '\033[96m'
BRIGHT_WHITE = '\033[97m'

CATEGORY_COLORS = {
    LogCategory.CONFIG: CYAN,
    LogCategory.GPIO: BRIGHT_BLUE,
    LogCategory.POLL: BRIGHT_CYAN,
    LogCategory.LIFECYCLE: MAGENTA,
    LogCategory.SYSTEM: BRIGHT_WHITE,
}

# (priority, symbol, color)
LEVELS = {
    LogLevel.DEBUG: (0, '·', DIM),
    LogLevel.INFO: (1, '✓', GREEN),
    LogLevel.WARN: (2, '⚠', YELLOW),
    LogLevel.ERROR: (3, '✗', RED),
}

DETAIL_INDENT = " " * 11
CATEGORY_WIDTH = 9


class Logger:
    """
    Structured console logger

    Args:
        min_level: Minimum level printed
        use_colors: ANSI colors (disable when output is not a terminal)
        stream: Target stream, resolved at write time when None (sys.stdout)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True,
                 stream: Optional[TextIO] = None):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream
        self._write_lock = threading.Lock()

    def is_enabled(self, level: LogLevel) -> bool:
        return LEVELS[level][0] >= LEVELS[self.min_level][0]

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ):
        """
        Print message and its details (details first, then kwargs as "key: value").

        Example:
            logger.log(LogCategory.GPIO, "Pin value written", pin="P8_03", value="1")
        """
        if not self.is_enabled(level):
            return

        _, symbol, color = LEVELS[level]
        head = " ".join((
            datetime.now().strftime('[%H:%M:%S]'),
            self._paint(category.name.ljust(CATEGORY_WIDTH), CATEGORY_COLORS.get(category, WHITE)),
            self._paint(symbol, color),
            self._paint(message, color),
        ))

        thread = threading.current_thread()
        if thread is not threading.main_thread():
            head += self._paint(f"  «{thread.name}»", DIM)

        lines = [head]
        entries = list(details or []) + [f"{key}: {value}" for key, value in kwargs.items()]
        for i, entry in enumerate(entries):
            branch = "└─" if i == len(entries) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, DIM)} {entry}")

        with self._write_lock:
            stream = self.stream or sys.stdout
            stream.write("\n".join(lines) + "\n")
            stream.flush()

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)

    def _paint(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{RESET}"


class BoundLogger:
    """Logger with a fixed category, used as the module level `log`"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self.category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, **kw):
        self._base.log(self.category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def exception(self, message: str, ex: BaseException, level: LogLevel = LogLevel.ERROR, **kw):
        """Log ex as `error` / `error_type` details."""
        self.log(message, level, error=str(ex), error_type=type(ex).__name__, **kw)


# === Global instance ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Reconfigure the shared logger in place.

    Module level bound loggers hold a reference to it, so they pick up
    the new level and color settings.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
