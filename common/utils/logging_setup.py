from __future__ import annotations

import logging
import re
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

from ..settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

COLOR_RESET = "\x1b[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[35m",
}

FAILED_PREFIX = "failed-"

logger = logging.getLogger(__name__)

# Set by the first setup_logger() call; one console handler per process.
_console_handler: Optional[logging.Handler] = None


class ColorFormatter(logging.Formatter):
    def __init__(self, *args, use_color: bool = True, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno) if self._use_color else None
        if not color:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{plain}{COLOR_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class RunLogHandler(logging.FileHandler):
    """
    Log file for a single reporter run.

    The file is only created when the first record arrives. If the run
    logged a warning or worse, closing renames it with a "failed-" prefix
    so a bad month is visible from a directory listing.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(path, mode="w", encoding="utf-8", delay=True)
        self.path = Path(path)
        self.worst_level = logging.NOTSET

    def emit(self, record: logging.LogRecord) -> None:
        self.worst_level = max(self.worst_level, record.levelno)
        super().emit(record)

    @property
    def failed(self) -> bool:
        return self.worst_level >= logging.WARNING

    def close(self) -> None:
        super().close()
        if not self.failed or not self.path.exists():
            return
        target = self.path.with_name(FAILED_PREFIX + self.path.name)
        try:
            self.path.rename(target)
            self.path = target
        except OSError:
            pass


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Returns a named logger, attaching the shared stderr handler on first use.

    Safe to call at import time: nothing touches the filesystem until
    run_logging() opens the run log.
    """
    global _console_handler
    if _console_handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ColorFormatter(
                fmt=LOG_FORMAT,
                datefmt=LOG_DATE_FORMAT,
                use_color=sys.stderr.isatty(),
            )
        )
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
        _console_handler = handler

    return logging.getLogger(name or "reporter")


def run_log_path(logs_path: Path, interface: str, now: Optional[datetime] = None) -> Path:
    """logs/<interface>_<YYYYmmdd_HHMMSS>.log with the interface made filename-safe."""
    safe_interface = re.sub(r"[^\w.-]", "_", interface) or "unknown"
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return logs_path / f"{safe_interface}_{stamp}.log"


def _open_run_log(
    settings: Settings, base_dir: Optional[Union[str, Path]]
) -> Optional[RunLogHandler]:
    if not settings.logs_dir:
        return None

    logs_path = Path(base_dir or Path.cwd()) / settings.logs_dir
    try:
        logs_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Run log disabled, cannot create %s: %s", logs_path, exc)
        return None

    handler = RunLogHandler(run_log_path(logs_path, settings.interface))
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


@contextmanager
def run_logging(
    settings: Settings, base_dir: Optional[Union[str, Path]] = None
) -> Iterator[Optional[RunLogHandler]]:
    """
    Applies LOG_LEVEL and writes the enclosed run to its own log file.

    Yields the RunLogHandler, or None when LOGS_DIR is empty or unwritable.
    """
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    root_logger.setLevel(settings.log_level)
    handler = _open_run_log(settings, base_dir)
    if handler is not None:
        root_logger.addHandler(handler)
    try:
        yield handler
    finally:
        if handler is not None:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(previous_level)
