"""Logging setup for novelwriter.

The root logger writes to the console (through rich) and to
``novelwriter.log`` at the requested level. Two channels also get files of
their own with a fixed floor level, so they stay complete even when the
console is quiet:

- ``history.log``: every save, snapshot, restore and import from ``workflow``.
- ``generation.log``: every request to the generative service.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
MAIN_LOG = "novelwriter.log"

# logger name -> (file name, floor level)
CHANNEL_LOGS = {
    "workflow": ("history.log", logging.INFO),
    "tools.agent_sdk_client": ("generation.log", logging.DEBUG),
}


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        str(path),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _reset_handlers(log: logging.Logger) -> None:
    for handler in log.handlers:
        if isinstance(handler, (RotatingFileHandler, RichHandler)):
            handler.close()
    log.handlers.clear()


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    console_enabled: bool = True,
    console: Optional[Console] = None,
) -> Path:
    """Configure the root logger and the channel logs. Safe to call again.

    Args:
        level: Level for the console and the main log file.
        log_dir: Directory for log files. Defaults to ./data/logs.
        console_enabled: Whether to log to the console at all.
        console: Rich console to log to, so log lines and CLI output share
            one stream. A new stderr console is used when omitted.

    Returns:
        The log directory.
    """
    log_dir = Path(log_dir or "./data/logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _reset_handlers(root_logger)

    if console_enabled:
        console_handler = RichHandler(
            console=console or Console(stderr=True),
            level=level,
            show_path=False,
            markup=False,
        )
        root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(log_dir / MAIN_LOG, level, formatter))

    for name, (filename, floor) in CHANNEL_LOGS.items():
        channel = logging.getLogger(name)
        _reset_handlers(channel)
        # Records below the root level still reach the channel file; root
        # handlers filter them by their own level.
        channel.setLevel(min(level, floor))
        channel.addHandler(_rotating_handler(log_dir / filename, floor, formatter))

    logging.getLogger(__name__).debug("Logging initialized: level=%s, dir=%s", level, log_dir)
    return log_dir
