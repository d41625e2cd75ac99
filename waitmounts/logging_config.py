import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

# Custom level between INFO and WARNING for completed operations
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

# [YYYY-MM-DD HH:MM:SS] LEVEL: message
LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_success(message: str) -> None:
    logging.log(SUCCESS, message)


def setup_logging(
    log_path: str,
    daemon_mode: bool,
    log_level: str = "INFO",
    console: Optional[Console] = None,
) -> List[logging.Handler]:
    """
    Configure the root logger: append-only log file, plus a Rich console
    handler in interactive mode. Daemon mode logs to the file only.

    Returns the installed handlers so the caller can release them on exit.
    """
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    handlers: List[logging.Handler] = [file_handler]

    if not daemon_mode:
        rich_handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format=f"[{DATE_FORMAT}]",
        )
        rich_handler.setLevel(log_level)
        handlers.append(rich_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    # Silence noisy third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug(
        f"Logging initialized - File: {log_path}, Level: {log_level}, "
        f"Console: {'off (daemon)' if daemon_mode else 'on'}"
    )
    return handlers


def teardown_logging(handlers: List[logging.Handler]) -> None:
    """Flush, detach and close handlers installed by setup_logging."""
    root_logger = logging.getLogger()
    for handler in handlers:
        handler.flush()
        root_logger.removeHandler(handler)
        handler.close()
