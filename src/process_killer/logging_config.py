"""
Centralized logging configuration for the process killer.

stdout carries the kill report, so diagnostics go to:
- a console handler on stderr (WARNING, or DEBUG when verbose)
- an optional file handler, truncated on each run
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_UNKNOWN_LOGGER_NAME = "<unknown>"

LOG_FILE_NAME = "process_killer.log"

_TECHNICAL_FORMAT = "%(asctime)s%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_TECHNICAL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _close_handlers(logger: logging.Logger, logger_name: Optional[str] = None) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:  # Best-effort cleanup operation
            safe_name = logger_name if logger_name else _UNKNOWN_LOGGER_NAME
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", safe_name, e)


def _reset_all_handlers(root_logger: logging.Logger) -> None:
    """Close existing handlers and reset all loggers."""
    _close_handlers(root_logger)
    root_logger.handlers = []
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        target_logger = logging.getLogger(logger_name)
        _close_handlers(target_logger, logger_name)
        target_logger.handlers = []
        target_logger.propagate = True


def _build_console_handler(verbose: bool) -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stderr)
    if verbose:
        console_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _TECHNICAL_DATE_FORMAT))
        console_handler.setLevel(logging.DEBUG)
    else:
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        console_handler.setLevel(logging.WARNING)
    return console_handler


def _build_file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler_cls = getattr(logging.handlers, "WatchedFileHandler", logging.FileHandler)
    file_handler = handler_cls(log_file, mode="w")
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _TECHNICAL_DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def resolve_log_file(log_file: Optional[Path], log_dir: Optional[Path]) -> Optional[Path]:
    """An explicit file wins over the configured directory."""
    if log_file is not None:
        return log_file.expanduser()
    if log_dir is not None:
        return log_dir.expanduser() / LOG_FILE_NAME
    return None


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure logging for a process killer run"""

    with _config_lock:
        root_logger = logging.getLogger()
        _reset_all_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(verbose))
        if log_file is not None:
            root_logger.addHandler(_build_file_handler(log_file))

        root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


__all__ = ["LOG_FILE_NAME", "resolve_log_file", "setup_logging"]
