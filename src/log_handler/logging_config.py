# src/log_handler/logging_config.py
import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import Dict, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Configure logging only once per process
_log_listener: Optional[QueueListener] = None
_queue_handler: Optional[QueueHandler] = None


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    module_levels: Optional[Dict[str, Union[int, str]]] = None,
) -> QueueListener:
    """
    Central logging configuration for the autoscaler.

    Records are handed to a queue on the calling thread and written by a
    listener thread, so ticks never block on console or file I/O.

    Args:
        log_level: Root level, as a ``logging`` constant or a name like "DEBUG"
        log_file: Optional path for a rotating log file
        module_levels: Per-logger overrides, e.g. {"src.autoscaler.ticker": "WARNING"}

    Returns:
        The running QueueListener
    """
    global _log_listener, _queue_handler

    if _log_listener is not None:
        return _log_listener

    if log_file and os.path.dirname(log_file):
        os.makedirs(os.path.dirname(log_file), exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue()
    _queue_handler = QueueHandler(log_queue)
    listener = QueueListener(log_queue, *handlers, respect_handler_level=True)

    root_logger = logging.getLogger()
    root_logger.addHandler(_queue_handler)
    root_logger.setLevel(log_level.upper() if isinstance(log_level, str) else log_level)

    for module_name, level in (module_levels or {}).items():
        logging.getLogger(module_name).setLevel(level.upper() if isinstance(level, str) else level)

    listener.start()
    _log_listener = listener
    return listener


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush queued records and detach the queue handler."""
    global _log_listener, _queue_handler

    if _log_listener is not None:
        _log_listener.stop()
        _log_listener = None
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None
