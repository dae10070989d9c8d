"""
Logging Configuration
=====================
All editor modules log through `logging.getLogger(__name__)`, i.e. below the
`planeframe` logger configured here. Qt's own diagnostics (qWarning and
friends) are forwarded into the same logger tree.

Environment:
    PLANEFRAME_DEBUG: Any non-empty value switches to DEBUG, which shows mode
        changes, rejected clicks and skipped grids.
    PLANEFRAME_LOG_FILE: Also write the log to this file.
"""
import logging
import os
import sys
from typing import Mapping, Optional

from PySide6.QtCore import QMessageLogContext, QtMsgType, qInstallMessageHandler

ROOT_LOGGER = "planeframe"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a stdout handler (and optionally a file handler) to the `planeframe` logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        level: Threshold for the logger and its handlers.
        log_file: Optional path; the file is overwritten on each start.

    Returns:
        The configured `planeframe` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    return logger


def setup_logging_from_env(environ: Mapping[str, str] = os.environ) -> logging.Logger:
    level = logging.DEBUG if environ.get("PLANEFRAME_DEBUG") else logging.INFO
    return setup_logging(level=level, log_file=environ.get("PLANEFRAME_LOG_FILE") or None)


def qt_message_handler(msg_type: QtMsgType, context: QMessageLogContext, message: str) -> None:
    category = context.category if context is not None and context.category else "default"
    logger = logging.getLogger(f"{ROOT_LOGGER}.qt.{category}")
    logger.log(_QT_LEVELS.get(msg_type, logging.WARNING), message)


def install_qt_message_handler() -> None:
    """Route Qt's internal messages to the `planeframe.qt` loggers."""
    qInstallMessageHandler(qt_message_handler)
