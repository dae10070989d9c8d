import logging

import pytest
from PySide6.QtCore import QtMsgType

from planeframe.logging_config import ROOT_LOGGER, qt_message_handler, setup_logging, setup_logging_from_env


@pytest.fixture
def package_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    for handler in handlers:
        logger.addHandler(handler)


def test_setup_twice_does_not_duplicate_handlers(package_logger):
    setup_logging(logging.INFO)
    setup_logging(logging.WARNING)

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING


def test_log_file(package_logger, tmp_path):
    path = tmp_path / "editor.log"

    setup_logging(logging.INFO, log_file=str(path))
    logging.getLogger("planeframe.model.io").info("saved model")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 2
    assert "planeframe.model.io - INFO - saved model" in path.read_text(encoding="utf-8")


def test_environment_selects_level_and_file(package_logger, tmp_path):
    path = tmp_path / "debug.log"

    setup_logging_from_env({"PLANEFRAME_DEBUG": "1", "PLANEFRAME_LOG_FILE": str(path)})
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 2

    setup_logging_from_env({})
    assert package_logger.level == logging.INFO
    assert len(package_logger.handlers) == 1


def test_qt_messages_are_forwarded(caplog):
    with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER):
        qt_message_handler(QtMsgType.QtWarningMsg, None, "QPainter::begin: Paint device returned engine == 0")

    record = caplog.records[-1]
    assert record.name == "planeframe.qt.default"
    assert record.levelno == logging.WARNING
    assert "QPainter::begin" in record.getMessage()
