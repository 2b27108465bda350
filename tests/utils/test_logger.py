import logging

from utils.logger import get_logger


def test_get_logger_configures_single_handler(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    logger = get_logger("price-monitor.test.handlers")
    get_logger("price-monitor.test.handlers")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_get_logger_level_from_argument():
    assert get_logger("price-monitor.test.arg", level="debug").level == logging.DEBUG
    assert get_logger("price-monitor.test.arg-int", level=logging.ERROR).level == logging.ERROR


def test_get_logger_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    assert get_logger("price-monitor.test.env").level == logging.WARNING


def test_get_logger_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert get_logger("price-monitor.test.bad").level == logging.INFO
