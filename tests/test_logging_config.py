import json
import logging
import sys
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from _pytest.logging import LogCaptureFixture

from permanent_record.config.settings import Settings
from permanent_record.logging_config import HANDLER_MARKER, LOG_NAME, JsonFormatter, get_logger


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, HANDLER_MARKER, False)]


def _remove_own_handlers() -> None:
    logger = logging.getLogger(LOG_NAME)
    for handler in _own_handlers(logger):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logger_handlers() -> Generator[None, None, None]:
    """Ensure tests run with a clean logger state; handlers owned by pytest stay put."""
    _remove_own_handlers()
    yield
    _remove_own_handlers()


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_returns_json_with_extras() -> None:
    formatter = JsonFormatter()
    record = _record()
    record.model = "Book"
    record.records = 4
    data = json.loads(formatter.format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "test"
    assert data["message"] == "hello"
    assert data["extra"] == {"model": "Book", "records": 4}
    assert "exception" not in data


def test_json_formatter_without_extras_has_no_extra_key() -> None:
    data = json.loads(JsonFormatter().format(_record()))
    assert "extra" not in data


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("bad source")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()
    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad source" in data["exception"]


def test_get_logger_stream_only_by_default() -> None:
    logger = get_logger(Settings())
    own = _own_handlers(logger)
    assert len(own) == 1
    assert isinstance(own[0], logging.StreamHandler)
    assert not isinstance(own[0], RotatingFileHandler)
    assert logger.level == logging.WARNING
    assert logger.propagate is False


def test_get_logger_adds_rotating_file_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "records.log"
    logger = get_logger(Settings(log_level="INFO", log_file=log_file))
    own = _own_handlers(logger)
    assert len(own) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in own)
    assert log_file.parent.is_dir()
    assert logger.level == logging.INFO


def test_get_logger_configures_once() -> None:
    first = get_logger(Settings())
    second = get_logger(Settings(log_level="DEBUG"))
    assert first is second
    assert len(_own_handlers(second)) == 1
    assert second.level == logging.WARNING


def test_logged_extras_survive_formatting(caplog: LogCaptureFixture) -> None:
    logger = get_logger(Settings())
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    logger.info("Loaded record data", extra={"model": "Book", "records": 4})
    logger.removeHandler(caplog.handler)
    assert len(caplog.records) == 1
    data = json.loads(JsonFormatter().format(caplog.records[0]))
    assert data["extra"]["model"] == "Book"
    assert data["extra"]["records"] == 4


def test_foreign_handler_does_not_count_as_configured() -> None:
    logger = logging.getLogger(LOG_NAME)
    foreign = logging.NullHandler()
    logger.addHandler(foreign)
    try:
        configured = get_logger(Settings(log_level="ERROR"))
        assert len(_own_handlers(configured)) == 1
        assert foreign in configured.handlers
        assert configured.level == logging.ERROR
    finally:
        logger.removeHandler(foreign)
