import io
import logging

import pytest

from justcmd import Runner, command, run
from justcmd.config.schema import RunnerConfig
from justcmd.utils.logging_config import LIBRARY_LOGGER, configure_logging, parse_level


@pytest.fixture(autouse=True)
def restore_library_logger():
    logger = logging.getLogger(LIBRARY_LOGGER)
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_parse_level() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" Warning ") == logging.WARNING
    assert parse_level(logging.INFO) == logging.INFO
    assert parse_level("bogus", logging.ERROR) == logging.ERROR
    assert parse_level(None) is None


def test_configure_logging_writes_commands_to_stream() -> None:
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)

    run(command("echo", "hello world"))

    output = stream.getvalue()
    assert "justcmd.process: Running command: echo 'hello world'" in output
    assert "Command returned: 0" in output


def test_configure_logging_level_priority(monkeypatch) -> None:
    monkeypatch.setenv("JUSTCMD_LOG_LEVEL", "ERROR")
    assert configure_logging(stream=io.StringIO()).level == logging.ERROR
    assert configure_logging("INFO", stream=io.StringIO()).level == logging.INFO
    assert configure_logging(respect_env=False, stream=io.StringIO()).level == logging.WARNING


def test_configure_logging_replaces_its_own_handler() -> None:
    logger = logging.getLogger(LIBRARY_LOGGER)
    before = len(logger.handlers)
    first = io.StringIO()
    second = io.StringIO()
    configure_logging("INFO", stream=first)
    configure_logging("INFO", stream=second)

    logging.getLogger("justcmd.failure").info("only once")

    assert len(logger.handlers) == before + 1
    assert first.getvalue() == ""
    assert second.getvalue().count("only once") == 1
    assert logger.propagate is False


def test_runner_from_config_configures_logging() -> None:
    Runner.from_config(RunnerConfig(log_level="debug"))
    assert logging.getLogger(LIBRARY_LOGGER).level == logging.DEBUG


def test_commands_logged_at_debug(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="justcmd.process"):
        run(command("echo", "hello world"))
    assert "Running command: echo 'hello world'" in caplog.text
    assert "Command returned: 0" in caplog.text
