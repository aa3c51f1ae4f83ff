import pytest

import logutils
from logutils import DEBUG, ERROR, INFO, get_level, log_print, log_trace, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    setup_logging(ERROR)


def test_default_level_is_error():
    setup_logging()
    assert get_level() == ERROR


def test_messages_below_level_are_dropped(tmp_path):
    logfile = tmp_path / "quiet.log"
    setup_logging(ERROR, str(logfile))

    log_print(INFO, "not written", name="test.logutils.quiet")

    assert logfile.read_text(encoding="utf-8") == ""


def test_messages_go_to_log_file(tmp_path):
    logfile = tmp_path / "logs" / "zipdir.log"
    setup_logging(DEBUG, str(logfile))

    log_print(DEBUG, "scan started", name="test.logutils.file")

    text = logfile.read_text(encoding="utf-8")
    assert "[test.logutils.file] DEBUG: scan started" in text


def test_trace_includes_exception(tmp_path):
    logfile = tmp_path / "trace.log"
    setup_logging(DEBUG, str(logfile))

    try:
        raise ValueError("bad entry")
    except ValueError as e:
        log_trace(e, ERROR, "failed", name="test.logutils.trace")

    text = logfile.read_text(encoding="utf-8")
    assert "ERROR: failed" in text
    assert "ValueError: bad entry" in text


def test_switching_log_file_detaches_the_old_one(tmp_path):
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"

    setup_logging(DEBUG, str(first))
    log_print(DEBUG, "one", name="test.logutils.switch")
    setup_logging(DEBUG, str(second))
    log_print(DEBUG, "two", name="test.logutils.switch")

    assert "one" in first.read_text(encoding="utf-8")
    assert "two" not in first.read_text(encoding="utf-8")
    assert "two" in second.read_text(encoding="utf-8")


def test_logger_does_not_propagate():
    logger = logutils.get_logger("test.logutils.propagate")
    assert logger is logutils.get_logger("test.logutils.propagate")
    assert not logger.propagate
