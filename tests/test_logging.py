import logging

from aitools.foundation.logging_utils import LOGGER_NAME, setup_operational_logger


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_operational_log_file_is_utf8(tmp_path):
    logger, log_file = setup_operational_logger(str(tmp_path / "logs"), "run1")
    try:
        logger.info("Saved report for query → café")
    finally:
        _close_handlers(logger)

    assert log_file == str(tmp_path / "logs" / "run1_oplog.log")
    content = (tmp_path / "logs" / "run1_oplog.log").read_text(encoding="utf-8")
    assert "Saved report for query → café" in content
    assert " | INFO | " in content


def test_stream_only_when_no_log_dir(capsys):
    logger, log_file = setup_operational_logger(None, "run2", level="WARNING")
    try:
        logger.info("quiet")
        logger.warning("loud")
    finally:
        _close_handlers(logger)

    assert log_file is None
    assert logger.name == LOGGER_NAME
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "loud" in captured.err
    assert "quiet" not in captured.err


def test_repeated_setup_does_not_stack_handlers(tmp_path):
    setup_operational_logger(None, "a")
    logger, _ = setup_operational_logger(None, "b")
    try:
        assert len(logger.handlers) == 1
    finally:
        _close_handlers(logger)
