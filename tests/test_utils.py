import logging

from toongraph.utils import err_console, get_logger, logger, set_log_level


def test_log_records_go_to_stderr(capsys):
    handler = get_logger().handlers[0]
    assert handler.console is err_console

    set_log_level("DEBUG")
    try:
        logger.debug("decoder-marker")
    finally:
        logger.setLevel(logging.INFO)
    out, err = capsys.readouterr()
    assert "decoder-marker" not in out
    assert "decoder-marker" in err


def test_unknown_level_falls_back_to_info():
    set_log_level("chatty")
    assert logger.level == logging.INFO
