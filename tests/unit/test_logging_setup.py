"""
Unit tests for logging setup.
"""

import logging

import pytest

from zappingtv.config import LoggingConfig
from zappingtv.utils import log_exception, setup_from_config, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_to_file(self, temp_dir):
        log_file = temp_dir / "logs" / "zappingtv.log"

        logger = setup_logging("DEBUG", log_file)
        logging.getLogger("zappingtv.test").debug("hello from test")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "ZappingTV logging initialized - Level: DEBUG" in content
        assert "zappingtv.test - DEBUG - hello from test" in content

    def test_clear_truncates_previous_run(self, temp_dir):
        log_file = temp_dir / "zappingtv.log"
        log_file.write_text("old run\n")

        setup_logging("INFO", log_file, clear=True)

        assert "old run" not in log_file.read_text()

    def test_append_when_not_clearing(self, temp_dir):
        log_file = temp_dir / "zappingtv.log"
        log_file.write_text("old run\n")

        setup_logging("INFO", log_file, clear=False)

        assert log_file.read_text().startswith("old run")

    def test_replaces_existing_handlers(self, temp_dir):
        setup_logging("INFO", temp_dir / "a.log")
        logger = setup_logging("INFO", temp_dir / "b.log")

        assert len(logger.handlers) == 1

    def test_console_handler(self):
        logger = setup_logging("WARNING", None, log_to_console=True)

        assert logger.level == logging.WARNING
        assert [type(h) for h in logger.handlers] == [logging.StreamHandler]

    def test_quiets_httpx(self, temp_dir):
        setup_logging("DEBUG", temp_dir / "zappingtv.log")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, temp_dir):
        logger = setup_logging("CHATTY", temp_dir / "zappingtv.log")

        assert logger.level == logging.INFO


@pytest.mark.unit
class TestSetupFromConfig:
    """Tests for setup_from_config."""

    def test_uses_config_values(self, temp_dir):
        config = LoggingConfig(level="ERROR", file=str(temp_dir / "cfg.log"))

        logger = setup_from_config(config)

        assert logger.level == logging.ERROR
        assert (temp_dir / "cfg.log").exists()

    def test_level_override(self, temp_dir):
        config = LoggingConfig(level="ERROR", file=str(temp_dir / "cfg.log"))

        logger = setup_from_config(config, "DEBUG")

        assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_log_exception_includes_traceback(caplog):
    logger = logging.getLogger("zappingtv.test")

    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        with caplog.at_level(logging.ERROR):
            log_exception(logger, e, "Playback failed")

    record = caplog.records[-1]
    assert record.getMessage() == "Playback failed: boom"
    assert record.exc_info is not None
