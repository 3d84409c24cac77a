import logging

from sentinel_scanner.core.log import LOGGER_NAME, configure_logging, resolve_level  # type: ignore[import]


def test_resolve_level_prefers_verbose_flag():
    assert resolve_level(verbose=True, env_value="ERROR") == logging.DEBUG


def test_resolve_level_reads_level_names():
    assert resolve_level(env_value="warning") == logging.WARNING
    assert resolve_level(env_value="bogus") == logging.INFO
    assert resolve_level(env_value="") == logging.INFO


def test_configure_logging_installs_a_single_handler():
    logger = logging.getLogger(LOGGER_NAME)
    before = list(logger.handlers)
    try:
        configure_logging()
        configure_logging(verbose=True)

        added = [handler for handler in logger.handlers if handler not in before]
        assert len(added) <= 1
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            if handler not in before:
                logger.removeHandler(handler)
