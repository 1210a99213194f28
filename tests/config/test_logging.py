"""Tests for structlog configuration."""

import logging

from gamestats.config.logging import APP_LOGGER, configure_logging, resolve_level


class TestResolveLevel:
    def test_default(self) -> None:
        assert resolve_level() == logging.WARNING

    def test_verbose(self) -> None:
        assert resolve_level(verbose=True) == logging.DEBUG

    def test_quiet(self) -> None:
        assert resolve_level(quiet=True) == logging.ERROR

    def test_verbose_wins(self) -> None:
        assert resolve_level(verbose=True, quiet=True) == logging.DEBUG


class TestConfigureLogging:
    def test_sets_app_level(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(APP_LOGGER).level == logging.DEBUG
        configure_logging()
        assert logging.getLogger(APP_LOGGER).level == logging.WARNING

    def test_single_root_handler(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_markdown_library_kept_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("markdown_it").level == logging.WARNING
