"""Tests for wren.logs and the lazy top-level exports."""

import logging

import pytest

import wren
from wren.logs import configure_logging


@pytest.fixture
def clean_wren_logger():
    root = logging.getLogger("wren")
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestConfigureLogging:
    def test_sets_level(self, clean_wren_logger) -> None:
        configure_logging("debug")
        assert clean_wren_logger.level == logging.DEBUG

    def test_accepts_int(self, clean_wren_logger) -> None:
        configure_logging(logging.WARNING)
        assert clean_wren_logger.level == logging.WARNING

    def test_handler_not_stacked(self, clean_wren_logger) -> None:
        before = len(clean_wren_logger.handlers)
        configure_logging("info")
        configure_logging("info")
        assert len(clean_wren_logger.handlers) == before + 1

    def test_unknown_level(self, clean_wren_logger) -> None:
        with pytest.raises(ValueError, match="loud"):
            configure_logging("loud")


class TestLazyExports:
    def test_public_names_resolve(self) -> None:
        for name in wren.__all__:
            assert getattr(wren, name) is not None

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError):
            wren.DoesNotExist  # noqa: B018

    def test_app_identity(self) -> None:
        from wren.app import App

        assert wren.App is App
