"""Tests for terminal-safe output and logging setup."""
import logging

from rich.logging import RichHandler

from depscope.utils import logger as logger_module
from depscope.utils.logger import sanitize_for_terminal, setup_logging
from depscope.utils.safe_console import SafeConsole


def test_sanitize_on_ascii_terminal(monkeypatch):
    monkeypatch.setattr(logger_module, 'detect_terminal_encoding', lambda: 'ascii')
    assert sanitize_for_terminal('src/Ünits.jsx → Button') == 'src/?nits.jsx ? Button'


def test_sanitize_keeps_characters_the_terminal_encodes(monkeypatch):
    monkeypatch.setattr(logger_module, 'detect_terminal_encoding', lambda: 'cp1252')
    assert sanitize_for_terminal('café → menu') == 'café ? menu'


def test_sanitize_with_unknown_encoding(monkeypatch):
    monkeypatch.setattr(logger_module, 'detect_terminal_encoding', lambda: 'no-such-codec')
    assert sanitize_for_terminal('✓ done') == '? done'


def test_sanitize_on_utf8_terminal(monkeypatch):
    monkeypatch.setattr(logger_module, 'detect_terminal_encoding', lambda: 'UTF-8'.lower())
    assert sanitize_for_terminal('✓ done') == '✓ done'


def test_setup_logging_uses_rich_handler():
    console = SafeConsole(stderr=True)
    setup_logging('debug', console=console)

    package_logger = logging.getLogger('depscope')
    assert package_logger.level == logging.DEBUG
    assert not package_logger.propagate
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], RichHandler)

    setup_logging('warning', console=console)
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING
