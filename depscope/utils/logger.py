"""Terminal-safe output helpers and logging setup.

Detects the terminal encoding so reports built from source-derived names,
paths and values do not crash on terminals that cannot encode them.
"""
import locale
import logging
import sys

from rich.logging import RichHandler


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (ValueError, LookupError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str) -> str:
    """Replace characters the terminal cannot encode with '?'.

    Args:
        text: Text that may carry source-derived names, paths or values

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    encoding = detect_terminal_encoding()
    try:
        return text.encode(encoding, errors='replace').decode(encoding)
    except LookupError:
        return text.encode('ascii', errors='replace').decode('ascii')


def setup_logging(level: str = 'WARNING', console=None) -> None:
    """Route the `depscope` logger hierarchy through a rich handler.

    Args:
        level: Logging level name
        console: Console to render log records on; rich's default when None
    """
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter('%(message)s'))

    package_logger = logging.getLogger('depscope')
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
