"""Encoding-safe Console wrapper for the Rich library.

Wraps Rich's Console to replace unencodable characters in printed text
on terminals that don't support UTF-8.
"""
from typing import Any

from rich.console import Console

from .logger import is_utf8_capable, sanitize_for_terminal


class SafeConsole(Console):
    """Console that replaces unencodable characters on non-UTF-8 terminals."""

    def __init__(self, *args, **kwargs):
        """Initialize SafeConsole with UTF-8 capability detection.

        All arguments are passed through to Rich's Console.
        """
        self._needs_sanitization = not is_utf8_capable()
        if self._needs_sanitization:
            kwargs['legacy_windows'] = True
        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization.

        Args:
            *objects: Objects to print (same as Rich Console.print)
            **kwargs: Keyword arguments (same as Rich Console.print)
        """
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)
