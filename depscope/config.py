"""Configuration management for depscope.

Loads environment variables and provides centralized config access.
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv

from .analyzer.wc_defs import DEFAULT_CDN_DOMAINS

__version__ = "0.3.0"

DEFAULT_EXCLUDED_DIRS = {
    'node_modules', '.git', 'dist', 'build', 'coverage',
    '.next', '.cache', '.venv', 'venv', '__pycache__',
}


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: str | Path = None):
        """Initialize config by loading a .env file.

        Args:
            env_path: Explicit .env location; defaults to .env in the working directory
        """
        load_dotenv(Path(env_path) if env_path else Path.cwd() / ".env")
        self._validate()

    def _validate(self):
        """Validate environment values that have a fixed vocabulary.

        Raises:
            ValueError: If DEPSCOPE_LOG_LEVEL is not a logging level name
        """
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(
                f"DEPSCOPE_LOG_LEVEL must be a logging level name, got {self.log_level!r}"
            )

    @property
    def log_level(self) -> str:
        """Get log level name, WARNING unless DEPSCOPE_LOG_LEVEL is set."""
        return os.getenv("DEPSCOPE_LOG_LEVEL", "WARNING").upper()

    @property
    def cdn_domains(self) -> list[str]:
        """Get CDN hosts whose `<script src>` URLs produce CDN import records.

        Hosts from DEPSCOPE_CDN_DOMAINS are added to the built-in ones.

        Returns:
            List of host names
        """
        domains = list(DEFAULT_CDN_DOMAINS)
        for domain in _split_list(os.getenv("DEPSCOPE_CDN_DOMAINS", "")):
            if domain not in domains:
                domains.append(domain)
        return domains

    @property
    def excluded_dirs(self) -> set[str]:
        """Get directory names skipped by file discovery."""
        extra = _split_list(os.getenv("DEPSCOPE_EXCLUDED_DIRS", ""))
        return DEFAULT_EXCLUDED_DIRS | set(extra)

    @property
    def allowed_attribute_names(self) -> list[str]:
        return _split_list(os.getenv("DEPSCOPE_ALLOWED_ATTRIBUTE_NAMES", ""))

    @property
    def allowed_attribute_values(self) -> list[str]:
        return _split_list(os.getenv("DEPSCOPE_ALLOWED_ATTRIBUTE_VALUES", ""))

    @property
    def allowed_argument_values(self) -> list[str]:
        return _split_list(os.getenv("DEPSCOPE_ALLOWED_ARGUMENT_VALUES", ""))


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
