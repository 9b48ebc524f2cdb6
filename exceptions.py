"""Exception hierarchy for the WordPress to Markdown migration pipeline."""

from typing import Optional


class MigrationError(Exception):
    """Base exception for migration errors."""
    pass


class ParseError(MigrationError):
    """The export document does not have the expected rss/channel/item shape."""
    pass


class FetchError(MigrationError):
    """A single remote asset could not be downloaded or stored."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class WriteError(MigrationError):
    """A post directory or file could not be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ConfigError(MigrationError, ValueError):
    """Invalid configuration value."""
    pass


__all__ = ['MigrationError', 'ParseError', 'FetchError', 'WriteError', 'ConfigError']
