"""Exceptions raised by API Changelog."""


class ChangelogError(Exception):
    """Base class for every failure that aborts a changelog run."""


class DocumentLoadError(ChangelogError):
    """An input document is missing, unreadable or not an OpenAPI document."""


class DiffError(ChangelogError):
    """Comparing the two documents failed."""


class ChangelogWriteError(ChangelogError):
    """The changelog file could not be written."""


class ConfigError(ChangelogError):
    """The configuration file is missing or invalid."""
